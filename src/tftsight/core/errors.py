"""
Error taxonomy for the tracker pipeline.

Only two conditions stop a tracker request: the snapshot does not exist
(raised by the byte source) or the envelope cannot be parsed at all.
Everything inside a parsed stage degrades to defaults instead of raising.
"""

from __future__ import annotations

from typing import Any


class TrackerError(Exception):
    """Base class for failures that end a tracker request with a structured error."""

    code = "TRACKER_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Structured error object returned to the caller instead of a result."""
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        for key, value in self.details.items():
            if value is not None:
                payload[_camel(key)] = value
        return payload


def _camel(name: str) -> str:
    """available_matches -> availableMatches"""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class MalformedEnvelopeError(TrackerError):
    """The outer envelope or its stage array could not be parsed."""

    code = "MALFORMED_ENVELOPE"


class NotFoundError(TrackerError):
    """No tracker snapshot exists for the requested match."""

    code = "TRACKER_NOT_FOUND"


class SourceError(TrackerError):
    """The byte source failed to deliver a snapshot (HTTP error, timeout)."""

    code = "SOURCE_ERROR"
