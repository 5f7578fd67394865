"""
Envelope Decoder for tracker snapshots.

Turns the raw bytes of a stored snapshot into a RawEnvelope:

1. gunzip the buffer; storage may or may not compress payloads, so a buffer
   that is not gzip data is read as plain UTF-8 instead
2. parse the outer JSON object
3. decode the embedded ``stage_data`` field, which is normally a JSON string
   holding an array but is accepted as an already-decoded array too

Only an unparsable envelope or a stage field that is not an array raises.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from typing import Any

from tftsight.core.errors import MalformedEnvelopeError
from tftsight.core.utils import safe_str
from tftsight.tracker.models import RawEnvelope

logger = logging.getLogger(__name__)


def decompress_payload(raw: bytes) -> str:
    """
    Return the snapshot text, gunzipping it when possible.

    Args:
        raw: Bytes as delivered by the byte source

    Returns:
        Decoded text (invalid UTF-8 sequences are replaced, not rejected)
    """
    try:
        data = gzip.decompress(raw)
        logger.debug(f"Snapshot payload was gzip-compressed ({len(raw)} -> {len(data)} bytes)")
    except (OSError, EOFError, zlib.error):
        data = raw
        logger.debug(f"Snapshot payload is not compressed ({len(raw)} bytes)")
    return data.decode("utf-8", errors="replace")


def decode_stage_data(stage_data: Any) -> list[Any]:
    """
    Decode the embedded stage array.

    Args:
        stage_data: JSON string holding an array, or an array already

    Returns:
        List of raw stage records in temporal order

    Raises:
        MalformedEnvelopeError: If the value is not (and does not decode to) an array
    """
    if isinstance(stage_data, (bytes, bytearray)):
        stage_data = stage_data.decode("utf-8", errors="replace")

    if isinstance(stage_data, str):
        try:
            stage_data = json.loads(stage_data)
        except json.JSONDecodeError as e:
            raise MalformedEnvelopeError(f"stage_data is not valid JSON: {e}") from e

    if isinstance(stage_data, tuple):
        stage_data = list(stage_data)

    if not isinstance(stage_data, list):
        raise MalformedEnvelopeError(
            f"stage_data must be an array, got {type(stage_data).__name__}"
        )
    return stage_data


def parse_envelope(document: Any) -> RawEnvelope:
    """
    Build a RawEnvelope from an already-parsed envelope object.

    Raises:
        MalformedEnvelopeError: If the document is not an object or its stage data is invalid
    """
    if not isinstance(document, dict):
        raise MalformedEnvelopeError(
            f"Envelope must be a JSON object, got {type(document).__name__}"
        )

    if "stage_data" not in document:
        raise MalformedEnvelopeError("Envelope has no stage_data field")

    stages = decode_stage_data(document["stage_data"])

    return RawEnvelope(
        match_id=safe_str(document.get("match_id")),
        server=safe_str(document.get("server")),
        summoner_name=safe_str(document.get("summoner_name")),
        tracker_id=safe_str(document.get("uuid")),
        stage_data=stages,
        portal=_optional_str(document.get("portal")),
        rank_label=_optional_str(document.get("summoner_tier")),
        set_name=_optional_str(document.get("tft_set_core_name")),
    )


def decode_envelope(raw: bytes | str) -> RawEnvelope:
    """
    Decode a stored tracker snapshot.

    Args:
        raw: Snapshot bytes (gzip or plain) or text

    Returns:
        RawEnvelope holding metadata and the decoded stage records

    Raises:
        MalformedEnvelopeError: If the envelope cannot be parsed at all
    """
    text = raw if isinstance(raw, str) else decompress_payload(bytes(raw))

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedEnvelopeError(f"Snapshot is not valid JSON: {e}") from e

    envelope = parse_envelope(document)
    logger.debug(
        f"Decoded envelope for match {envelope.match_id or '?'}: "
        f"{len(envelope.stage_data)} stage records"
    )
    return envelope


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
