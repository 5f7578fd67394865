"""
Tracker Analysis Orchestrator - runs the snapshot pipeline for one request.

decode envelope -> normalize stages -> timeline / key stages / analytics
-> assemble result

The orchestrator holds no per-request state; every run builds and discards
its own envelope, snapshots and accumulators. A TrackerError anywhere in the
chain becomes a single structured error object, never a partial result.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tftsight.core.config import TFTSightConfig, get_config
from tftsight.core.constants import OutputMode
from tftsight.core.errors import NotFoundError, TrackerError
from tftsight.core.utils import PerformanceMonitor
from tftsight.integrations.names import NameLookup, NameResolver
from tftsight.tracker.assembler import assemble_result
from tftsight.tracker.envelope import decode_envelope
from tftsight.tracker.normalizer import normalize_stages

logger = logging.getLogger(__name__)


class TrackerRequest(BaseModel):
    """Request parameters for one tracker analysis."""

    model_config = ConfigDict(populate_by_name=True)

    match_identifier: str = Field(
        default="", alias="matchIdentifier", description="Riot match id, platform prefix optional"
    )
    mode: OutputMode = Field(
        default=OutputMode.SUMMARY, description="summary or complete; anything else means summary"
    )
    player_name: str | None = Field(
        default=None, alias="playerName", description="Game name used to pick round outcomes"
    )

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> OutputMode:
        return OutputMode.coerce(value)

    @field_validator("match_identifier", mode="before")
    @classmethod
    def _coerce_match_identifier(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()


class TrackerOrchestrator:
    """
    Orchestrates the tracker snapshot pipeline.

    Handles:
    - Envelope decoding (gzip or plain)
    - Stage normalization
    - Result assembly in summary or complete mode
    - Conversion of TrackerError into a structured error object
    """

    def __init__(self, names: NameLookup | None = None, config: TFTSightConfig | None = None):
        self.names = names if names is not None else NameResolver()
        self.config = config if config is not None else get_config()

    def _player_name(self, request: TrackerRequest, summoner_name: str) -> str:
        """Requested name, else the configured one, else the game-name part of the snapshot's."""
        if request.player_name:
            return request.player_name
        if self.config.tracker.game_name:
            return str(self.config.tracker.game_name)
        return summoner_name.split("#", 1)[0]

    def analyze(self, raw: bytes | str, request: TrackerRequest | None = None) -> dict:
        """
        Run the pipeline, raising on failure.

        Args:
            raw: Snapshot bytes as delivered by the byte source
            request: Request parameters (default: no match id, summary mode)

        Returns:
            Assembled tracker result dict

        Raises:
            MalformedEnvelopeError: If the envelope cannot be parsed
        """
        if request is None:
            request = TrackerRequest()

        with PerformanceMonitor(f"tracker analysis ({request.mode})"):
            envelope = decode_envelope(raw)
            stages = normalize_stages(envelope.stage_data)
            logger.info(
                f"Analyzing tracker snapshot {envelope.tracker_id or '?'}: "
                f"{len(stages)} rounds, mode={request.mode}"
            )

            return assemble_result(
                envelope,
                stages,
                self.names,
                mode=request.mode,
                match_id=request.match_identifier or envelope.match_id,
                player_name=self._player_name(request, envelope.summoner_name),
                key_rounds=self.config.tracker.key_rounds,
                carry_limit=self.config.tracker.top_carries,
            )

    def run(self, raw: bytes | str | None, request: TrackerRequest | None = None) -> dict:
        """
        Run the pipeline and return either a result or a structured error.

        ``raw`` is None when the byte source reported no snapshot; nothing is
        executed in that case.
        """
        if raw is None:
            match_label = request.match_identifier if request else ""
            logger.warning(f"No tracker snapshot for match {match_label or '?'}")
            return NotFoundError(f"No tracker data for match {match_label}".strip()).to_dict()

        try:
            return self.analyze(raw, request)
        except TrackerError as e:
            logger.warning(f"Tracker analysis failed ({e.code}): {e.message}")
            return e.to_dict()


def analyze_tracker(
    raw: bytes | str,
    mode: str | None = None,
    match_identifier: str = "",
    player_name: str | None = None,
    names: NameLookup | None = None,
) -> dict:
    """
    Convenience function for one-shot analysis.

    Returns:
        Tracker result dict, or a structured error dict with "error" and "code"
    """
    request = TrackerRequest(mode=mode, match_identifier=match_identifier, player_name=player_name)
    return TrackerOrchestrator(names=names).run(raw, request)


def render_json(result: dict, indent: int | None = 2) -> str:
    """Deterministic JSON text for a result or error dict."""
    return json.dumps(result, indent=indent, ensure_ascii=False)
