"""
TFTSight Tracker - snapshot decoding and match analytics.

- envelope: raw bytes -> RawEnvelope
- normalizer: raw stage records -> StageSnapshot
- timeline: compact per-round progression and economy totals
- key_stages: decision points for the summary view
- analytics: carry ranking
- assembler: summary / complete result shapes
"""

from tftsight.tracker.analytics import CarryStats, calculate_carry_stats, calculate_economy_totals
from tftsight.tracker.assembler import assemble_result, format_stage
from tftsight.tracker.envelope import decode_envelope, decode_stage_data, parse_envelope
from tftsight.tracker.key_stages import select_key_indices, select_key_stages
from tftsight.tracker.models import (
    BoardPiece,
    PlayerStatus,
    RawEnvelope,
    StageMetrics,
    StageSnapshot,
    UnitDamageRecord,
)
from tftsight.tracker.normalizer import normalize_stage, normalize_stages
from tftsight.tracker.timeline import EconomyTotals, RoundTimeline, build_round_timeline

__all__ = [
    "BoardPiece",
    "CarryStats",
    "EconomyTotals",
    "PlayerStatus",
    "RawEnvelope",
    "RoundTimeline",
    "StageMetrics",
    "StageSnapshot",
    "UnitDamageRecord",
    "assemble_result",
    "build_round_timeline",
    "calculate_carry_stats",
    "calculate_economy_totals",
    "decode_envelope",
    "decode_stage_data",
    "format_stage",
    "normalize_stage",
    "normalize_stages",
    "parse_envelope",
    "select_key_indices",
    "select_key_stages",
]
