"""
Normalized tracker data model.

One RawEnvelope and one StageSnapshot per round are built for each tracker
request and discarded afterwards. Every optional upstream field has an
explicit default here so later stages never check for presence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tftsight.core.constants import RoundType


@dataclass
class RawEnvelope:
    """Outer snapshot object with match metadata and the embedded stage array."""

    match_id: str
    server: str
    summoner_name: str
    tracker_id: str  # "uuid" upstream
    stage_data: list[Any]  # decoded stage records, not yet normalized
    portal: str | None = None
    rank_label: str | None = None  # "summoner_tier" upstream
    set_name: str | None = None  # "tft_set_core_name" upstream


@dataclass
class BoardPiece:
    """A unit on the board or bench."""

    unit_id: str
    star_level: int = 1
    item_ids: list[str] = field(default_factory=list)  # 0-3 entries, no gaps


@dataclass
class UnitDamageRecord:
    """Damage dealt by one of the player's units during a round."""

    unit_id: str
    damage: float = 0.0
    star_level: int = 0


@dataclass
class PlayerStatus:
    """A lobby player's state in a round."""

    name: str
    health: int = 0
    level: int = 0
    tag_line: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.name}#{self.tag_line}" if self.tag_line else self.name


@dataclass
class StageMetrics:
    """Board valuation reported by the overlay, when present."""

    board_strength: float | None = None
    board_cost: int | None = None
    bench_cost: int | None = None


@dataclass
class StageSnapshot:
    """
    One round of the match, normalized.

    ``round_outcome`` keeps the upstream mapping of player name -> outcome
    ("win"/"loss"); the requesting player's entry is picked at aggregation time.
    """

    round_label: str = ""
    round_type: RoundType = RoundType.UNKNOWN
    round_name: str = ""
    opponent_name: str | None = None
    health: int = 0
    gold: int = 0
    level: int = 0
    has_player_state: bool = False  # "me" block present upstream
    gold_earned: int | None = None
    rerolls: int | None = None
    board_pieces: list[BoardPiece] = field(default_factory=list)
    bench_pieces: list[BoardPiece] = field(default_factory=list)
    unit_damage: list[UnitDamageRecord] = field(default_factory=list)
    all_player_status: list[PlayerStatus] = field(default_factory=list)
    shop_contents: list[str] = field(default_factory=list)
    round_outcome: dict[str, str] = field(default_factory=dict)
    metrics: StageMetrics | None = None

    @property
    def board_size(self) -> int:
        return len(self.board_pieces)
