"""
Carry and economy analytics across a whole match.

Carry ranking folds every positive unit-damage record into per-unit totals
keyed by display name, so a unit reported under two ids that resolve to the
same name counts once. Units are ranked by total damage; ties keep the
order in which units first dealt damage.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from tftsight.core.constants import TOP_CARRY_COUNT
from tftsight.core.schemas import CarryEntry
from tftsight.core.utils import compact_number, round_half_up
from tftsight.integrations.names import NameLookup
from tftsight.tracker.models import StageSnapshot
from tftsight.tracker.timeline import EconomyTotals

logger = logging.getLogger(__name__)


@dataclass
class CarryStats:
    """Damage totals for one unit across the match."""

    champion: str
    total_damage: float
    rounds_played: int
    max_stars: int

    @property
    def avg_damage(self) -> float:
        if self.rounds_played == 0:
            return 0.0
        return self.total_damage / self.rounds_played

    def to_dict(self) -> CarryEntry:
        return {
            "champion": self.champion,
            "totalDamage": compact_number(self.total_damage),
            "avgDamage": round_half_up(self.avg_damage),
            "roundsPlayed": self.rounds_played,
            "maxStars": self.max_stars,
        }


def damage_frame(stages: Sequence[StageSnapshot], names: NameLookup) -> pd.DataFrame:
    """
    One row per positive unit-damage record, in stage order.

    Columns: stage_index, champion (display name), damage, stars.
    """
    rows = []
    for index, stage in enumerate(stages):
        for record in stage.unit_damage:
            if record.damage <= 0:
                continue
            rows.append(
                {
                    "stage_index": index,
                    "champion": names.resolve("champion", record.unit_id),
                    "damage": float(record.damage),
                    "stars": int(record.star_level),
                }
            )
    return pd.DataFrame(rows, columns=["stage_index", "champion", "damage", "stars"])


def calculate_carry_stats(stages: Sequence[StageSnapshot], names: NameLookup) -> list[CarryStats]:
    """
    Rank units by total damage dealt across the match.

    Args:
        stages: Normalized snapshots in temporal order
        names: Name resolver used to key units by display name

    Returns:
        CarryStats sorted by total damage, descending; ties in first-seen order
    """
    df = damage_frame(stages, names)
    if df.empty:
        return []

    # sort=False keeps first-appearance order, the stable sort then preserves it for ties
    grouped = df.groupby("champion", sort=False).agg(
        total_damage=("damage", "sum"),
        rounds_played=("damage", "size"),
        max_stars=("stars", "max"),
    )
    grouped = grouped.sort_values("total_damage", ascending=False, kind="stable")

    carries = [
        CarryStats(
            champion=str(champion),
            total_damage=float(row.total_damage),
            rounds_played=int(row.rounds_played),
            max_stars=max(int(row.max_stars), 0),
        )
        for champion, row in grouped.iterrows()
    ]
    logger.debug(f"Carry ranking over {len(df)} damage records: {len(carries)} units")
    return carries


def top_carries(
    stages: Sequence[StageSnapshot], names: NameLookup, limit: int = TOP_CARRY_COUNT
) -> list[CarryEntry]:
    """Top ``limit`` carries as result entries."""
    return [carry.to_dict() for carry in calculate_carry_stats(stages, names)[: max(limit, 0)]]


def calculate_economy_totals(stages: Sequence[StageSnapshot]) -> EconomyTotals:
    """Total rerolls and income over the match; absent values count as 0."""
    totals = EconomyTotals()
    for stage in stages:
        totals.add(stage)
    return totals
