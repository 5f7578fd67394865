"""
Timeline Aggregator - compact per-round HP / economy progression.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tftsight.core.schemas import RoundSummary
from tftsight.tracker.models import StageSnapshot

logger = logging.getLogger(__name__)


@dataclass
class EconomyTotals:
    """Running economy totals across the match."""

    total_rerolls: int = 0
    total_income: int = 0

    def add(self, stage: StageSnapshot) -> None:
        self.total_rerolls += stage.rerolls or 0
        self.total_income += stage.gold_earned or 0


@dataclass
class RoundTimeline:
    rounds: list[RoundSummary] = field(default_factory=list)
    economy: EconomyTotals = field(default_factory=EconomyTotals)


def find_player_outcome(round_outcome: dict[str, str], player_name: str) -> str | None:
    """
    Outcome entry for the requesting player.

    Matches the first key that contains ``player_name`` case-insensitively.
    Two lobby names that both contain the player's name are not told apart:
    the first one in upstream order wins.
    """
    if not player_name:
        return None
    needle = player_name.lower()
    for name, outcome in round_outcome.items():
        if needle in name.lower():
            return outcome
    return None


def summarize_round(index: int, stage: StageSnapshot, player_name: str = "") -> RoundSummary:
    """
    Compact summary of one round.

    Args:
        index: 0-based position in the stage sequence
        stage: Normalized snapshot
        player_name: Game name used to pick the round outcome
    """
    summary: RoundSummary = {
        "round": index + 1,
        "stage": stage.round_label,
        "type": str(stage.round_type),
        "hp": stage.health,
        "gold": stage.gold,
        "level": stage.level,
        "boardSize": stage.board_size,
    }

    # Zero income / rerolls are left out to keep the list short
    if stage.gold_earned:
        summary["income"] = stage.gold_earned
    if stage.rerolls:
        summary["rerolls"] = stage.rerolls

    if stage.round_outcome:
        outcome = find_player_outcome(stage.round_outcome, player_name)
        if outcome is not None:
            summary["outcome"] = outcome

    return summary


def build_round_timeline(stages: list[StageSnapshot], player_name: str = "") -> RoundTimeline:
    """
    Walk the stage sequence once, building round summaries and economy totals.

    Args:
        stages: Normalized snapshots in temporal order
        player_name: Game name used to pick each round's outcome

    Returns:
        RoundTimeline with one summary per stage and the running totals
    """
    timeline = RoundTimeline()
    for index, stage in enumerate(stages):
        timeline.rounds.append(summarize_round(index, stage, player_name))
        timeline.economy.add(stage)

    logger.debug(
        f"Built timeline: {len(timeline.rounds)} rounds, "
        f"{timeline.economy.total_rerolls} rerolls, {timeline.economy.total_income} income"
    )
    return timeline
