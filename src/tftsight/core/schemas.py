"""
TFTSight Data Contracts

Every structure that leaves the tracker pipeline is defined here.
If a consumer needs a field that doesn't exist here, ADD IT HERE FIRST,
then update the assembler and pipeline/contract.py.

Producers: tracker/timeline.py, tracker/analytics.py, tracker/assembler.py
Consumers: pipeline/orchestrator.py, cli.py
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

# ============================================================
# ROUND PROGRESSION (compact, summary mode only)
# ============================================================


class RoundSummary(TypedDict):
    """One round in the compact HP / economy list."""

    round: int  # 1-based position in the stage sequence
    stage: str  # round label, "" when the overlay did not report one
    type: str  # "PVE", "PVP" or "unknown"
    hp: int
    gold: int
    level: int
    boardSize: int
    income: NotRequired[int]  # omitted when zero
    rerolls: NotRequired[int]  # omitted when zero
    outcome: NotRequired[str]  # requesting player's outcome, when found


# ============================================================
# DETAILED STAGE SNAPSHOT
# ============================================================


class UnitEntry(TypedDict):
    """A unit on the board or bench, with display names."""

    champion: str
    stars: int
    items: NotRequired[list[str]]  # board only


class UnitDamageEntry(TypedDict):
    champion: str
    damage: int | float
    stars: int


class PlayerEntry(TypedDict):
    """One lobby player's health in a round."""

    name: str  # "name#tag" when the overlay reported a tag line
    health: int
    level: int


class PlayerState(TypedDict):
    health: int
    gold: int
    level: int


class StageMetricsEntry(TypedDict, total=False):
    boardStrength: float
    boardCost: int
    benchCost: int


class StageDetail(TypedDict):
    """Full snapshot of one round."""

    stageNumber: int
    stage: NotRequired[str]
    roundType: NotRequired[str]
    roundName: NotRequired[str]
    opponent: NotRequired[str]
    player: PlayerState
    goldEarned: NotRequired[int]
    rerolls: NotRequired[int]
    board: NotRequired[list[UnitEntry]]
    bench: NotRequired[list[UnitEntry]]
    unitDamage: NotRequired[list[UnitDamageEntry]]
    allPlayers: NotRequired[list[PlayerEntry]]
    shop: NotRequired[list[str]]
    metrics: NotRequired[StageMetricsEntry]


# ============================================================
# ANALYTICS
# ============================================================


class CarryEntry(TypedDict):
    """One unit's damage across the match."""

    champion: str
    totalDamage: int | float
    avgDamage: int  # rounded half up
    roundsPlayed: int
    maxStars: int


class EconomySummary(TypedDict):
    startingHealth: int
    finalHealth: int
    finalGold: int
    totalRerolls: int
    totalIncome: int


# ============================================================
# TRACKER RESULT: the top-level response
# ============================================================


class TrackerResult(TypedDict):
    """
    The assembled result returned by TrackerOrchestrator.
    THIS IS THE CONTRACT. pipeline/contract.py mirrors it for runtime checks.
    """

    matchId: str
    trackerUuid: str
    server: str
    summonerName: str
    mode: str  # "summary" or "complete"
    portal: str | None
    rank: str | None
    set: str | None
    totalRounds: int
    summary: EconomySummary
    topCarries: list[CarryEntry]
    finalBoard: list[UnitEntry]
    stageProgression: list[StageDetail]
    roundProgression: NotRequired[list[RoundSummary]]  # summary mode only


class TrackerErrorResult(TypedDict):
    """Structured failure. Never accompanied by a partial result."""

    error: str
    code: str
    reason: NotRequired[str]
    tip: NotRequired[str]
    availableMatches: NotRequired[list[dict]]
