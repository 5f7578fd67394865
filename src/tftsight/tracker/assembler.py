"""
Output Assembler - builds the tracker result in summary or complete mode.

summary:  compact round progression for every round, detailed snapshots
          only for the key stages
complete: detailed snapshots for every round, no compact progression

Both modes carry the final board, the top carries and the economy summary.
Unit and item ids are always passed through the name resolver; raw ids
never reach the result.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tftsight.core.constants import (
    DEFAULT_STARTING_HEALTH,
    TOP_CARRY_COUNT,
    OutputMode,
    RoundType,
)
from tftsight.core.schemas import (
    EconomySummary,
    PlayerEntry,
    StageDetail,
    StageMetricsEntry,
    TrackerResult,
    UnitDamageEntry,
    UnitEntry,
)
from tftsight.core.utils import compact_number
from tftsight.integrations.names import NameLookup
from tftsight.tracker.analytics import calculate_economy_totals, top_carries
from tftsight.tracker.key_stages import select_key_stages
from tftsight.tracker.models import BoardPiece, RawEnvelope, StageSnapshot
from tftsight.tracker.timeline import build_round_timeline

logger = logging.getLogger(__name__)


def format_board(pieces: Sequence[BoardPiece], names: NameLookup) -> list[UnitEntry]:
    return [
        {
            "champion": names.resolve("champion", piece.unit_id),
            "stars": piece.star_level,
            "items": [names.resolve("item", item_id) for item_id in piece.item_ids],
        }
        for piece in pieces
    ]


def format_bench(pieces: Sequence[BoardPiece], names: NameLookup) -> list[UnitEntry]:
    return [
        {"champion": names.resolve("champion", piece.unit_id), "stars": piece.star_level}
        for piece in pieces
    ]


def format_stage(index: int, stage: StageSnapshot, names: NameLookup) -> StageDetail:
    """
    Detailed snapshot of one round.

    Empty collections and fields the overlay did not report are left out.
    """
    detail: StageDetail = {
        "stageNumber": index + 1,
        "player": {"health": stage.health, "gold": stage.gold, "level": stage.level},
    }

    if stage.round_label:
        detail["stage"] = stage.round_label
    if stage.round_type != RoundType.UNKNOWN:
        detail["roundType"] = str(stage.round_type)
    if stage.round_name:
        detail["roundName"] = stage.round_name
    if stage.opponent_name:
        detail["opponent"] = stage.opponent_name

    if stage.gold_earned is not None:
        detail["goldEarned"] = stage.gold_earned
    if stage.rerolls is not None:
        detail["rerolls"] = stage.rerolls

    if stage.board_pieces:
        detail["board"] = format_board(stage.board_pieces, names)
    if stage.bench_pieces:
        detail["bench"] = format_bench(stage.bench_pieces, names)

    damaged = [record for record in stage.unit_damage if record.damage > 0]
    if damaged:
        damaged.sort(key=lambda record: record.damage, reverse=True)
        unit_damage: list[UnitDamageEntry] = [
            {
                "champion": names.resolve("champion", record.unit_id),
                "damage": compact_number(record.damage),
                "stars": record.star_level,
            }
            for record in damaged
        ]
        detail["unitDamage"] = unit_damage

    if stage.all_player_status:
        players: list[PlayerEntry] = [
            {"name": player.display_name, "health": player.health, "level": player.level}
            for player in stage.all_player_status
        ]
        players.sort(key=lambda player: player["health"], reverse=True)
        detail["allPlayers"] = players

    if stage.shop_contents:
        detail["shop"] = [names.resolve("champion", unit_id) for unit_id in stage.shop_contents]

    if stage.metrics is not None:
        metrics: StageMetricsEntry = {}
        if stage.metrics.board_strength is not None:
            metrics["boardStrength"] = compact_number(stage.metrics.board_strength)
        if stage.metrics.board_cost is not None:
            metrics["boardCost"] = stage.metrics.board_cost
        if stage.metrics.bench_cost is not None:
            metrics["benchCost"] = stage.metrics.bench_cost
        if metrics:
            detail["metrics"] = metrics

    return detail


def build_economy_summary(stages: Sequence[StageSnapshot]) -> EconomySummary:
    totals = calculate_economy_totals(stages)
    first = stages[0] if stages else None
    last = stages[-1] if stages else None

    if first is not None and first.has_player_state:
        starting_health = first.health
    else:
        starting_health = DEFAULT_STARTING_HEALTH

    return {
        "startingHealth": starting_health,
        "finalHealth": last.health if last is not None else 0,
        "finalGold": last.gold if last is not None else 0,
        "totalRerolls": totals.total_rerolls,
        "totalIncome": totals.total_income,
    }


def assemble_result(
    envelope: RawEnvelope,
    stages: Sequence[StageSnapshot],
    names: NameLookup,
    *,
    mode: OutputMode | str | None = OutputMode.SUMMARY,
    match_id: str | None = None,
    player_name: str = "",
    key_rounds: Sequence[str] | None = None,
    carry_limit: int = TOP_CARRY_COUNT,
) -> TrackerResult:
    """
    Combine timeline, key stages and analytics into the tracker result.

    Args:
        envelope: Decoded envelope (metadata)
        stages: Normalized snapshots in temporal order
        names: Name resolver for unit and item ids
        mode: "summary" or "complete"; anything else means summary
        match_id: Match id as requested (defaults to the envelope's)
        player_name: Game name used to pick round outcomes
        key_rounds: Override for the canonical key round labels
        carry_limit: Number of carries to report

    Returns:
        TrackerResult dict
    """
    output_mode = OutputMode.coerce(mode)

    if output_mode is OutputMode.COMPLETE:
        detail_indices = list(range(len(stages)))
    elif key_rounds is not None:
        detail_indices = select_key_stages(stages, key_rounds)
    else:
        detail_indices = select_key_stages(stages)

    final_board = format_board(stages[-1].board_pieces, names) if stages else []

    result: TrackerResult = {
        "matchId": match_id if match_id is not None else envelope.match_id,
        "trackerUuid": envelope.tracker_id,
        "server": envelope.server,
        "summonerName": envelope.summoner_name,
        "mode": str(output_mode),
        "portal": envelope.portal,
        "rank": envelope.rank_label,
        "set": envelope.set_name,
        "totalRounds": len(stages),
        "summary": build_economy_summary(stages),
        "topCarries": top_carries(stages, names, carry_limit),
        "finalBoard": final_board,
        "stageProgression": [format_stage(index, stages[index], names) for index in detail_indices],
    }

    if output_mode is OutputMode.SUMMARY:
        result["roundProgression"] = build_round_timeline(stages, player_name).rounds

    logger.debug(
        f"Assembled {output_mode} result: {len(stages)} rounds, "
        f"{len(detail_indices)} detailed stages"
    )
    return result
