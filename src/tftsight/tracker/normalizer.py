"""
Stage Normalizer - raw stage records to StageSnapshot.

The overlay writes one loosely typed record per round. Any field may be
missing, numbers often arrive as strings, and collections (board, bench,
damage, roster, shop) are stored as keyed objects rather than arrays.

normalize_stage() never raises: missing objects become empty collections,
unparsable numbers become 0, and an unknown round type becomes UNKNOWN.
Keyed collections are flattened in key insertion order. The upstream format
gives no ordering beyond that, so nothing here re-sorts them.
"""

from __future__ import annotations

import logging
from typing import Any

from tftsight.core.constants import ITEM_SLOTS, MAX_STAR_LEVEL, MIN_STAR_LEVEL, RoundType
from tftsight.core.utils import safe_dict, safe_float, safe_int, safe_str
from tftsight.tracker.models import (
    BoardPiece,
    PlayerStatus,
    StageMetrics,
    StageSnapshot,
    UnitDamageRecord,
)

logger = logging.getLogger(__name__)


def extract_items(piece: dict[str, Any]) -> list[str]:
    """Read item_1..item_3 in slot order, skipping empty slots."""
    items = []
    for slot in ITEM_SLOTS:
        item_id = piece.get(slot)
        if item_id:
            items.append(str(item_id))
    return items


def parse_star_level(value: Any) -> int:
    """Star level of a board piece, 1 when absent or unparsable, clamped to 1-3."""
    level = safe_int(value)
    if level < MIN_STAR_LEVEL:
        return MIN_STAR_LEVEL
    return min(level, MAX_STAR_LEVEL)


def extract_pieces(container: Any, key: str) -> list[BoardPiece]:
    """
    Flatten a keyed piece mapping ({"board_pieces": {slot: piece}}) into a list.

    Pieces without a unit id are dropped.
    """
    pieces_map = safe_dict(safe_dict(container).get(key))
    pieces = []
    for raw_piece in pieces_map.values():
        piece = safe_dict(raw_piece)
        unit_id = safe_str(piece.get("name"))
        if not unit_id:
            continue
        pieces.append(
            BoardPiece(
                unit_id=unit_id,
                star_level=parse_star_level(piece.get("level")),
                item_ids=extract_items(piece),
            )
        )
    return pieces


def extract_unit_damage(record: dict[str, Any]) -> list[UnitDamageRecord]:
    """Per-unit damage for the round; negative or unparsable damage reads as 0."""
    units = safe_dict(safe_dict(record.get("local_player_damage")).get("units"))
    damage_records = []
    for raw_unit in units.values():
        unit = safe_dict(raw_unit)
        unit_id = safe_str(unit.get("name"))
        if not unit_id:
            continue
        damage_records.append(
            UnitDamageRecord(
                unit_id=unit_id,
                damage=max(safe_float(unit.get("damage")), 0.0),
                star_level=safe_int(unit.get("level")),
            )
        )
    return damage_records


def extract_player_status(record: dict[str, Any]) -> list[PlayerStatus]:
    """Lobby roster in upstream key order; the key is the player name."""
    roster = safe_dict(safe_dict(record.get("roster")).get("player_status"))
    players = []
    for name, raw_status in roster.items():
        status = safe_dict(raw_status)
        players.append(
            PlayerStatus(
                name=str(name),
                health=safe_int(status.get("health")),
                # roster reports the player level under "xp"
                level=safe_int(status.get("xp")),
                tag_line=safe_str(status.get("tag_line")),
            )
        )
    return players


def extract_shop(record: dict[str, Any]) -> list[str]:
    """Unit ids offered in the last shop of the round."""
    shops = record.get("shops")
    if not isinstance(shops, list) or not shops:
        return []
    last_shop = safe_dict(shops[-1])
    shop_pieces = safe_dict(last_shop.get("shop_pieces"))
    contents = []
    for raw_piece in shop_pieces.values():
        unit_id = safe_str(safe_dict(raw_piece).get("name"))
        if unit_id:
            contents.append(unit_id)
    return contents


def extract_round_outcome(match_info: dict[str, Any]) -> dict[str, str]:
    """Player name -> outcome string for the round."""
    outcomes = safe_dict(match_info.get("round_outcome"))
    result = {}
    for name, raw_outcome in outcomes.items():
        outcome = safe_dict(raw_outcome).get("outcome")
        if outcome is not None:
            result[str(name)] = str(outcome)
    return result


def extract_metrics(record: dict[str, Any]) -> StageMetrics | None:
    raw_metrics = record.get("metrics")
    if not isinstance(raw_metrics, dict):
        return None
    strength = raw_metrics.get("board_strength")
    board_cost = raw_metrics.get("board_cost")
    bench_cost = raw_metrics.get("bench_cost")
    return StageMetrics(
        board_strength=safe_float(strength) if strength is not None else None,
        board_cost=safe_int(board_cost) if board_cost is not None else None,
        bench_cost=safe_int(bench_cost) if bench_cost is not None else None,
    )


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return safe_int(value)


def normalize_stage(record: Any) -> StageSnapshot:
    """
    Normalize one raw stage record.

    Args:
        record: Raw stage object from the decoded stage array (any shape)

    Returns:
        StageSnapshot with defaults for everything the record lacks
    """
    if not isinstance(record, dict):
        logger.debug(f"Stage record is {type(record).__name__}, not an object; using defaults")
        return StageSnapshot()

    match_info = safe_dict(record.get("match_info"))
    round_type = safe_dict(match_info.get("round_type"))

    opponent_name = None
    opponent = match_info.get("opponent")
    if isinstance(opponent, dict) and opponent.get("name"):
        tag_line = safe_str(opponent.get("tag_line"))
        opponent_name = f"{opponent['name']}#{tag_line}" if tag_line else str(opponent["name"])

    me = record.get("me")
    has_player_state = isinstance(me, dict)
    me = safe_dict(me)

    return StageSnapshot(
        round_label=safe_str(round_type.get("stage")).strip(),
        round_type=RoundType.parse(round_type.get("type")),
        round_name=safe_str(round_type.get("name")),
        opponent_name=opponent_name,
        health=safe_int(me.get("health")),
        gold=safe_int(me.get("gold")),
        level=safe_int(safe_dict(me.get("xp")).get("level")),
        has_player_state=has_player_state,
        gold_earned=_optional_int(record.get("gold_earned")),
        rerolls=_optional_int(record.get("rerolls")),
        board_pieces=extract_pieces(record.get("board"), "board_pieces"),
        bench_pieces=extract_pieces(record.get("bench"), "bench_pieces"),
        unit_damage=extract_unit_damage(record),
        all_player_status=extract_player_status(record),
        shop_contents=extract_shop(record),
        round_outcome=extract_round_outcome(match_info),
        metrics=extract_metrics(record),
    )


def normalize_stages(records: list[Any]) -> list[StageSnapshot]:
    """Normalize a whole stage array, preserving order."""
    return [normalize_stage(record) for record in records]
