"""
TFTSight Output Contract: the single source of truth.

Defines the exact JSON structure that TrackerOrchestrator.run() returns.
Every field name, nesting level, and type is locked here.

Rules:
  1. The assembler MUST produce output matching RESULT_CONTRACT.
  2. Consumers MUST read fields using the paths defined here.
  3. Any new field goes here FIRST, then gets wired through all layers.

Validated by: tests/test_contract.py (runtime schema check)
"""

from __future__ import annotations

# ─── Top-level result shape ───────────────────────────────────────────
RESULT_CONTRACT: dict = {
    "matchId": str,
    "trackerUuid": str,
    "server": str,
    "summonerName": str,
    "mode": str,  # "summary" | "complete"
    "portal": (str, type(None)),
    "rank": (str, type(None)),
    "set": (str, type(None)),
    "totalRounds": int,
    "summary": {
        "startingHealth": int,
        "finalHealth": int,
        "finalGold": int,
        "totalRerolls": int,
        "totalIncome": int,
    },
    "topCarries": list,
    "finalBoard": list,
    "stageProgression": list,
}

# ─── Per-carry shape ──────────────────────────────────────────────────
CARRY_CONTRACT: dict = {
    "champion": str,
    "totalDamage": (int, float),
    "avgDamage": int,
    "roundsPlayed": int,
    "maxStars": int,
}

# ─── Compact round shape (summary mode) ───────────────────────────────
ROUND_SUMMARY_CONTRACT: dict = {
    "round": int,
    "stage": str,
    "type": str,
    "hp": int,
    "gold": int,
    "level": int,
    "boardSize": int,
}

# ─── Detailed stage shape (required keys only) ────────────────────────
STAGE_DETAIL_CONTRACT: dict = {
    "stageNumber": int,
    "player": {
        "health": int,
        "gold": int,
        "level": int,
    },
}

# ─── Board unit shape ─────────────────────────────────────────────────
BOARD_UNIT_CONTRACT: dict = {
    "champion": str,
    "stars": int,
    "items": list,
}

# ─── Structured error shape ───────────────────────────────────────────
ERROR_CONTRACT: dict = {
    "error": str,
    "code": str,
}


def validate_error(payload: dict) -> list[str]:
    """Validate a structured error object. Returns list of errors."""
    errors: list[str] = []
    _validate_dict(payload, ERROR_CONTRACT, "error", errors)
    return errors


def validate_result(result: dict) -> list[str]:
    """Validate a full tracker result dict. Returns list of errors."""
    errors: list[str] = []
    _validate_dict(result, RESULT_CONTRACT, "result", errors)
    if errors and not isinstance(result, dict):
        return errors

    for i, carry in enumerate(result.get("topCarries") or []):
        _validate_dict(carry, CARRY_CONTRACT, f"topCarries[{i}]", errors)

    for i, unit in enumerate(result.get("finalBoard") or []):
        _validate_dict(unit, BOARD_UNIT_CONTRACT, f"finalBoard[{i}]", errors)

    for i, stage in enumerate(result.get("stageProgression") or []):
        _validate_dict(stage, STAGE_DETAIL_CONTRACT, f"stageProgression[{i}]", errors)

    mode = result.get("mode")
    if mode == "summary":
        rounds = result.get("roundProgression")
        if not isinstance(rounds, list):
            errors.append("MISSING result.roundProgression (required in summary mode)")
        else:
            for i, entry in enumerate(rounds):
                _validate_dict(entry, ROUND_SUMMARY_CONTRACT, f"roundProgression[{i}]", errors)
    elif mode == "complete":
        if "roundProgression" in result:
            errors.append("UNEXPECTED result.roundProgression in complete mode")
    else:
        errors.append(f"VALUE result.mode: expected 'summary' or 'complete', got {mode!r}")

    return errors


def _validate_dict(data: dict, contract: dict, path: str, errors: list[str]) -> None:
    """Recursively validate data against contract schema."""
    if not isinstance(data, dict):
        errors.append(f"{path}: expected dict, got {type(data).__name__}")
        return

    for key, expected_type in contract.items():
        full_path = f"{path}.{key}"
        if key not in data:
            errors.append(f"MISSING {full_path}")
            continue

        value = data[key]

        # If expected_type is a dict, recurse
        if isinstance(expected_type, dict):
            _validate_dict(value, expected_type, full_path, errors)
        # bool is an int subclass; a flag where a count belongs is a bug
        elif isinstance(value, bool) and expected_type is not bool:
            errors.append(f"TYPE {full_path}: expected {expected_type}, got bool = {value!r}")
        elif isinstance(expected_type, tuple):
            if not isinstance(value, expected_type):
                errors.append(
                    f"TYPE {full_path}: expected {expected_type}, "
                    f"got {type(value).__name__} = {value!r}"
                )
        elif not isinstance(value, expected_type):
            errors.append(
                f"TYPE {full_path}: expected {expected_type.__name__}, "
                f"got {type(value).__name__} = {value!r}"
            )
