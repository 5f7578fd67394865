"""
Key-Stage Selector - decision points shown in summary mode.

Scans round labels in order and records the first occurrence of each
canonical key round (augment picks, late-game checkpoints). Repeats of a
label are ignored. The final stage is always selected.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from tftsight.core.constants import KEY_ROUNDS
from tftsight.tracker.models import StageSnapshot


def select_key_indices(labels: Sequence[str], key_rounds: Iterable[str] = KEY_ROUNDS) -> list[int]:
    """
    Select stage indices for the summary view.

    Args:
        labels: Round label of every stage, in temporal order
        key_rounds: Canonical labels treated as decision points

    Returns:
        Ascending, duplicate-free list of 0-based stage indices; empty for no stages

    Example:
        >>> select_key_indices(["1-1", "2-1", "2-1", "3-2", "6-2"])
        [1, 3, 4]
    """
    if not labels:
        return []

    wanted = set(key_rounds)
    found: set[str] = set()
    indices: list[int] = []

    for index, label in enumerate(labels):
        if label in wanted and label not in found:
            indices.append(index)
            found.add(label)

    last_index = len(labels) - 1
    if not indices or indices[-1] != last_index:
        indices.append(last_index)

    return indices


def select_key_stages(
    stages: Sequence[StageSnapshot], key_rounds: Iterable[str] = KEY_ROUNDS
) -> list[int]:
    """select_key_indices() over normalized snapshots."""
    return select_key_indices([stage.round_label for stage in stages], key_rounds)
