"""
TFTSight - Constants

Round types, output modes, and the fixed tables used by the tracker pipeline.
"""

import re
from enum import StrEnum


class RoundType(StrEnum):
    """
    Combat phase of a round as reported by the tracker overlay.

    The overlay only distinguishes creep rounds from player rounds; carousel
    and augment rounds are reported as one of these or not at all.
    """

    PVE = "PVE"  # Creep / monster round
    PVP = "PVP"  # Player combat round
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "RoundType":
        """Map a raw round-type string to a RoundType, UNKNOWN when unrecognized."""
        if not isinstance(value, str):
            return cls.UNKNOWN
        normalized = value.strip().upper()
        if normalized == "PVE":
            return cls.PVE
        if normalized == "PVP":
            return cls.PVP
        return cls.UNKNOWN


class OutputMode(StrEnum):
    """Shape of the assembled tracker result."""

    SUMMARY = "summary"  # Compact per-round list + detail for key stages only
    COMPLETE = "complete"  # Detail for every stage, no compact list

    @classmethod
    def coerce(cls, value: object) -> "OutputMode":
        """Return the requested mode, falling back to SUMMARY for absent or unknown values."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.SUMMARY


# Augment picks (2-1, 3-2, 4-2) and late-game checkpoints (5-1, 6-1)
KEY_ROUNDS: tuple[str, ...] = ("2-1", "3-2", "4-2", "5-1", "6-1")

# Number of carries reported in the result
TOP_CARRY_COUNT = 5

# Up to three equipped item slots on a unit, in slot order
ITEM_SLOTS: tuple[str, ...] = ("item_1", "item_2", "item_3")

# Star level bounds for a board piece
MIN_STAR_LEVEL = 1
MAX_STAR_LEVEL = 3

# Health shown for the first stage when the overlay did not report one
DEFAULT_STARTING_HEALTH = 100

# Riot match ids carry a platform prefix ("EUW1_7412345678"); tracker ids do not
MATCH_ID_PREFIX_PATTERN = re.compile(r"^[A-Z]+\d*_")

# Opaque id prefixes stripped by the name fallback
CHAMPION_ID_PATTERN = re.compile(r"TFT\d+_(.+)")
TRAIT_ID_PATTERN = re.compile(r"TFT\d+_(.+)")
ITEM_ID_PATTERN = re.compile(r"TFT_Item_(.+)")


def strip_match_prefix(match_id: str) -> str:
    """Strip the platform prefix from a Riot match id ("EUW1_123" -> "123")."""
    return MATCH_ID_PREFIX_PATTERN.sub("", match_id.strip())

