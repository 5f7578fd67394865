"""
TFTSight Core - Foundation modules for tracker snapshot analysis.

This module contains the fundamental components:
- constants: Round types, output modes and fixed tables
- config: Application configuration management
- errors: Failure taxonomy for tracker requests
- utils: Lenient conversion helpers, timing, logging setup
- schemas: Data contracts for the assembled result
"""

from tftsight.core.constants import (
    DEFAULT_STARTING_HEALTH,
    ITEM_SLOTS,
    KEY_ROUNDS,
    TOP_CARRY_COUNT,
    OutputMode,
    RoundType,
)
from tftsight.core.errors import (
    MalformedEnvelopeError,
    NotFoundError,
    SourceError,
    TrackerError,
)
from tftsight.core.schemas import (
    CarryEntry,
    EconomySummary,
    RoundSummary,
    StageDetail,
    TrackerErrorResult,
    TrackerResult,
    UnitEntry,
)

__all__ = [
    # Enums
    "OutputMode",
    "RoundType",
    # Constants
    "DEFAULT_STARTING_HEALTH",
    "ITEM_SLOTS",
    "KEY_ROUNDS",
    "TOP_CARRY_COUNT",
    # Errors
    "MalformedEnvelopeError",
    "NotFoundError",
    "SourceError",
    "TrackerError",
    # Schemas (data contracts)
    "CarryEntry",
    "EconomySummary",
    "RoundSummary",
    "StageDetail",
    "TrackerErrorResult",
    "TrackerResult",
    "UnitEntry",
]
