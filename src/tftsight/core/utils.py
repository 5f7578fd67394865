"""
Utility functions for TFTSight.

This module provides:
- Lenient numeric conversion for loosely typed tracker payloads
- Performance timing helpers
- Logging setup from LoggingConfig
"""

from __future__ import annotations

import logging
import math
import sys
import time
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tftsight.core.config import LoggingConfig

logger = logging.getLogger(__name__)


def safe_int(value: Any, default: int = 0) -> int:
    """
    Convert a tracker value to int without raising.

    Accepts ints, floats and numeric strings ("42", " 7 ", "3.0").
    Booleans, NaN, infinities and anything unparsable return the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return default
        if math.isnan(number) or math.isinf(number):
            return default
        return int(number)
    return default


def safe_float(value: Any, default: float = 0.0) -> float:
    """Convert a tracker value to float without raising."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (ValueError, TypeError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def safe_str(value: Any, default: str = "") -> str:
    """Convert a tracker value to str, mapping None to the default."""
    if value is None:
        return default
    return str(value)


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value if it is a mapping, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def compact_number(value: float) -> int | float:
    """Return an int when the value is integral so JSON output stays free of ".0"."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class PerformanceMonitor:
    """
    Context manager for monitoring performance of code blocks.

    Usage:
        with PerformanceMonitor("assembling tracker result"):
            assemble(...)
    """

    def __init__(self, operation_name: str, log_level: int = logging.DEBUG):
        self.operation_name = operation_name
        self.log_level = log_level
        self.start_time: float | None = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - (self.start_time or 0)
        if exc_type is not None:
            logger.warning(f"{self.operation_name} failed after {elapsed:.3f}s: {exc_val}")
        else:
            logger.log(self.log_level, f"{self.operation_name} completed in {elapsed:.3f}s")
        return False


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure the root logger from a LoggingConfig.

    Installs a stderr handler and, when ``config.file`` is set, a rotating file
    handler. Calling it again replaces the handlers it installed before.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(config.level).upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_tftsight_handler", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(config.format)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    stream_handler._tftsight_handler = True  # type: ignore[attr-defined]
    root.addHandler(stream_handler)

    if config.file:
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.file_max_bytes,
            backupCount=config.file_backup_count,
        )
        file_handler.setFormatter(formatter)
        file_handler._tftsight_handler = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)
