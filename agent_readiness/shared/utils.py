"""Shared utility functions used across components."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    """Return the current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def safe_number(value: Any, default: float = 0.0) -> float:
    """Coerce an externally supplied value to a finite float.

    Missing, non-numeric, NaN and infinite values all become ``default``.
    Booleans are treated as non-numeric.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(numeric) or math.isinf(numeric):
        return default
    return numeric


def is_missing_number(value: Any) -> bool:
    """True when ``value`` is absent: None or a float NaN."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (4.5 -> 5, -4.5 -> -4)."""
    return int(math.floor(float(value) + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


def format_score(value: float) -> str:
    """Render a score without a trailing ``.0`` (``5.0`` -> ``5``, ``4.5`` -> ``4.5``)."""
    return f"{float(value):g}"
