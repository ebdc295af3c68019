"""
Boundary coercion helpers.

Records arrive from the document store exactly as the authoring surface left
them: half-typed rows, numbers stored as strings with thousands separators,
blank dates. Everything is normalised here so that the engines can assume
well-typed, non-negative inputs.
"""
import math
import logging
from datetime import date, datetime
from typing import Any, Optional

logger = logging.getLogger("quotehub-costing")


def to_amount(value: Any, default: float = 0.0) -> float:
    """
    Coerce ``value`` to a non-negative float.

    ``None``, empty strings, non-numeric strings, booleans, NaN/inf and negative
    numbers all resolve to ``default`` (additive identity by default).
    Strings such as ``"1,200.50"`` and ``"$75"`` are parsed the way the quote
    inputs were typed.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = "".join(ch for ch in value if ch.isdigit() or ch in ".-")
        if not cleaned:
            return default
        try:
            number = float(cleaned)
        except ValueError:
            logger.debug(f"Unparseable numeric input {value!r}; using {default}")
            return default
    else:
        return default

    if math.isnan(number) or math.isinf(number) or number < 0:
        return default
    return number


def to_count(value: Any, default: int = 0) -> int:
    """Non-negative integer variant of :func:`to_amount` (fractions truncated)."""
    return int(to_amount(value, float(default)))


def round_half_up(value: float) -> int:
    """
    Round half away from zero for non-negative amounts (``2.5 -> 3``).

    Python's built-in ``round`` uses banker's rounding, which would turn a
    0.5 surcharge into 0 instead of 1.
    """
    return int(math.floor(value + 0.5))


def to_date(value: Any) -> Optional[date]:
    """
    Parse ``YYYY-MM-DD`` or an ISO datetime into a ``date``.

    Returns ``None`` for blanks and anything unparseable; callers treat ``None``
    as "not scheduled".
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug(f"Unparseable date {value!r}; treating as unscheduled")
        return None


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
