"""Normalization helpers.

Centralizes defensive parsing and null-sentinel handling for raw payloads.
"""

from __future__ import annotations

import math
from typing import Any

from phoenixplay.exceptions import MalformedRecordError


def is_absent(value: Any) -> bool:
    """Return True for the values that mean "no time recorded"."""
    return value is None or (isinstance(value, str) and not value.strip())


def strict_float(value: Any, *, field: str) -> float | None:
    """Coerce *value* to float, keeping absence distinct from garbage.

    Absent values return ``None``. Values that are present but not numeric
    raise :class:`MalformedRecordError`.
    """
    if is_absent(value):
        return None
    if isinstance(value, bool):
        raise MalformedRecordError(f"{field} must be numeric, got {value!r}", field=field, value=value)
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(f"{field} must be numeric, got {value!r}", field=field, value=value) from exc
    if math.isnan(result) or math.isinf(result):
        raise MalformedRecordError(f"{field} must be finite, got {value!r}", field=field, value=value)
    return result


def lenient_float(value: Any) -> float | None:
    """Best-effort float for display-only fields such as coordinates.

    Never raises: absent, non-numeric and non-finite input all become ``None``.
    """
    if is_absent(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clean_str(value: Any) -> str | None:
    """``str(value)`` with surrounding whitespace removed; blank becomes ``None``."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
