"""Identifier normalization helpers."""

import math
from typing import Any, Optional


def normalize_optional_id(value: Any) -> Optional[int]:
    """Return a positive integer id, or None for empty/zero/negative/fractional/garbage."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0 or not number.is_integer():
        return None
    return int(number)


def coerce_id(value: Any) -> Any:
    """Return integer ids as int, leaving other identifiers untouched."""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value
