"""Amount parsing utilities."""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "Bs 123.45", "$123.45"
    - "1,234.56"
    - "" (empty means 0, an unused debit or credit column)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if amount_str is None or not amount_str.strip():
        return Decimal("0")

    cleaned = amount_str.strip()

    # Remove currency symbols and codes
    cleaned = re.sub(r"(?i)^(bs\.?|bob|usd)\s*", "", cleaned)
    cleaned = re.sub(r"[$€£¥]", "", cleaned)

    # Remove thousands separators
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount '{amount_str}' must not be negative")
    return amount


def to_decimal(value: Any) -> Decimal:
    """Coerce an amount to Decimal; anything non-numeric becomes 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")
