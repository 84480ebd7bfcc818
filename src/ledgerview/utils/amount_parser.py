"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Any

ZERO = Decimal("0")

# Magnitudes at or above 10**31 are treated as corrupt data.
MAX_ADJUSTED_EXPONENT = 30


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₱123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥₱]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")
    return -amount if is_negative else amount


def parse_number(value: Any) -> Decimal:
    """Leniently convert a record field to a Decimal.

    Missing, boolean, non-numeric, non-finite and absurdly large values all
    count as zero, so totals over dirty API data never raise and never turn
    into NaN or Infinity.

    Args:
        value: Raw field value (str, int, float, Decimal, None, ...)

    Returns:
        Decimal value, ``Decimal("0")`` when the value is not a usable number
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = parse_amount(value)
        except ValueError:
            return ZERO
    else:
        return ZERO

    if not number.is_finite() or (number and number.adjusted() > MAX_ADJUSTED_EXPONENT):
        return ZERO
    return number
