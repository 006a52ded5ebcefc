"""Amount and quantity parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₹123.45" or "$123.45"
    - "-123.45"
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

    # Remove currency symbols, thousands separators and whitespace
    amount_str = re.sub(r"[₹$€£¥,\s]", "", amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_quantity(quantity_str: str) -> int:
    """Parse a whole number of units.

    Raises:
        ValueError: If the string is not a whole number
    """
    quantity_str = quantity_str.strip()
    if not re.fullmatch(r"[+-]?\d+", quantity_str):
        raise ValueError(f"Could not parse quantity '{quantity_str}'")
    return int(quantity_str)
