"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "100"
    - "88.88"
    - "¥1,000"
    - "$123.45"

    Gift amounts are never negative, so a leading minus or parenthesised
    amount is rejected rather than negated.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    if amount_str.startswith("(") and amount_str.endswith(")"):
        raise ValueError(f"Amount cannot be negative: '{amount_str}'")

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥￥]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: '{amount_str}'")
    return amount


def coerce_amount(value: object) -> Decimal:
    """Convert an amount read from a ledger file into a Decimal.

    Files written by older versions store amounts as JSON numbers; strings
    are accepted too.

    Raises:
        ValueError: If the value is not a non-negative number
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        return parse_amount(value)
    else:
        raise ValueError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {value!r}")
    return amount
