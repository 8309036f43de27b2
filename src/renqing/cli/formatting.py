"""Display helpers shared by CLI commands."""

from decimal import Decimal

from renqing.domain.entities import Occasion, TransactionType

CURRENCY_SYMBOL = "¥"

OCCASION_CHOICES = [occasion.name.lower() for occasion in Occasion]


def format_amount(amount: Decimal) -> str:
    """Format an amount with the currency symbol and thousands separators."""
    if amount == amount.to_integral_value():
        return f"{CURRENCY_SYMBOL}{amount:,.0f}"
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"


def format_signed(amount: Decimal) -> str:
    """Format a balance with an explicit sign."""
    sign = "+" if amount > 0 else "-" if amount < 0 else ""
    return f"{sign}{format_amount(abs(amount))}"


def format_type(txn_type: TransactionType) -> str:
    return "Give" if txn_type == TransactionType.GIVE else "Receive"
