"""Currency helpers. Amounts are stored as integer cents and handled as Decimal."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")


def cents_to_decimal(cents: int) -> Decimal:
    """Convert integer cents to a Decimal amount."""
    return Decimal(cents) / 100


def decimal_to_cents(value: Decimal | float | int | str) -> int:
    """Convert an amount to integer cents, rounding half up."""
    amount = Decimal(str(value))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def coerce_amount(value) -> Decimal:
    """
    Lenient conversion of a stored amount to Decimal.

    Missing or malformed values become zero instead of raising.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return amount if amount.is_finite() else ZERO


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places for display."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_display(value: Decimal) -> float:
    """Rounded float for JSON and chart output."""
    return float(round_money(value))
