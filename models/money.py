"""Currency helpers.

Amounts are Decimal values with two fractional digits in memory and
integer cents in the database.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from errors import ValidationError

CENT = Decimal("0.01")
MAX_CENTS = 2**63 - 1


def quantize(amount: Decimal) -> Decimal:
    """Round a Decimal to two fractional digits (half up)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value, field: str = "amount") -> Decimal:
    """Coerce user input into a two-digit Decimal.

    Accepts Decimal, int, float (via its shortest repr) and numeric strings.

    Raises:
        ValidationError: If the value is missing, a bool, not a finite number
            or too large to store.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required and must be a number")

    if isinstance(value, float):
        value = repr(value)
    if isinstance(value, str):
        value = value.strip()

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    # Cents are stored in a signed 64-bit sqlite INTEGER.
    if abs(amount) * 100 > MAX_CENTS:
        raise ValidationError(f"{field} is too large")

    return quantize(amount)


def to_cents(amount: Decimal) -> int:
    """Convert a Decimal amount to integer cents."""
    return int(quantize(amount) * 100)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents from the database to a Decimal amount."""
    return (Decimal(cents) / 100).quantize(CENT)
