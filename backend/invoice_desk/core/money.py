"""Money — conversion from major currency units to integer minor units."""

from decimal import Decimal, ROUND_HALF_UP

MINOR_UNITS_PER_MAJOR = 100


def to_minor_units(amount: Decimal) -> int:
    """125.50 -> 12550. Rounds half-up at the minor unit."""
    return int(
        (amount * MINOR_UNITS_PER_MAJOR).to_integral_value(rounding=ROUND_HALF_UP),
    )


def to_major_units(amount: int) -> Decimal:
    """12550 -> Decimal('125.50'). Used to prefill edit forms."""
    return (Decimal(amount) / MINOR_UNITS_PER_MAJOR).quantize(Decimal("0.01"))
