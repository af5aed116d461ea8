"""Fixed-point money helpers shared by pricing, delivery orders and persistence."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
TAX_RATE = Decimal("0.08")


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Coerce a catalog/DB price (decimal string, int, float, Decimal) to Decimal."""
    if isinstance(value, Decimal):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        # str() so floats keep their shortest repr instead of binary noise
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def tax_for(subtotal: Decimal) -> Decimal:
    """Flat 8% tax, rounded to cents."""
    return quantize_money(subtotal * TAX_RATE)


def format_money(value: Decimal) -> str:
    """Fixed-point string with exactly two decimals, e.g. Decimal('2250') -> '2250.00'."""
    return str(quantize_money(value))
