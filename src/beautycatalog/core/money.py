"""Decimal helpers for prices and totals."""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

CENT = Decimal("0.01")


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round to specified decimal places using banker's rounding."""
    quantize_str = "0." + "0" * places
    return amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_EVEN)


def to_decimal(value, default=None):
    """Coerce a number-like value to Decimal, or return ``default``."""
    if value is None or value == "":
        return default
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return amount if amount.is_finite() else default


def money(value) -> str | None:
    """Render an amount as a two-decimal string for JSON payloads."""
    amount = to_decimal(value)
    if amount is None:
        return None
    return str(round_money(amount))


def percent(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100`` rounded to cents, 0 when ``whole`` is 0."""
    if not whole:
        return Decimal("0.00")
    return round_money(part / whole * 100)
