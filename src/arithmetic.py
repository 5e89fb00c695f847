from decimal import Context, Decimal, ROUND_HALF_EVEN
from typing import Optional

# Largest balance the ledger can represent (96-bit unsigned mantissa).
MAX_BALANCE = Decimal("79228162514264337593543950335")

SCALE = Decimal("0.0001")
ZERO = Decimal("0")

# Wide enough that no sum of two in-range balances is ever rounded.
LEDGER_CONTEXT = Context(prec=50, rounding=ROUND_HALF_EVEN)


def checked_add(left: Decimal, right: Decimal) -> Optional[Decimal]:
    """Return left + right, or None if the result exceeds MAX_BALANCE."""
    result = LEDGER_CONTEXT.add(left, right)
    if result > MAX_BALANCE:
        return None
    return result


def checked_sub(left: Decimal, right: Decimal) -> Optional[Decimal]:
    """Return left - right, or None if the result would go negative."""
    result = LEDGER_CONTEXT.subtract(left, right)
    if result < ZERO:
        return None
    return result


def saturating_add(left: Decimal, right: Decimal) -> Decimal:
    """Return left + right clamped to MAX_BALANCE. Display only."""
    result = checked_add(left, right)
    if result is None:
        return MAX_BALANCE
    return result


def has_valid_scale(value: Decimal) -> bool:
    """True if value carries no more than four significant fractional digits."""
    return value.quantize(SCALE, context=LEDGER_CONTEXT) == value


def format_amount(value: Decimal) -> str:
    """Render a balance with exactly four fractional digits."""
    return f"{value.quantize(SCALE, context=LEDGER_CONTEXT):f}"
