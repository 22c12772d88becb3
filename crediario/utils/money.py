"""Monetary rounding and display helpers"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce to Decimal rounded half-up to cents (floats go through str to avoid binary noise)"""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_brl(value) -> str:
    """Render as Brazilian currency: 1234.5 -> "R$ 1.234,50" """
    amount = to_money(value)
    text = f"{amount:,.2f}"  # 1,234.50
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")
