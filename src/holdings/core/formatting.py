"""Currency formatting for display strings."""

import math

CURRENCY_SYMBOL = "₹"
_ZERO = f"{CURRENCY_SYMBOL}0.00"


def format_currency(amount: float) -> str:
    """Format an amount with two decimals; non-finite values show as zero."""
    if not math.isfinite(amount):
        return _ZERO
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def format_pnl(amount: float) -> str:
    """Format a profit/loss amount, placing the sign before the symbol."""
    if not math.isfinite(amount):
        return _ZERO
    if amount >= 0:
        return f"{CURRENCY_SYMBOL}{amount:.2f}"
    return f"-{CURRENCY_SYMBOL}{abs(amount):.2f}"
