"""Display formatting for currency and percentages."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def _is_missing(value: float | None) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def format_currency(value: float | None) -> str:
    """Format dollars with no cents.

    Returns:
        Formatted string like "$1,234,567" or "-$1,200"
    """
    if _is_missing(value):
        return "$0"
    if math.isinf(value):
        return "-$∞" if value < 0 else "$∞"
    # Halves round away from zero, $0.50 shows as $1
    amount = int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,}"


def format_percent(value: float | None, decimals: int = 1) -> str:
    """Format a fraction as a percentage.

    Args:
        value: Value as a fraction (0.123 for 12.3 %)
        decimals: Number of decimal places

    Returns:
        Formatted string like "12.3%"
    """
    if _is_missing(value):
        return f"{0:.{decimals}f}%"
    return f"{value * 100:.{decimals}f}%"
