"""Formatting helpers for estimate output.

Provides human-readable formatting for currency amounts and tier ranges the
way homeowners see them on the results page (e.g., '$6,250 - $9,375').
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from comfortquote.models.estimate import TierRange


def format_currency(amount: float) -> str:
    """Format a currency amount as a human-readable string.

    - Whole amounts: no cents, with comma separators (e.g., '$12,500')
    - Fractional amounts: with cents (e.g., '$9,876.54')
    """
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_tier_range(tier_range: TierRange) -> str:
    """Format a TierRange as '$X,XXX - $X,XXX'."""
    return f"{format_currency(tier_range.low)} - {format_currency(tier_range.high)}"


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' for whole values (2000.0 -> '2000')."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
