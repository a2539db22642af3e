"""Display helpers for amounts, months and dates."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Union

from ledger.months import month_start


def format_currency(amount: Union[Decimal, float, int], symbol: str = "$") -> str:
    """Format an amount with thousands separators and two decimals.

    Example:
        >>> format_currency(Decimal("1234.5"))
        '$1,234.50'
        >>> format_currency(-20)
        '-$20.00'
    """
    value = Decimal(str(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def month_label(month: str) -> str:
    """``"2024-03"`` -> ``"March 2024"``."""
    return month_start(month).strftime("%B %Y")


def short_month_label(month: str) -> str:
    return month_start(month).strftime("%b %y")


def format_date(d: Union[date, datetime]) -> str:
    """``date(2024, 3, 5)`` -> ``"Mar 5, 2024"``."""
    return f"{d.strftime('%b')} {d.day}, {d.year}"
