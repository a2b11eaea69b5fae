# core/numbering/calendar.py
"""
Date helpers used when building identifiers.

The agency books its accounts April → March, so a date in May 2024 belongs to
fiscal year "2425" and a date in February 2025 belongs to the same "2425".
"""
from __future__ import annotations

import datetime

from django.utils import timezone

from .exceptions import InvalidArgument

FISCAL_YEAR_START_MONTH = 4


def _yy(year: int) -> str:
    return f"{year % 100:02d}"


def _resolve(date: datetime.date | None) -> datetime.date:
    return date if date is not None else timezone.localdate()


def hex_month(month: int) -> str:
    """
    Encode a calendar month as one upper-case hex digit: 1..9, then A, B, C.
    """
    if isinstance(month, bool) or not isinstance(month, int):
        raise InvalidArgument(f"Month must be an integer, got {month!r}")
    if month < 1 or month > 12:
        raise InvalidArgument(f"Month must be between 1 and 12, got {month}")
    return format(month, "X")


def two_digit_year(date: datetime.date | None = None) -> str:
    return _yy(_resolve(date).year)


def fiscal_year(date: datetime.date | None = None) -> str:
    """
    Fiscal-year label for ``date`` (default: today in the project time zone).

    >>> fiscal_year(datetime.date(2024, 4, 1))
    '2425'
    >>> fiscal_year(datetime.date(2025, 2, 15))
    '2425'
    """
    date = _resolve(date)
    if date.month >= FISCAL_YEAR_START_MONTH:
        return f"{_yy(date.year)}{_yy(date.year + 1)}"
    return f"{_yy(date.year - 1)}{_yy(date.year)}"


def fiscal_year_short(label: str) -> str:
    """First two digits of a fiscal-year label ("2425" -> "24")."""
    return label[:2]
