"""Date manipulation utilities"""

import calendar
from datetime import date
from typing import Tuple


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month (inclusive)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def current_month_bounds(today: date) -> Tuple[date, date]:
    """Bounds of the month containing `today`"""
    return month_bounds(today.year, today.month)
