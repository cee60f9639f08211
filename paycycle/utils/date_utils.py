"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta
from typing import List


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day component, if any"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    """Return (year, month) moved by a signed number of months"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def on_day(year: int, month: int, day: int) -> date:
    """
    Resolve a day-of-month inside a given month.

    The day is clamped to the month length, so day 31 in February gives
    Feb 28 (or Feb 29 in a leap year) instead of rolling over into March.
    """
    return date(year, month, min(day, days_in_month(year, month)))


def add_months(from_date: date, months: int) -> date:
    """
    Add a signed number of months to a date.

    Example:
        add_months(date(2024, 1, 31), 1) -> date(2024, 2, 29)
        add_months(date(2024, 3, 15), -3) -> date(2023, 12, 15)
    """
    year, month = shift_month(from_date.year, from_date.month, months)
    return on_day(year, month, from_date.day)


def add_days(from_date: date, days: int) -> date:
    """Plain calendar-day addition, no clamping"""
    return from_date + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Signed number of days from start to end"""
    return (as_date(end) - as_date(start)).days


def in_half_open_range(value: date, start: date, end: date) -> bool:
    """True when start <= value < end"""
    return start <= value < end


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]
