"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta


def as_date(value: date | datetime) -> date:
    """Reduce a datetime to its calendar date; dates pass through unchanged"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month"""
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """
    Build a date, clamping the day into [1, last day of month].

    Day 31 in a 30-day month maps to the 30th, day 30 in February maps to the 28th/29th.
    """
    last_day = days_in_month(year, month)
    return date(year, month, min(max(1, day), last_day))


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    """Shift a (year, month) pair by a number of months, either direction"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def anchor_in_month(year: int, month: int, months: int, day: int) -> date:
    """Clamped anchor date `months` months away from (year, month)"""
    shifted_year, shifted_month = shift_month(year, month, months)
    return clamp_day(shifted_year, shifted_month, day)


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative when end is before start)"""
    return (end - start).days


def next_day(day: date) -> date:
    return day + timedelta(days=1)
