"""Date-level filtering by month, day of month and day of week."""

from __future__ import annotations

__all__ = ["cron_weekday", "day_matches", "days_in_month", "month_matches", "valid_days_of_month"]

import calendar
from typing import TYPE_CHECKING

from typing_extensions import assert_never

from cronspan.common import DayMatchMode

if TYPE_CHECKING:
    from datetime import date

    from cronspan.cron_types import ValueSet


def cron_weekday(day: date) -> int:
    """Return the cron day-of-week numeral of *day* (Sunday = 0 ... Saturday = 6)."""
    return (day.weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    """Return the last day number of *month* in *year*, leap years included."""
    return calendar.monthrange(year, month)[1]


def valid_days_of_month(dom_values: ValueSet, year: int, month: int) -> ValueSet:
    """Drop day-of-month values that do not exist in *month* of *year* (e.g. Feb 30)."""
    last_day = days_in_month(year, month)
    return frozenset(value for value in dom_values if value <= last_day)


def month_matches(day: date, month_values: ValueSet) -> bool:
    """Return ``True`` when the month of *day* is one of *month_values*."""
    return day.month in month_values


def day_matches(day: date, dom_values: ValueSet, dow_values: ValueSet, mode: DayMatchMode) -> bool:
    """Combine day-of-month and day-of-week matches of *day* according to *mode*."""
    dom_match = day.day in dom_values
    dow_match = cron_weekday(day) in dow_values

    match mode:
        case DayMatchMode.Union:
            return dom_match or dow_match
        case DayMatchMode.Intersect:
            return dom_match and dow_match
        case _:
            assert_never(mode)
