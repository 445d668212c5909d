"""
Calendar math for the continuous timeline axis.

This module converts (year, optional month, optional day) dates into a single
continuous decimal-year coordinate and back. Years are astronomical: year 0 is
1 BCE and there is no gap between 1 BCE and 1 CE on the axis.

The conversion never raises for bad month/day values. Invalid precision is
dropped and the date collapses to its integer year.
"""

import logging
import math
from typing import Optional

logger = logging.getLogger(__name__)

# Days per month for a common year, index 0 unused
MONTH_LENGTHS = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Offset within a day used when placing full dates (middle of the day)
DAY_CENTER_OFFSET = 0.5


def is_leap_year(year: int) -> bool:
    """
    Check whether a year is a leap year.

    Years <= 0 are shifted by one before the Gregorian test because the
    calendar has no year zero: stored year 0 is 1 BCE and is tested as year 1.

    Args:
        year: Astronomical year

    Returns:
        bool: True for a leap year
    """
    if year <= 0:
        year += 1
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(month: int, year: int) -> int:
    """
    Get the number of days in a month.

    Args:
        month: Month 1-12
        year: Astronomical year (used for February)

    Returns:
        int: Number of days, or 0 for a month outside 1-12
    """
    if not 1 <= month <= 12:
        return 0
    if month == 2 and is_leap_year(year):
        return 29
    return MONTH_LENGTHS[month]


def day_of_year(day: int, month: int, year: int) -> int:
    """Get the 1-based ordinal of a day within its year."""
    ordinal = 0
    for previous_month in range(1, month):
        ordinal += days_in_month(previous_month, year)
    return ordinal + day


def is_valid_date(year: int, month: Optional[int], day: Optional[int]) -> bool:
    """
    Check whether month and day are both present and inside the calendar.

    Args:
        year: Astronomical year
        month: Month or None
        day: Day or None

    Returns:
        bool: True only for a complete, valid (year, month, day)
    """
    if not month or not day:
        return False
    if not 1 <= month <= 12:
        return False
    return 1 <= day <= days_in_month(month, year)


def date_to_coordinate(year: int, month: Optional[int] = None, day: Optional[int] = None) -> float:
    """
    Convert date parts to a continuous coordinate.

    Only a complete valid date is placed inside its year, at the middle of
    the day. Year-only and year+month dates resolve to the integer year.

    Args:
        year: Astronomical year
        month: Optional month 1-12
        day: Optional day of month

    Returns:
        float: Continuous coordinate
    """
    if is_valid_date(year, month, day):
        ordinal = day_of_year(day, month, year)
        return year + (ordinal - DAY_CENTER_OFFSET) / days_in_year(year)

    if day and month:
        logger.debug(f"Dropping out-of-range month/day {month}/{day} for year {year}")
    return float(year)


def to_coordinate(date) -> float:
    """
    Convert a date value to a continuous coordinate.

    Args:
        date: Object with ``year``, ``month`` and ``day`` attributes
              (usually a DateValue)

    Returns:
        float: Continuous coordinate
    """
    return date_to_coordinate(date.year, getattr(date, 'month', None), getattr(date, 'day', None))


def from_coordinate(coordinate: float):
    """
    Convert a continuous coordinate back to a calendar date.

    The integer part is the year; the fractional part is scaled by the number
    of days in that year and walked through the month table. Used for
    display and tick derivation only.

    Args:
        coordinate: Continuous coordinate

    Returns:
        DateValue: Date with year, month and day set
    """
    from chronoline.data.models import DateValue

    year = math.floor(coordinate)
    remainder = coordinate - year
    ordinal = math.floor(remainder * days_in_year(year)) + 1

    month = 1
    while month <= 12 and ordinal > days_in_month(month, year):
        ordinal -= days_in_month(month, year)
        month += 1

    if month > 12:
        # Float rounding pushed the ordinal past the last day
        return DateValue(year, 12, 31)

    return DateValue(year, month, max(1, ordinal))
