"""
Tests for the calendar math of the continuous timeline axis.
"""

import pytest

from chronoline.data.models import DateValue
from chronoline.utils.calendar_math import (
    date_to_coordinate,
    day_of_year,
    days_in_month,
    days_in_year,
    from_coordinate,
    is_leap_year,
    is_valid_date,
    to_coordinate,
)


@pytest.mark.parametrize("year, expected", [
    (2000, True),
    (1900, False),
    (2024, True),
    (2023, False),
    (0, False),
    (-1, True),
])
def test_is_leap_year(year, expected):
    assert is_leap_year(year) is expected


def test_bce_leap_years_are_shifted_by_one():
    # -5 (6 BCE) is tested as -4, -4 (5 BCE) as -3
    assert is_leap_year(-4) is False
    assert is_leap_year(-5) is True
    assert days_in_year(-5) == 366


def test_days_in_month():
    assert days_in_month(2, 2000) == 29
    assert days_in_month(2, 1900) == 28
    assert days_in_month(4, 2021) == 30
    assert days_in_month(13, 2021) == 0
    assert days_in_month(0, 2021) == 0


def test_day_of_year():
    assert day_of_year(1, 1, 2021) == 1
    assert day_of_year(31, 12, 2021) == 365
    assert day_of_year(31, 12, 2020) == 366
    assert day_of_year(1, 3, 2000) == 61


def test_is_valid_date():
    assert is_valid_date(1969, 7, 20)
    assert not is_valid_date(1969, 7, None)
    assert not is_valid_date(1969, None, 20)
    assert not is_valid_date(1969, 13, 1)
    assert not is_valid_date(1969, 4, 31)


def test_full_date_is_centred_in_its_day():
    assert date_to_coordinate(2021, 1, 1) == pytest.approx(2021 + 0.5 / 365)
    assert date_to_coordinate(2020, 12, 31) == pytest.approx(2020 + 365.5 / 366)


def test_consecutive_days_are_ordered_after_year_start():
    day_20 = to_coordinate(DateValue(1969, 7, 20))
    day_21 = to_coordinate(DateValue(1969, 7, 21))
    year = to_coordinate(DateValue(1969))

    assert day_20 < day_21
    assert day_20 > year
    assert day_21 > year


def test_leap_day_is_valid_only_in_leap_years():
    leap_day = to_coordinate(DateValue(2000, 2, 29))
    assert 2000 < leap_day < 2001
    assert day_of_year(29, 2, 2000) == 60
    assert leap_day == pytest.approx(2000 + (60 - 0.5) / 366)

    # 1900 is not a leap year: the date degrades to the plain year
    assert to_coordinate(DateValue(1900, 2, 29)) == 1900


def test_partial_dates_resolve_to_integer_year():
    assert to_coordinate(DateValue(1969)) == 1969
    assert to_coordinate(DateValue(1969, 7)) == 1969
    assert to_coordinate(DateValue(-509)) == -509


def test_invalid_parts_degrade_without_raising():
    assert date_to_coordinate(1969, 13, 5) == 1969
    assert date_to_coordinate(1969, 6, 31) == 1969
    assert date_to_coordinate(1969, 0, 0) == 1969


def test_bce_full_date_lies_inside_its_year():
    ides_of_march = to_coordinate(DateValue(-44, 3, 15))
    assert -44 < ides_of_march < -43


@pytest.mark.parametrize("date", [
    DateValue(1969, 7, 20),
    DateValue(2000, 2, 29),
    DateValue(2021, 12, 31),
    DateValue(2021, 1, 1),
    DateValue(-44, 3, 15),
    DateValue(0, 6, 30),
    DateValue(-4713, 11, 24),
])
def test_from_coordinate_recovers_valid_dates(date):
    recovered = from_coordinate(to_coordinate(date))

    assert recovered.year == date.year
    assert recovered.month == date.month
    assert recovered.day == date.day


def test_from_coordinate_on_year_boundary():
    assert from_coordinate(1969.0) == DateValue(1969, 1, 1)
    assert from_coordinate(-44.0) == DateValue(-44, 1, 1)
