"""
Tests for era, date and range labels.
"""

from chronoline.data.models import DateValue
from chronoline.utils.label_formatter import (
    format_coordinate,
    format_era,
    format_event_date,
    format_period_date,
    format_period_range,
    month_abbreviation,
    month_name,
    resolve_locale,
)


def test_format_era():
    assert format_era(-44) == "44 BCE"
    assert format_era(0) == "1 BCE"
    assert format_era(1969) == "1969"
    assert format_era(1) == "1"


def test_format_era_localized():
    assert format_era(-44, 'ru') == "44 до н.э."
    assert format_era(-44, 'be') == "44 да н.э."
    assert format_era(0, 'ru') == "1 до н.э."


def test_unknown_locale_falls_back_to_english():
    assert resolve_locale('de') == 'en'
    assert format_era(-44, 'de') == "44 BCE"
    assert month_name(7, 'xx') == "July"


def test_month_tables():
    assert month_name(1) == "January"
    assert month_abbreviation(12) == "Dec"
    assert month_name(3, 'ru') == "Март"
    assert month_abbreviation(7, 'be') == "Ліп"


def test_event_date_precision_degrades():
    assert format_event_date(DateValue(1969, 7, 20)) == "July 20, 1969"
    assert format_event_date(DateValue(1969, 7)) == "July, 1969"
    assert format_event_date(DateValue(1969)) == "1969"
    assert format_event_date(DateValue(-44, 3, 15)) == "March 15, 44 BCE"


def test_invalid_day_keeps_month():
    assert format_event_date(DateValue(1900, 2, 29)) == "February, 1900"


def test_invalid_month_keeps_year():
    assert format_event_date(DateValue(1969, 13, 1)) == "1969"


def test_period_dates_use_abbreviations():
    assert format_period_date(DateValue(1939, 9, 1)) == "Sep 1, 1939"
    assert format_period_range(DateValue(-509), DateValue(-27)) == "509 BCE – 27 BCE"
    assert format_period_range(DateValue(1947), DateValue(1991), 'ru') == "1947 – 1991"


def test_format_coordinate():
    assert format_coordinate(1969.0) == "January 1, 1969"
    assert format_coordinate(1969.55) == format_event_date(DateValue(1969, 7, 20))
