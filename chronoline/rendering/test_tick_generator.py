"""
Tests for the level-of-detail ruler ticks.
"""

import pytest

from chronoline.rendering.tick_generator import TickGenerator, generate_ticks
from chronoline.rendering.viewport import project_to_percent
from chronoline.utils.calendar_math import date_to_coordinate


def _pixel_positions(ticks, start, end, width):
    return [project_to_percent(tick.position, start, end) / 100 * width for tick in ticks]


def test_century_span_keeps_minimum_spacing():
    start, end = 1900, 2000
    ticks = generate_ticks(start, end, min_pixel_spacing=80, viewport_pixel_width=1600)

    positions = _pixel_positions(ticks.major, start, end, 1600)
    gaps = [b - a for a, b in zip(positions, positions[1:])]

    assert len(ticks.major) >= 2
    assert min(gaps) >= 80 - 1e-6


@pytest.mark.parametrize("start, end", [(-1000, 2050), (-5000, 5000), (1960, 1970)])
def test_coarse_tier_spacing(start, end):
    ticks = generate_ticks(start, end, min_pixel_spacing=80, viewport_pixel_width=1600)
    positions = _pixel_positions(ticks.major, start, end, 1600)

    assert all(b - a >= 80 - 1e-6 for a, b in zip(positions, positions[1:]))


def test_choose_step_uses_ladder():
    generator = TickGenerator(min_pixel_spacing=80, viewport_pixel_width=1600)
    assert generator.choose_step(100) == 5
    assert generator.choose_step(3050) == 250
    assert generator.choose_step(10000) == 500
    assert generator.choose_step(3) == 1


def test_coarse_labels_and_boundaries():
    ticks = generate_ticks(-100, 100)
    labels = [tick.label for tick in ticks.major]

    assert "50 BCE" in labels
    assert "1 BCE" in labels  # year 0
    assert "50" in labels
    assert all(-100 < tick.position < 100 for tick in ticks.major + ticks.minor)


def test_ticks_on_boundaries_are_excluded():
    ticks = generate_ticks(1900, 2000)
    positions = [tick.position for tick in ticks.major]

    assert 1900 not in positions
    assert 2000 not in positions
    assert 1905 in positions


def test_coarse_minor_subdivisions():
    ticks = generate_ticks(1900, 2000)
    # Step 5 splits into 1-year minors
    assert 1901 in [tick.position for tick in ticks.minor]
    assert all(tick.label is None for tick in ticks.minor)

    wide = generate_ticks(-5000, 5000)
    # Step 500 splits into 10 minors of 50 years
    assert 50 in [tick.position for tick in wide.minor]


def test_no_sub_year_minor_ticks_in_coarse_tier():
    ticks = generate_ticks(2000, 2003)
    assert ticks.minor == []


def test_month_tier():
    start, end = 1968.9, 1970.1
    ticks = generate_ticks(start, end)

    assert [tick.label for tick in ticks.major] == ["1969", "1970"]
    # Dec 1968, all of 1969 and Jan 1970
    assert len(ticks.minor) == 1 + 12 + 1
    assert ticks.minor[0].label == "Dec"
    assert ticks.minor[1].position == pytest.approx(date_to_coordinate(1969, 1, 15))
    assert ticks.minor[1].label == "Jan"


def test_month_tier_localized():
    ticks = generate_ticks(-45, -44, locale='ru')
    labels = [tick.label for tick in ticks.minor]
    assert "Мар" in labels


def test_day_tier_daily_minors():
    start = date_to_coordinate(1969, 7, 20)
    end = start + 0.07
    ticks = generate_ticks(start, end)

    assert [tick.label for tick in ticks.major] == ["August 1969"]
    assert ticks.major[0].position == pytest.approx(date_to_coordinate(1969, 8, 1))
    # July 20 sits exactly on the start boundary
    assert ticks.minor[0].label == "21"
    assert ticks.minor[1].label == "22"


def test_day_tier_five_day_minors():
    start = date_to_coordinate(1969, 6, 20)
    end = start + 0.2
    ticks = generate_ticks(start, end)
    july_days = [tick.label for tick in ticks.minor
                 if date_to_coordinate(1969, 7, 1) <= tick.position < date_to_coordinate(1969, 8, 1)]

    assert july_days == ["1", "6", "11", "16", "21", "26", "31"]


def test_ticks_are_sorted():
    ticks = generate_ticks(-3, 2)
    positions = [tick.position for tick in ticks.major]
    assert positions == sorted(positions)


def test_invalid_span_returns_no_ticks():
    assert generate_ticks(10, 10).major == []
    assert generate_ticks(10, 5).minor == []
