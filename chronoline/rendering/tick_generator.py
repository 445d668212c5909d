"""
Tick Generator - Level-of-detail ruler ticks for the timeline axis.

This module provides the TickGenerator class which produces a two-tier
(major/minor) set of ruler ticks for any visible interval, from thousands of
years down to a few days. The granularity tier is picked from the span alone:

- span > 2 years:          "nice" year steps from a fixed ladder
- 0.25 < span <= 2 years:  years, with month midpoints as minor ticks
- span <= 0.25 years:      months, with days as minor ticks

Every tick position comes from the calendar math, so a tick for a given date
lands exactly where an event on that date is drawn.
"""

import logging
import math

from chronoline.data.models import Tick, TickSet
from chronoline.utils.calendar_math import (
    date_to_coordinate,
    days_in_month,
    from_coordinate,
)
from chronoline.utils.label_formatter import (
    DEFAULT_LOCALE,
    format_era,
    month_abbreviation,
    month_name,
)

logger = logging.getLogger(__name__)


class TickGenerator:
    """
    Generates ruler ticks whose density adapts to the viewport span.

    The coarse tier keeps on-screen tick density roughly constant: the step
    is chosen from STEP_LADDER relative to how many labels fit in the widget
    at the minimum pixel spacing.
    """

    # Candidate major steps in years, largest first
    STEP_LADDER = (5000, 1000, 500, 250, 100, 50, 25, 10, 5, 1)

    # Tier thresholds in coordinate years
    COARSE_TIER_MIN_SPAN = 2
    MONTH_TIER_MIN_SPAN = 0.25

    # Below this span every day gets a minor tick, otherwise every 5th day
    DAILY_TICK_MAX_SPAN = 0.08
    WIDE_DAY_STEP = 5

    # Minor subdivisions per major interval in the coarse tier
    SUBDIVISIONS = 5
    WIDE_SUBDIVISIONS = 10
    WIDE_STEP_THRESHOLD = 100

    # Day used for month-midpoint minor ticks
    MONTH_MIDPOINT_DAY = 15

    DEFAULT_MIN_PIXEL_SPACING = 80
    DEFAULT_VIEWPORT_WIDTH = 1600

    def __init__(self, min_pixel_spacing=DEFAULT_MIN_PIXEL_SPACING,
                 viewport_pixel_width=DEFAULT_VIEWPORT_WIDTH, locale=DEFAULT_LOCALE):
        """
        Initialize the tick generator.

        Args:
            min_pixel_spacing (float): Target minimum distance between major ticks
            viewport_pixel_width (float): Width of the ruler in pixels
            locale (str): Locale for labels
        """
        self.min_pixel_spacing = min_pixel_spacing
        self.viewport_pixel_width = viewport_pixel_width
        self.locale = locale

    def generate(self, start, end):
        """
        Generate ticks for the visible interval.

        Ticks at or beyond the interval boundaries are excluded.

        Args:
            start (float): Visible start coordinate
            end (float): Visible end coordinate

        Returns:
            TickSet: Major and minor ticks sorted by position
        """
        span = end - start
        if not math.isfinite(span) or span <= 0:
            return TickSet()

        if span > self.COARSE_TIER_MIN_SPAN:
            ticks = self._coarse_ticks(start, end)
        elif span > self.MONTH_TIER_MIN_SPAN:
            ticks = self._month_ticks(start, end)
        else:
            ticks = self._day_ticks(start, end)

        ticks.major.sort(key=lambda tick: tick.position)
        ticks.minor.sort(key=lambda tick: tick.position)
        return ticks

    def choose_step(self, span):
        """
        Choose the major step for the coarse tier.

        Picks the largest ladder step smaller than twice the ideal step,
        where the ideal step spreads labels min_pixel_spacing apart.

        Args:
            span (float): Visible span in years

        Returns:
            int: Major step in years
        """
        if self.viewport_pixel_width > 0 and self.min_pixel_spacing > 0:
            ideal_tick_count = self.viewport_pixel_width / self.min_pixel_spacing
        else:
            ideal_tick_count = 1
        ideal_step = span / ideal_tick_count

        for step in self.STEP_LADDER:
            if step < ideal_step * 2:
                return step
        return self.STEP_LADDER[-1]

    def _coarse_ticks(self, start, end):
        step = self.choose_step(end - start)
        subdivisions = self.WIDE_SUBDIVISIONS if step > self.WIDE_STEP_THRESHOLD else self.SUBDIVISIONS
        minor_step = step / subdivisions

        ticks = TickSet()
        first = math.floor(start / step)
        last = math.ceil(end / step)

        for index in range(first, last + 1):
            value = index * step
            if start < value < end:
                ticks.major.append(Tick(value, format_era(round(value), self.locale)))

            # Sub-year minor ticks are too dense to be useful in this tier
            if minor_step < 1 or index == last:
                continue
            for sub in range(1, subdivisions):
                minor_value = value + sub * minor_step
                if start < minor_value < end:
                    ticks.minor.append(Tick(minor_value))

        logger.debug(f"Coarse ruler: step={step}, {len(ticks.major)} major, {len(ticks.minor)} minor")
        return ticks

    def _month_ticks(self, start, end):
        ticks = TickSet()

        for year in range(math.floor(start), math.ceil(end) + 1):
            year_start = date_to_coordinate(year)
            if start < year_start < end:
                ticks.major.append(Tick(year_start, format_era(year, self.locale)))

            for month in range(1, 13):
                midpoint = date_to_coordinate(year, month, self.MONTH_MIDPOINT_DAY)
                if start < midpoint < end:
                    ticks.minor.append(Tick(midpoint, month_abbreviation(month, self.locale)))

        return ticks

    def _day_ticks(self, start, end):
        ticks = TickSet()
        day_step = 1 if end - start < self.DAILY_TICK_MAX_SPAN else self.WIDE_DAY_STEP

        first = from_coordinate(start)
        last = from_coordinate(end)
        year, month = first.year, first.month

        while (year, month) <= (last.year, last.month):
            month_start = date_to_coordinate(year, month, 1)
            if start < month_start < end:
                label = f"{month_name(month, self.locale)} {format_era(year, self.locale)}"
                ticks.major.append(Tick(month_start, label))

            for day in range(1, days_in_month(month, year) + 1, day_step):
                day_position = date_to_coordinate(year, month, day)
                if start < day_position < end:
                    ticks.minor.append(Tick(day_position, f"{day}"))

            month += 1
            if month > 12:
                month = 1
                year += 1

        return ticks


def generate_ticks(start, end, min_pixel_spacing=TickGenerator.DEFAULT_MIN_PIXEL_SPACING,
                   locale=DEFAULT_LOCALE, viewport_pixel_width=TickGenerator.DEFAULT_VIEWPORT_WIDTH):
    """
    Generate ruler ticks for a visible interval.

    Args:
        start (float): Visible start coordinate
        end (float): Visible end coordinate
        min_pixel_spacing (float): Target minimum distance between major ticks
        locale (str): Locale for labels
        viewport_pixel_width (float): Width of the ruler in pixels

    Returns:
        TickSet: Major and minor ticks
    """
    generator = TickGenerator(min_pixel_spacing, viewport_pixel_width, locale)
    return generator.generate(start, end)
