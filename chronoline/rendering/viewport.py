"""
Viewport - Holds the visible coordinate interval and the projection onto screen.

This module provides the Viewport class which manages:
- The current visible interval [start, end) of the timeline axis
- Panning by a pixel delta
- Anchor-stable zooming with span bounds
- Projection of coordinates to 0-100 percentage positions

Pan and zoom never raise. A request that would leave the allowed span range
is ignored and the interval stays unchanged.
"""

import logging
import math

from chronoline.data.models import ViewportInterval

logger = logging.getLogger(__name__)


class Viewport:
    """
    Mutable visible interval of the timeline.

    The interval is replaced atomically on every pan or zoom: readers either
    see the old (start, end) pair or the new one. Renderers should take one
    snapshot() per paint pass and use it for every projection in that pass.
    """

    # Span bounds in coordinate years (about one day to ten millennia)
    MIN_SPAN = 1 / 365
    MAX_SPAN = 10000

    # Initial interval when nothing else is configured
    DEFAULT_START = -1000
    DEFAULT_END = 2050

    # Wheel zoom factors (in = narrower span)
    ZOOM_IN_FACTOR = 0.9
    ZOOM_OUT_FACTOR = 1.1

    def __init__(self, start=DEFAULT_START, end=DEFAULT_END):
        """
        Initialize the viewport.

        Args:
            start (float): Visible start coordinate
            end (float): Visible end coordinate

        Spans outside [MIN_SPAN, MAX_SPAN] are clamped around their centre.

        Raises:
            ValueError: If the interval is empty, inverted or not finite
        """
        self._interval = self._validated(start, end)
        self._initial = self._interval

    @classmethod
    def _validated(cls, start, end):
        if not (math.isfinite(start) and math.isfinite(end)) or end <= start:
            raise ValueError(
                f"Viewport end must be greater than start, got start={start}, end={end}"
            )

        span = end - start
        clamped = max(cls.MIN_SPAN, min(cls.MAX_SPAN, span))
        if clamped != span:
            # Keep the centre, shrink or grow the span into the zoom bounds
            center = (start + end) / 2
            logger.warning(f"Viewport span {span} outside [{cls.MIN_SPAN}, {cls.MAX_SPAN}], clamped")
            start, end = center - clamped / 2, center + clamped / 2
        return ViewportInterval(float(start), float(end))

    @property
    def start(self):
        return self._interval.start

    @property
    def end(self):
        return self._interval.end

    @property
    def span(self):
        return self._interval.span

    def snapshot(self):
        """
        Get the current interval as an immutable value.

        Returns:
            ViewportInterval: Current (start, end)
        """
        return self._interval

    def reset(self, start=None, end=None):
        """
        Replace the interval, used by explicit load/clear operations.

        Args:
            start (float): New start, or None for the initial start
            end (float): New end, or None for the initial end

        Raises:
            ValueError: If the interval is empty, inverted or not finite
        """
        if start is None and end is None:
            self._interval = self._initial
        else:
            self._interval = self._validated(
                self._initial.start if start is None else start,
                self._initial.end if end is None else end,
            )
        logger.debug(f"Viewport reset to [{self.start}, {self.end})")
        return self._interval

    def pan(self, pixel_delta, viewport_pixel_width):
        """
        Shift the interval by a horizontal pixel delta.

        The coordinate delta is proportional to the current span, so a drag
        of the full widget width moves by exactly one span. The span itself
        does not change.

        Args:
            pixel_delta (float): Horizontal delta in pixels (positive moves later)
            viewport_pixel_width (float): Width of the timeline widget in pixels

        Returns:
            ViewportInterval: The interval after panning
        """
        if viewport_pixel_width <= 0 or not math.isfinite(pixel_delta):
            return self._interval

        span = self.span
        coord_delta = pixel_delta / viewport_pixel_width * span
        self._interval = ViewportInterval(self.start + coord_delta, self.start + coord_delta + span)
        return self._interval

    def can_zoom(self, factor):
        """
        Check whether a zoom factor keeps the span inside the bounds.

        Args:
            factor (float): Span multiplier

        Returns:
            bool: True if zoom(factor, ...) would change the interval
        """
        if not math.isfinite(factor) or factor <= 0:
            return False
        new_span = self.span * factor
        return self.MIN_SPAN <= new_span <= self.MAX_SPAN

    def zoom(self, factor, anchor):
        """
        Scale the span around an anchor coordinate.

        The anchor keeps its relative position in the interval, so it stays
        under the same screen pixel. Requests leaving [MIN_SPAN, MAX_SPAN]
        are ignored.

        Args:
            factor (float): Span multiplier (< 1 zooms in, > 1 zooms out)
            anchor (float): Coordinate that stays fixed on screen

        Returns:
            ViewportInterval: The interval after zooming (unchanged if rejected)
        """
        if not self.can_zoom(factor) or not math.isfinite(anchor):
            logger.debug(f"Zoom by {factor} rejected at span {self.span}")
            return self._interval

        span = self.span
        new_span = span * factor
        ratio = (anchor - self.start) / span
        new_start = anchor - new_span * ratio
        self._interval = ViewportInterval(new_start, new_start + new_span)
        return self._interval

    def zoom_at_pixel(self, factor, pixel_x, viewport_pixel_width):
        """
        Zoom around the coordinate under a pixel of the widget.

        Args:
            factor (float): Span multiplier
            pixel_x (float): Horizontal pixel position of the cursor
            viewport_pixel_width (float): Width of the widget in pixels

        Returns:
            ViewportInterval: The interval after zooming
        """
        if viewport_pixel_width <= 0:
            return self._interval
        anchor = percent_to_coordinate(pixel_x / viewport_pixel_width * 100, self.start, self.end)
        return self.zoom(factor, anchor)

    def zoom_in(self, anchor=None):
        return self.zoom(self.ZOOM_IN_FACTOR, self._center() if anchor is None else anchor)

    def zoom_out(self, anchor=None):
        return self.zoom(self.ZOOM_OUT_FACTOR, self._center() if anchor is None else anchor)

    def _center(self):
        return (self.start + self.end) / 2

    def __repr__(self):
        return f"Viewport(start={self.start}, end={self.end})"


def project_to_percent(coordinate, start, end):
    """
    Map a coordinate to its percentage position inside [start, end].

    Values outside 0-100 are off-screen and returned unclamped; callers cull.

    Args:
        coordinate (float): Coordinate to place
        start (float): Visible start
        end (float): Visible end

    Returns:
        float: Percentage position, or 0 for a zero span
    """
    span = end - start
    if span == 0:
        return 0
    return ((coordinate - start) / span) * 100


def percent_to_coordinate(percent, start, end):
    return start + (end - start) * percent / 100


def pan_viewport(viewport, pixel_delta, viewport_pixel_width):
    """Pan a viewport and return its new interval as (start, end)."""
    return viewport.pan(pixel_delta, viewport_pixel_width).as_tuple()


def zoom_viewport(viewport, factor, anchor_coordinate):
    """Zoom a viewport and return its interval as (start, end), unchanged if out of bounds."""
    return viewport.zoom(factor, anchor_coordinate).as_tuple()
