"""
Tests for the viewport, projection and anchor-stable zoom.
"""

import math

import pytest

from chronoline.rendering.viewport import (
    Viewport,
    pan_viewport,
    percent_to_coordinate,
    project_to_percent,
    zoom_viewport,
)


def test_projection_is_linear():
    start, end = -1000, 2050
    assert project_to_percent(start, start, end) == 0
    assert project_to_percent(end, start, end) == 100
    assert project_to_percent((start + end) / 2, start, end) == pytest.approx(50)
    assert project_to_percent(start + 305, start, end) == pytest.approx(10)


def test_projection_outside_interval_is_unclamped():
    assert project_to_percent(-10, 0, 100) == pytest.approx(-10)
    assert project_to_percent(150, 0, 100) == pytest.approx(150)


def test_projection_zero_span_returns_zero():
    assert project_to_percent(5, 10, 10) == 0


def test_percent_to_coordinate_inverts_projection():
    assert percent_to_coordinate(project_to_percent(1969.5, -1000, 2050), -1000, 2050) == pytest.approx(1969.5)


def test_invalid_interval_raises():
    with pytest.raises(ValueError):
        Viewport(10, 10)
    with pytest.raises(ValueError):
        Viewport(10, 5)
    with pytest.raises(ValueError):
        Viewport(0, math.inf)


def test_oversized_interval_is_clamped_around_centre():
    viewport = Viewport(0, 20000)

    assert viewport.span == pytest.approx(Viewport.MAX_SPAN)
    assert viewport.start == pytest.approx(5000)
    assert viewport.end == pytest.approx(15000)


def test_undersized_interval_is_clamped_around_centre():
    viewport = Viewport(2000, 2000 + 1 / 3650)

    assert viewport.span == pytest.approx(Viewport.MIN_SPAN)
    assert (viewport.start + viewport.end) / 2 == pytest.approx(2000 + 1 / 7300)


def test_reset_clamps_span_and_zoom_still_works():
    viewport = Viewport(0, 100)

    viewport.reset(0, 20000)
    assert viewport.span == pytest.approx(Viewport.MAX_SPAN)

    assert viewport.zoom(0.9, 10000).span == pytest.approx(Viewport.MAX_SPAN * 0.9)
    assert viewport.zoom(1.1, 10000).span <= Viewport.MAX_SPAN


def test_default_interval():
    viewport = Viewport()
    assert viewport.snapshot().as_tuple() == (-1000, 2050)


def test_pan_keeps_span():
    viewport = Viewport(0, 100)

    interval = viewport.pan(160, 1600)

    assert interval.start == pytest.approx(10)
    assert interval.end == pytest.approx(110)
    assert interval.span == pytest.approx(100)


def test_pan_full_width_moves_one_span():
    viewport = Viewport(0, 100)
    viewport.pan(-800, 800)
    assert viewport.snapshot().as_tuple() == pytest.approx((-100, 0))


def test_pan_ignores_degenerate_input():
    viewport = Viewport(0, 100)
    viewport.pan(50, 0)
    viewport.pan(math.nan, 800)
    assert viewport.snapshot().as_tuple() == (0, 100)


def test_pan_viewport_returns_tuple():
    viewport = Viewport(0, 100)
    assert pan_viewport(viewport, 400, 800) == pytest.approx((50, 150))


@pytest.mark.parametrize("factor", [0.5, 0.9, 1.1, 2.0])
@pytest.mark.parametrize("anchor", [-1000, -44.2, 500, 1969.55, 2050])
def test_zoom_is_anchor_stable(factor, anchor):
    viewport = Viewport(-1000, 2050)
    before = project_to_percent(anchor, viewport.start, viewport.end)

    start, end = zoom_viewport(viewport, factor, anchor)

    assert end - start == pytest.approx(3050 * factor)
    assert project_to_percent(anchor, start, end) == pytest.approx(before)


def test_zoom_at_pixel_keeps_coordinate_under_cursor():
    viewport = Viewport(0, 100)
    anchor = percent_to_coordinate(25, 0, 100)

    viewport.zoom_at_pixel(0.5, 200, 800)

    assert project_to_percent(anchor, viewport.start, viewport.end) == pytest.approx(25)
    assert viewport.span == pytest.approx(50)


def test_zoom_out_stops_at_max_span():
    viewport = Viewport(-1000, 2050)

    for _ in range(200):
        viewport.zoom_out()
    stable = viewport.snapshot()
    viewport.zoom_out()

    assert stable.span <= Viewport.MAX_SPAN
    assert stable.span * Viewport.ZOOM_OUT_FACTOR > Viewport.MAX_SPAN
    assert viewport.snapshot() == stable


def test_zoom_in_stops_at_min_span():
    viewport = Viewport(-1000, 2050)

    for _ in range(500):
        viewport.zoom_in()
    stable = viewport.snapshot()
    viewport.zoom_in()

    assert stable.span >= Viewport.MIN_SPAN
    assert stable.span * Viewport.ZOOM_IN_FACTOR < Viewport.MIN_SPAN
    assert viewport.snapshot() == stable


def test_zoom_rejects_invalid_factor():
    viewport = Viewport(0, 100)
    assert not viewport.can_zoom(0)
    assert not viewport.can_zoom(-1)
    assert viewport.zoom(math.inf, 50).as_tuple() == (0, 100)


def test_reset_restores_initial_interval():
    viewport = Viewport(0, 100)
    viewport.pan(100, 100)
    viewport.zoom(0.5, 120)

    viewport.reset()
    assert viewport.snapshot().as_tuple() == (0, 100)

    viewport.reset(10, 20)
    assert viewport.snapshot().as_tuple() == (10, 20)
