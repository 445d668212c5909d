"""
Tests for culling and placement of visible items.
"""

import pytest

from chronoline.correlation.containment_resolver import resolve_all
from chronoline.data.models import (
    DateValue,
    TimelineEvent,
    TimelineFrame,
    TimelinePeriod,
    ViewportInterval,
)
from chronoline.rendering.viewport_optimizer import ViewportOptimizer


def _layout(items, start, end):
    optimizer = ViewportOptimizer()
    return optimizer, {placement.item_id: placement
                       for placement in optimizer.layout(items, ViewportInterval(start, end))}


def test_event_placement():
    event = TimelineEvent('e', 'Event', DateValue(50), y_level=2)

    _, placements = _layout([event], 0, 100)

    placement = placements['e']
    assert placement.left_percent == pytest.approx(50)
    assert placement.width_percent == 0
    assert placement.bottom_px == 70 + 2 * 120


def test_events_outside_interval_are_culled():
    events = [
        TimelineEvent('before', 'Before', DateValue(-1)),
        TimelineEvent('edge', 'Edge', DateValue(100)),
        TimelineEvent('after', 'After', DateValue(101)),
    ]

    optimizer, placements = _layout(events, 0, 100)

    assert set(placements) == {'edge'}
    assert optimizer.is_item_visible('edge')
    assert not optimizer.is_item_visible('after')


def test_period_placement_and_partial_visibility():
    period = TimelinePeriod('p', 'Period', DateValue(-50), DateValue(50), y_level=1, height=32)

    _, placements = _layout([period], 0, 100)

    placement = placements['p']
    assert placement.left_percent == pytest.approx(-50)
    assert placement.width_percent == pytest.approx(100)
    assert placement.bottom_px == 70 + 40
    assert placement.height_px == 32


def test_periods_outside_interval_are_culled():
    items = [
        TimelinePeriod('left', 'Left', DateValue(-50), DateValue(-1)),
        TimelinePeriod('right', 'Right', DateValue(101), DateValue(200)),
        TimelinePeriod('empty', 'Empty', DateValue(10), DateValue(10)),
    ]
    _, placements = _layout(items, 0, 100)
    assert placements == {}


def test_frame_placement():
    frame = TimelineFrame('f', 'Frame', DateValue(-600), DateValue(500), start_y=-0.5, height=5)

    _, placements = _layout([frame], -1000, 2050)

    placement = placements['f']
    assert placement.bottom_px == pytest.approx(70 - 0.5 * 40)
    assert placement.height_px == 5 * 40
    assert placement.depth == 0


def test_depth_follows_containment():
    items = resolve_all([
        TimelineEvent('e', 'Caesar', DateValue(-44, 3, 15)),
        TimelinePeriod('p', 'Republic', DateValue(-509), DateValue(-27)),
        TimelineFrame('f', 'Rome', DateValue(-600), DateValue(500)),
        TimelineEvent('loose', 'Outside', DateValue(1969)),
    ])

    optimizer = ViewportOptimizer()
    layout = optimizer.layout(items, ViewportInterval(-1000, 2050))
    depths = {placement.item_id: placement.depth for placement in layout}

    assert depths == {'f': 0, 'p': 1, 'e': 2, 'loose': 0}
    assert [placement.depth for placement in layout] == sorted(depths.values())
