"""
Viewport Optimizer - Culls and places timeline items for one render pass.

This module provides the ViewportOptimizer class which implements:
- Viewport culling (only items intersecting the visible interval are placed)
- Horizontal placement as 0-100 percentages of the widget width
- Vertical placement in pixels above the ruler from each item's level
- Paint order derived from containment nesting
"""

import logging
from dataclasses import dataclass

from chronoline.data.models import (
    ITEM_TYPE_EVENT,
    ITEM_TYPE_FRAME,
    ITEM_TYPE_PERIOD,
    item_interval,
)
from chronoline.rendering.viewport import project_to_percent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemPlacement:
    """
    Screen placement of one visible item.

    Attributes:
        item_id: Id of the placed item
        left_percent: Left edge (events: anchor) as percent of the width
        width_percent: Width as percent of the width, 0 for events
        bottom_px: Distance of the item's bottom edge above the widget bottom
        height_px: Height in pixels, 0 for events (card height is the renderer's)
        depth: Containment nesting depth, lower values paint first
    """
    item_id: str
    left_percent: float
    width_percent: float
    bottom_px: float
    height_px: float
    depth: int


class ViewportOptimizer:
    """
    Places only the items visible in the current interval.

    Events are kept while their anchor lies within 0-100 percent. Periods and
    frames are kept while they overlap the visible range and still have a
    positive projected width.
    """

    # Pixels between the widget bottom and level 0
    BASE_OFFSET_PX = 70

    # Vertical pixels per level
    EVENT_LEVEL_PX = 120
    PERIOD_LEVEL_PX = 40
    FRAME_LEVEL_PX = 40

    def __init__(self):
        """Initialize the viewport optimizer."""
        self.visible_item_ids = set()

    def layout(self, items, interval):
        """
        Cull and place items for one render pass.

        Args:
            items (iterable): All items of the timeline
            interval (ViewportInterval): Snapshot of the visible interval

        Returns:
            list: ItemPlacement per visible item, ordered by depth then input order
        """
        items = list(items)
        by_id = {item.id: item for item in items}
        start, end = interval.start, interval.end

        placements = []
        for item in items:
            placement = self.place(item, start, end, self.nesting_depth(item, by_id))
            if placement is not None:
                placements.append(placement)

        placements.sort(key=lambda placement: placement.depth)
        self.visible_item_ids = {placement.item_id for placement in placements}
        logger.debug(f"Placed {len(placements)} of {len(items)} items")
        return placements

    def place(self, item, start, end, depth=0):
        """
        Place a single item, or return None when it is culled.

        Args:
            item: Event, period or frame
            start (float): Visible start
            end (float): Visible end
            depth (int): Paint order of the item

        Returns:
            ItemPlacement or None
        """
        item_start, item_end = item_interval(item)
        left = project_to_percent(item_start, start, end)

        if item.item_type == ITEM_TYPE_EVENT:
            if not 0 <= left <= 100:
                return None
            bottom = self.BASE_OFFSET_PX + item.y_level * self.EVENT_LEVEL_PX
            return ItemPlacement(item.id, left, 0.0, bottom, 0.0, depth)

        right = project_to_percent(item_end, start, end)
        width = right - left
        if right < 0 or left > 100 or width <= 0:
            return None

        if item.item_type == ITEM_TYPE_PERIOD:
            bottom = self.BASE_OFFSET_PX + item.y_level * self.PERIOD_LEVEL_PX
            height = item.height
        else:
            bottom = self.BASE_OFFSET_PX + item.start_y * self.FRAME_LEVEL_PX
            height = item.height * self.FRAME_LEVEL_PX
        return ItemPlacement(item.id, left, width, bottom, height, depth)

    def nesting_depth(self, item, by_id):
        """
        Get the containment depth of an item.

        Frames are 0. A period is 1 inside a frame. An event sits one level
        below its tightest container.

        Args:
            item: Event, period or frame
            by_id (dict): Items keyed by id

        Returns:
            int: Nesting depth
        """
        if item.item_type == ITEM_TYPE_FRAME:
            return 0
        if item.item_type == ITEM_TYPE_PERIOD:
            return 1 if item.frame_id in by_id else 0

        period = by_id.get(item.period_id)
        if period is not None:
            return self.nesting_depth(period, by_id) + 1
        return 1 if item.frame_id in by_id else 0

    def is_item_visible(self, item_id):
        """
        Check if an item was placed in the last layout pass.

        Args:
            item_id (str): Item identifier

        Returns:
            bool: True if the item is visible
        """
        return item_id in self.visible_item_ids
