"""
Timeline Data Manager
=====================

This module provides the explicit state object of a timeline session. It is
owned by the composition root (the timeline dialog) and handed to whatever
needs to read or change timeline state; nothing in the engine reaches it
through a global.

The TimelineDataManager is responsible for:
- Holding the items and links of the timeline
- Re-resolving containment whenever an item is created, edited or deleted
- Owning the Viewport and delegating pan/zoom to it
- Tracking the link and vertical-drag gestures until they commit or cancel
- Notifying listeners after every committed change
"""

import logging
import uuid
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

from chronoline.correlation.containment_resolver import ContainmentResolver
from chronoline.data.models import (
    ITEM_TYPE_EVENT,
    ITEM_TYPE_FRAME,
    ITEM_TYPE_PERIOD,
    DateValue,
    TimelineEvent,
    TimelineFrame,
    TimelineLink,
    TimelinePeriod,
)
from chronoline.rendering.viewport import Viewport
from chronoline.utils.error_handler import ItemNotFoundError

# Configure logger
logger = logging.getLogger(__name__)


DEFAULT_LINK_COLOR = '#22d3ee'


def new_id():
    return uuid.uuid4().hex


class TimelineDataManager:
    """
    Session state of one timeline: items, links, viewport and gestures.

    Items are stored with their frame/period references already resolved.
    Mutations replace stored items instead of editing them in place, so an
    item handed out earlier is never changed behind the caller's back.
    """

    # Vertical drag snaps to whole levels; frames move in half levels
    LEVEL_SNAP = {
        ITEM_TYPE_EVENT: 1.0,
        ITEM_TYPE_PERIOD: 1.0,
        ITEM_TYPE_FRAME: 0.5,
    }

    def __init__(self, config=None, resolver=None):
        """
        Initialize the data manager.

        Args:
            config (TimelineConfig): Preferences for the initial viewport (optional)
            resolver (ContainmentResolver): Containment resolver (optional)
        """
        self.resolver = resolver or ContainmentResolver()

        if config is not None:
            start, end = config.view_range
            self.viewport = Viewport(start, end)
        else:
            self.viewport = Viewport()

        self._items = []
        self._links = []
        self._listeners = []

        # Gesture state
        self._link_source_id = None
        self._drag_item_id = None
        self._drag_delta = 0.0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def items(self):
        return tuple(self._items)

    @property
    def links(self):
        return tuple(self._links)

    def get_item(self, item_id):
        """
        Look up an item by id.

        Args:
            item_id (str): Item id

        Returns:
            The stored item

        Raises:
            ItemNotFoundError: If no item has this id
        """
        for item in self._items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    def has_item(self, item_id):
        return any(item.id == item_id for item in self._items)

    def _index_of(self, item_id):
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise ItemNotFoundError(item_id)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, callback: Callable[[], None]):
        """Register a callback invoked after every committed change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback()

    # ------------------------------------------------------------------
    # Item mutations
    # ------------------------------------------------------------------

    def add_item(self, item):
        """
        Add an item, assigning an id when it has none.

        Args:
            item: Event, period or frame

        Returns:
            The stored item with id and containment references set
        """
        stored = self._insert(item)
        self._after_structure_change(stored)
        logger.debug(f"Added {stored.item_type} {stored.id!r} ({stored.title})")
        self._notify()
        return self.get_item(stored.id)

    def add_items(self, items: Iterable):
        """
        Add several items at once with a single notification.

        Args:
            items (iterable): Events, periods or frames

        Returns:
            list: The stored items
        """
        ids = [self._insert(item).id for item in items]
        self._items = self.resolver.resolve_all(self._items)
        logger.info(f"Added {len(ids)} items")
        self._notify()
        return [self.get_item(item_id) for item_id in ids]

    def _insert(self, item):
        if not item.id:
            item = replace(item, id=new_id())
        elif self.has_item(item.id):
            item = replace(item, id=new_id())
            logger.debug(f"Duplicate id on insert, reassigned to {item.id!r}")
        self._items.append(item)
        return item

    def update_item(self, item):
        """
        Replace a stored item with an edited version.

        Containment of the item is re-derived, since changed dates can move
        it into or out of a container.

        Args:
            item: Edited item carrying the id of a stored item

        Returns:
            The stored item

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        index = self._index_of(item.id)
        previous = self._items[index]
        self._items[index] = item

        if previous.item_type != ITEM_TYPE_EVENT and previous.item_type != item.item_type:
            # A container changed type; references to it must be re-derived
            self._items = self.resolver.resolve_all(self._items)
        else:
            self._after_structure_change(item)

        logger.debug(f"Updated {item.item_type} {item.id!r}")
        self._notify()
        return self.get_item(item.id)

    def delete_item(self, item_id):
        """
        Delete an item and every link touching it.

        Args:
            item_id (str): Item id

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        index = self._index_of(item_id)
        removed = self._items.pop(index)
        self._links = [
            link for link in self._links
            if link.source_id != item_id and link.target_id != item_id
        ]

        if removed.item_type != ITEM_TYPE_EVENT:
            self._items = self.resolver.resolve_all(self._items)

        if self._drag_item_id == item_id:
            self.cancel_drag()
        if self._link_source_id == item_id:
            self.cancel_link()

        logger.debug(f"Deleted {removed.item_type} {item_id!r}")
        self._notify()

    def _after_structure_change(self, item):
        if item.item_type == ITEM_TYPE_EVENT:
            index = self._index_of(item.id)
            self._items[index] = self.resolver.apply(item, self._items)
        else:
            # Periods and frames are containers: everything may re-parent
            self._items = self.resolver.resolve_all(self._items)

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    @property
    def link_source_id(self):
        return self._link_source_id

    def begin_link(self, source_id):
        """
        Start a link gesture from an item.

        Args:
            source_id (str): Id of the item the link starts at

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        self.get_item(source_id)
        self._link_source_id = source_id
        logger.debug(f"Link gesture started at {source_id!r}")

    def complete_link(self, target_id, color=None) -> Optional[TimelineLink]:
        """
        Finish the link gesture on a target item.

        Completing on the source item itself cancels the gesture.

        Args:
            target_id (str): Id of the item the link ends at
            color (str): Link color (optional)

        Returns:
            TimelineLink: The created link, or None if no link was created
        """
        source_id = self._link_source_id
        self._link_source_id = None

        if source_id is None or source_id == target_id:
            return None
        if not self.has_item(source_id) or not self.has_item(target_id):
            logger.debug(f"Link between {source_id!r} and {target_id!r} dropped, item missing")
            return None

        link = TimelineLink(new_id(), source_id, target_id, color or DEFAULT_LINK_COLOR)
        self._links.append(link)
        self._notify()
        return link

    def cancel_link(self):
        """Abort the link gesture without changing anything."""
        self._link_source_id = None

    def update_link(self, link_id, color):
        """
        Change the color of a link.

        Raises:
            ItemNotFoundError: If the link id is unknown
        """
        for index, link in enumerate(self._links):
            if link.id == link_id:
                self._links[index] = replace(link, color=color)
                self._notify()
                return self._links[index]
        raise ItemNotFoundError(link_id, kind="link")

    def delete_link(self, link_id):
        """
        Delete a link.

        Raises:
            ItemNotFoundError: If the link id is unknown
        """
        remaining = [link for link in self._links if link.id != link_id]
        if len(remaining) == len(self._links):
            raise ItemNotFoundError(link_id, kind="link")
        self._links = remaining
        self._notify()

    # ------------------------------------------------------------------
    # Vertical drag
    # ------------------------------------------------------------------

    @property
    def drag_item_id(self):
        return self._drag_item_id

    @property
    def pending_drag_delta(self):
        return self._drag_delta

    def begin_drag(self, item_id):
        """
        Start moving an item vertically.

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        self.get_item(item_id)
        self._drag_item_id = item_id
        self._drag_delta = 0.0

    def drag_by(self, level_delta):
        """Accumulate a vertical movement in levels; nothing is committed yet."""
        if self._drag_item_id is not None:
            self._drag_delta += level_delta

    def end_drag(self):
        """
        Commit the accumulated vertical movement as one change.

        Returns:
            The moved item, or None if there was nothing to commit
        """
        item_id, delta = self._drag_item_id, self._drag_delta
        self.cancel_drag()

        if item_id is None or not self.has_item(item_id):
            return None

        item = self.get_item(item_id)
        snap = self.LEVEL_SNAP[item.item_type]
        steps = round(delta / snap) * snap
        if steps == 0:
            return None

        if item.item_type == ITEM_TYPE_FRAME:
            moved = replace(item, start_y=item.start_y + steps)
        else:
            moved = replace(item, y_level=item.y_level + steps)
        return self.update_item(moved)

    def cancel_drag(self):
        self._drag_item_id = None
        self._drag_delta = 0.0

    def cancel_gesture(self):
        """Abort any link or drag gesture in progress (Escape)."""
        self.cancel_link()
        self.cancel_drag()

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    def pan(self, pixel_delta, viewport_pixel_width):
        interval = self.viewport.pan(pixel_delta, viewport_pixel_width)
        self._notify()
        return interval

    def zoom(self, factor, anchor):
        before = self.viewport.snapshot()
        interval = self.viewport.zoom(factor, anchor)
        if interval != before:
            self._notify()
        return interval

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def load(self, items: Iterable, links: Iterable = (), viewport=None):
        """
        Replace the whole session state.

        Args:
            items (iterable): Items to load (ids are kept; missing ids are assigned)
            links (iterable): Links to load; links to unknown items are dropped
            viewport (tuple): (start, end) to show, or None for the initial interval
        """
        self.cancel_gesture()
        self._items = []
        for item in items:
            self._insert(item)
        self._items = self.resolver.resolve_all(self._items)

        known = {item.id for item in self._items}
        self._links = [link for link in links if link.source_id in known and link.target_id in known]

        if viewport is None:
            self.viewport.reset()
        else:
            self.viewport.reset(*viewport)

        logger.info(f"Loaded {len(self._items)} items and {len(self._links)} links")
        self._notify()

    def clear(self):
        """Remove all items and links and reset the viewport."""
        self.cancel_gesture()
        self._items = []
        self._links = []
        self.viewport.reset()
        logger.info("Timeline cleared")
        self._notify()


def sample_items() -> List:
    """
    Build the demo data set shown on first start.

    Returns:
        list: Periods, events and a frame spanning Roman and modern history
    """
    return [
        TimelinePeriod('1', 'Roman Republic', DateValue(-509), DateValue(-27), y_level=0, color='blue'),
        TimelinePeriod('2', 'Roman Empire', DateValue(-27), DateValue(476), y_level=1, color='purple'),
        TimelineEvent('3', 'Julius Caesar assassinated', DateValue(-44, 3, 15), y_level=2, color='red',
                      description='A pivotal event that led to the end of the Roman Republic.'),
        TimelineEvent('4', 'Start of Pax Romana', DateValue(27), y_level=3, color='green',
                      description='A long period of relative peacefulness and minimal expansion by the Roman military.'),
        TimelineFrame('5', 'Rise and Fall of Rome', DateValue(-600), DateValue(500), start_y=-0.5, height=5,
                      color='gray'),
        TimelineEvent('6', 'World War I Starts', DateValue(1914, 7, 28), y_level=0, color='orange',
                      description='Austria-Hungary declares war on Serbia, beginning World War I.'),
        TimelineEvent('7', 'World War II Starts', DateValue(1939, 9, 1), y_level=1, color='red',
                      description='Germany invades Poland, leading to declarations of war by France and the United Kingdom.'),
        TimelinePeriod('8', 'The Cold War', DateValue(1947), DateValue(1991), y_level=2, color='sky'),
        TimelineEvent('9', 'Moon Landing', DateValue(1969, 7, 20), y_level=3, color='yellow',
                      description='Apollo 11 was the first spaceflight to land humans on the Moon.'),
    ]
