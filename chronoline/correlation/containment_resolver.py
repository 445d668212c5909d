"""
Containment Resolver - Finds the tightest period and frame enclosing an item.

This module provides the ContainmentResolver class which derives the parent
references stored on timeline items:
- frame_id for events and periods: the smallest frame fully containing the item
- period_id for events: the smallest period fully containing the event

The references are derived data. They are recomputed whenever an item is
created or edited, and for every item when a container changes.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from chronoline.data.models import (
    ITEM_TYPE_EVENT,
    ITEM_TYPE_FRAME,
    ITEM_TYPE_PERIOD,
    item_interval,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Containment:
    """Parent references computed for one item."""
    frame_id: Optional[str] = None
    period_id: Optional[str] = None


class ContainmentResolver:
    """
    Resolves structural containment between timeline items.

    A container encloses an item when item_start >= container_start and
    item_end <= container_end. Among all enclosing containers of one type the
    one with the smallest span wins; on equal spans the first one in
    iteration order is kept.

    The scan is linear in the number of items, which is fine for the
    hundreds of items a timeline holds.
    """

    def find_tightest(self, candidate, items, container_type):
        """
        Find the tightest container of a type enclosing the candidate.

        Args:
            candidate: Item to place
            items (iterable): All items of the timeline
            container_type (str): ITEM_TYPE_PERIOD or ITEM_TYPE_FRAME

        Returns:
            str: Id of the tightest container, or None
        """
        item_start, item_end = item_interval(candidate)
        best_id = None
        best_span = None

        for container in items:
            if container.item_type != container_type or container.id == candidate.id:
                continue

            container_start, container_end = item_interval(container)
            if item_start >= container_start and item_end <= container_end:
                span = container_end - container_start
                if best_span is None or span < best_span:
                    best_id = container.id
                    best_span = span

        return best_id

    def resolve(self, candidate, items):
        """
        Compute the enclosing frame and period of an item.

        Args:
            candidate: Event, period or frame
            items (iterable): All items of the timeline (may include the candidate)

        Returns:
            Containment: frame_id for events and periods, period_id for events
        """
        items = list(items)

        if candidate.item_type == ITEM_TYPE_EVENT:
            return Containment(
                frame_id=self.find_tightest(candidate, items, ITEM_TYPE_FRAME),
                period_id=self.find_tightest(candidate, items, ITEM_TYPE_PERIOD),
            )

        if candidate.item_type == ITEM_TYPE_PERIOD:
            return Containment(frame_id=self.find_tightest(candidate, items, ITEM_TYPE_FRAME))

        return Containment()

    def apply(self, candidate, items):
        """
        Return a copy of the item with its parent references written.

        Args:
            candidate: Event, period or frame
            items (iterable): All items of the timeline

        Returns:
            Item of the same type carrying the resolved references
        """
        containment = self.resolve(candidate, items)

        if candidate.item_type == ITEM_TYPE_EVENT:
            return replace(candidate, frame_id=containment.frame_id, period_id=containment.period_id)
        if candidate.item_type == ITEM_TYPE_PERIOD:
            return replace(candidate, frame_id=containment.frame_id)
        return candidate

    def resolve_all(self, items: Iterable) -> List:
        """
        Re-derive the parent references of every item.

        Args:
            items (iterable): All items of the timeline

        Returns:
            list: New item list, same order, with references recomputed
        """
        items = list(items)
        resolved = [self.apply(item, items) for item in items]
        logger.debug(f"Resolved containment for {len(resolved)} items")
        return resolved


_default_resolver = ContainmentResolver()


def resolve_containment(candidate, items):
    """Compute the enclosing frame and period ids of an item."""
    return _default_resolver.resolve(candidate, items)


def apply_containment(candidate, items):
    """Return a copy of the item with its enclosing frame/period ids written."""
    return _default_resolver.apply(candidate, items)


def resolve_all(items):
    """Re-derive the parent references of every item."""
    return _default_resolver.resolve_all(items)
