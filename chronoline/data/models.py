"""
Timeline Data Models - Value types shared by the engine and the canvas.

This module defines the dataclasses for dates, timed items (events, periods,
frames), links between items, viewport intervals and ruler ticks.

Items are plain data. Coordinates are always derived from the date fields
through the calendar math module, never stored.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from chronoline.utils.calendar_math import to_coordinate


ITEM_TYPE_EVENT = 'event'
ITEM_TYPE_PERIOD = 'period'
ITEM_TYPE_FRAME = 'frame'


@dataclass(frozen=True)
class DateValue:
    """
    A calendar date with optional month/day precision.

    Attributes:
        year: Astronomical year (0 is 1 BCE, -44 is 44 BCE)
        month: Optional month 1-12
        day: Optional day 1-31 (ignored by the engine without a month)
    """
    year: int
    month: Optional[int] = None
    day: Optional[int] = None

    @property
    def coordinate(self) -> float:
        """Continuous timeline coordinate for this date."""
        return to_coordinate(self)


@dataclass(frozen=True)
class ViewportInterval:
    """Immutable snapshot of the visible coordinate interval."""
    start: float
    end: float

    @property
    def span(self) -> float:
        return self.end - self.start

    def as_tuple(self) -> Tuple[float, float]:
        return (self.start, self.end)


@dataclass
class TimelineEvent:
    """A point event placed at a single date."""
    id: str
    title: str
    date: DateValue
    y_level: float = 0
    color: str = '#f87171'
    description: str = ''
    main_text: str = ''
    image_url: Optional[str] = None
    article_url: Optional[str] = None
    youtube_url: Optional[str] = None
    gmaps_query: Optional[str] = None
    frame_id: Optional[str] = None
    period_id: Optional[str] = None

    item_type = ITEM_TYPE_EVENT


@dataclass
class TimelinePeriod:
    """A span of time drawn as a horizontal bar on one vertical level."""
    id: str
    title: str
    start: DateValue
    end: DateValue
    y_level: float = 0
    color: str = '#60a5fa'
    height: float = 32
    opacity: float = 80
    frame_id: Optional[str] = None

    item_type = ITEM_TYPE_PERIOD


@dataclass
class TimelineFrame:
    """A dashed box grouping periods and events over a vertical band."""
    id: str
    title: str
    start: DateValue
    end: DateValue
    start_y: float = 0
    height: float = 4
    color: str = '#9ca3af'

    item_type = ITEM_TYPE_FRAME


TimelineItem = Union[TimelineEvent, TimelinePeriod, TimelineFrame]


@dataclass
class TimelineLink:
    """A visual connection drawn between two items."""
    id: str
    source_id: str
    target_id: str
    color: str = '#22d3ee'


@dataclass(frozen=True)
class Tick:
    """
    A single ruler tick.

    Attributes:
        position: Continuous coordinate of the tick
        label: Display text, None for unlabeled minor ticks
    """
    position: float
    label: Optional[str] = None


@dataclass
class TickSet:
    """Major and minor ticks for one ruler render."""
    major: List[Tick] = field(default_factory=list)
    minor: List[Tick] = field(default_factory=list)


def item_interval(item: TimelineItem) -> Tuple[float, float]:
    """
    Get the coordinate interval covered by an item.

    Events cover a zero-width interval at their date. Periods and frames
    cover [start, end]; an inverted pair is normalised so that the returned
    start is never greater than the end.

    Args:
        item: Event, period or frame

    Returns:
        tuple: (start_coordinate, end_coordinate)
    """
    if item.item_type == ITEM_TYPE_EVENT:
        position = to_coordinate(item.date)
        return (position, position)

    start = to_coordinate(item.start)
    end = to_coordinate(item.end)
    if start > end:
        start, end = end, start
    return (start, end)
