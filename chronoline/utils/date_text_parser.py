"""
Date Text Parser for Timeline Import
====================================

This module turns pasted plain text into timeline events. Each line has the
form::

    DD.MM.YYYY - Title * Optional description

Day and month are optional (``MM.YYYY`` and ``YYYY`` are accepted) and BCE
years are written as negative numbers, e.g. ``15.03.-44 - Caesar``.

Lines that cannot be parsed are skipped and logged; parsing never raises.
"""

import logging
import random
import re
from typing import List, Optional

from chronoline.data.models import DateValue, TimelineEvent

# Configure logger
logger = logging.getLogger(__name__)


TITLE_SEPARATOR = ' - '
DESCRIPTION_SEPARATOR = ' * '
DATE_PART_SEPARATOR = '.'

PASTEL_COLORS = (
    '#f87171',  # red
    '#fb923c',  # orange
    '#facc15',  # yellow
    '#4ade80',  # green
    '#34d399',  # emerald
    '#2dd4bf',  # teal
    '#60a5fa',  # sky
    '#a78bfa',  # violet
    '#c084fc',  # purple
    '#f472b6',  # pink
    '#9ca3af',  # gray
)

DEFAULT_IMPORT_COLOR = PASTEL_COLORS[0]


# Leading signed integer, trailing text such as "th" is ignored
LEADING_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")


def _parse_int(text: str) -> Optional[int]:
    match = LEADING_INT_PATTERN.match(text)
    return int(match.group(1)) if match else None


def parse_date_text(date_text: str) -> Optional[DateValue]:
    """
    Parse the date part of an import line.

    Args:
        date_text: "DD.MM.YYYY", "MM.YYYY" or "YYYY"

    Returns:
        DateValue: Parsed date, or None if no numeric part was found.
                   Out-of-range months and days are dropped.
    """
    parts = [_parse_int(part) for part in date_text.split(DATE_PART_SEPARATOR)]
    parts = [part for part in parts if part is not None]
    if not parts:
        return None

    day = month = None
    if len(parts) >= 3:
        day, month, year = parts[0], parts[1], parts[2]
    elif len(parts) == 2:
        month, year = parts
    else:
        year = parts[0]

    if month is not None and not 1 <= month <= 12:
        month = None
    if day is not None and not 1 <= day <= 31:
        day = None

    return DateValue(year, month, day)


def parse_import_line(line: str, color: str = DEFAULT_IMPORT_COLOR) -> Optional[TimelineEvent]:
    """
    Parse one import line into an event without an id.

    Args:
        line: Text line
        color: Card color for the event

    Returns:
        TimelineEvent: Event at level 0, or None if the line is not valid
    """
    separator_index = line.find(TITLE_SEPARATOR)
    if separator_index == -1:
        return None

    date = parse_date_text(line[:separator_index].strip())
    if date is None:
        return None

    content = line[separator_index + len(TITLE_SEPARATOR):].strip()
    title, description = content, ''
    description_index = content.find(DESCRIPTION_SEPARATOR)
    if description_index != -1:
        title = content[:description_index].strip()
        description = content[description_index + len(DESCRIPTION_SEPARATOR):].strip()

    return TimelineEvent(
        id='',
        title=title,
        date=date,
        y_level=0,
        color=color,
        description=description,
    )


def parse_import_text(text: str, default_color: str = DEFAULT_IMPORT_COLOR,
                      randomize_color: bool = True,
                      rng: Optional[random.Random] = None) -> List[TimelineEvent]:
    """
    Parse pasted text into events, one per valid line.

    Args:
        text: Multi-line import text
        default_color: Color used when colors are not randomized
        randomize_color: Pick a random pastel color per event
        rng: Random source (defaults to the module random generator)

    Returns:
        list: Parsed events without ids, in line order
    """
    rng = rng or random
    events = []
    skipped = 0

    for line in text.splitlines():
        if not line.strip():
            continue

        color = rng.choice(PASTEL_COLORS) if randomize_color else default_color
        event = parse_import_line(line, color)
        if event is None:
            skipped += 1
            logger.debug(f"Skipping import line: {line!r}")
            continue
        events.append(event)

    if skipped:
        logger.info(f"Import skipped {skipped} invalid line(s)")
    return events
