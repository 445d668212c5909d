"""
Click Tracker - Tells single clicks and double clicks apart.

A click on an item is held back for a short interval. If a second press on
the same item arrives in time the pair is promoted to a double click,
otherwise the held click is committed as a single click once the interval
elapses. The clock is passed in by the caller so the state machine can be
driven by a Qt timer or by tests.

States:
    IDLE -> PENDING_SINGLE_CLICK -> COMMITTED | PROMOTED_TO_DOUBLE_CLICK
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ClickState(Enum):
    IDLE = "idle"
    PENDING_SINGLE_CLICK = "pending_single_click"
    COMMITTED = "committed"
    PROMOTED_TO_DOUBLE_CLICK = "promoted_to_double_click"


SINGLE_CLICK = 'single'
DOUBLE_CLICK = 'double'


@dataclass(frozen=True)
class ClickOutcome:
    """A resolved click: kind is SINGLE_CLICK or DOUBLE_CLICK."""
    kind: str
    target_id: str


class ClickTracker:
    """
    Explicit state machine for click disambiguation.

    COMMITTED and PROMOTED_TO_DOUBLE_CLICK are terminal for one gesture; the
    next press starts a new gesture from them exactly as from IDLE.
    """

    DEFAULT_INTERVAL_MS = 250

    def __init__(self, interval_ms=DEFAULT_INTERVAL_MS):
        """
        Initialize the tracker.

        Args:
            interval_ms (int): Maximum delay between the presses of a double click
        """
        self.interval_ms = interval_ms
        self.state = ClickState.IDLE
        self._pending_target = None
        self._pending_since = None

    @property
    def pending_target(self):
        return self._pending_target

    def press(self, target_id, now_ms) -> Optional[ClickOutcome]:
        """
        Register a press on a target.

        Args:
            target_id (str): Id of the pressed item
            now_ms (float): Current time in milliseconds

        Returns:
            ClickOutcome: The double click this press completes, or the single
                          click it forces out for a different or stale target,
                          None otherwise
        """
        committed = None
        if self.state == ClickState.PENDING_SINGLE_CLICK:
            elapsed = now_ms - self._pending_since
            if target_id == self._pending_target and elapsed <= self.interval_ms:
                self._finish(ClickState.PROMOTED_TO_DOUBLE_CLICK)
                return ClickOutcome(DOUBLE_CLICK, target_id)
            logger.debug(f"Press on {target_id!r} commits pending click on {self._pending_target!r}")
            committed = self.flush()

        self.state = ClickState.PENDING_SINGLE_CLICK
        self._pending_target = target_id
        self._pending_since = now_ms
        return committed

    def poll(self, now_ms) -> Optional[ClickOutcome]:
        """
        Commit the pending click once its interval has elapsed.

        Args:
            now_ms (float): Current time in milliseconds

        Returns:
            ClickOutcome: The committed single click, or None if nothing is due
        """
        if self.state != ClickState.PENDING_SINGLE_CLICK:
            return None
        if now_ms - self._pending_since < self.interval_ms:
            return None
        return self.flush()

    def flush(self) -> Optional[ClickOutcome]:
        """
        Commit the pending click immediately.

        Returns:
            ClickOutcome: The committed single click, or None if nothing is pending
        """
        if self.state != ClickState.PENDING_SINGLE_CLICK:
            return None
        target_id = self._pending_target
        self._finish(ClickState.COMMITTED)
        return ClickOutcome(SINGLE_CLICK, target_id)

    def reset(self):
        """Drop any pending click and return to IDLE."""
        self.state = ClickState.IDLE
        self._pending_target = None
        self._pending_since = None

    def _finish(self, state):
        self.state = state
        self._pending_target = None
        self._pending_since = None
