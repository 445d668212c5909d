"""
Error Handler Utility
=====================

This module provides centralized error handling for the timeline: the
exception hierarchy raised at the store and configuration boundaries, and
an ErrorHandler that logs, records and optionally reports errors so that
paint and input handlers never abort on an unexpected exception.
"""

import logging
import traceback
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Callable, Any
from PyQt5.QtWidgets import QMessageBox
from PyQt5.QtCore import QObject, pyqtSignal

# Configure logger
logger = logging.getLogger(__name__)


class ErrorSeverity:
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class TimelineError(Exception):
    """Base exception for timeline-related errors."""

    def __init__(self, message: str, details: Optional[str] = None,
                 severity: str = ErrorSeverity.ERROR):
        """
        Initialize timeline error.

        Args:
            message: User-friendly error message
            details: Technical details for logging
            severity: Error severity level
        """
        super().__init__(message)
        self.message = message
        self.details = details or message
        self.severity = severity


class ItemNotFoundError(TimelineError):
    """Exception for an item or link id that is not in the timeline."""

    def __init__(self, item_id: str, kind: str = "item"):
        """
        Initialize lookup error.

        Args:
            item_id: The id that was not found
            kind: What was looked up ("item" or "link")
        """
        super().__init__(f"No {kind} with id {item_id!r}", severity=ErrorSeverity.WARNING)
        self.item_id = item_id
        self.kind = kind


class ConfigError(TimelineError):
    """Exception for invalid configuration values."""
    pass


class RenderError(TimelineError):
    """Exception for rendering errors."""
    pass


@dataclass(frozen=True)
class ErrorRecord:
    """
    One handled error as kept in the handler history.

    Attributes:
        timestamp: When the error was handled
        severity: ErrorSeverity value
        context: What the timeline was doing ("painting timeline", ...)
        message: User-facing message
        details: Technical details
        item_id: Id of the item or link involved, if known
    """
    timestamp: datetime
    severity: str
    context: str
    message: str
    details: str
    item_id: Optional[str] = None


class ErrorHandler(QObject):
    """
    Centralized error handler for the timeline.

    Logs errors at their severity, keeps a short history of ErrorRecord
    entries, emits a signal for listeners and can show a message box.

    Signals:
        error_occurred: Emitted when an error is handled (severity, message, details)
    """

    error_occurred = pyqtSignal(str, str, str)  # severity, message, details

    MAX_STORED_ERRORS = 10

    # Message box icon and title per severity
    DIALOG_STYLES = {
        ErrorSeverity.CRITICAL: (QMessageBox.Critical, "Error"),
        ErrorSeverity.ERROR: (QMessageBox.Critical, "Error"),
        ErrorSeverity.WARNING: (QMessageBox.Warning, "Warning"),
        ErrorSeverity.INFO: (QMessageBox.Information, "Information"),
    }

    LOG_LEVELS = {
        ErrorSeverity.CRITICAL: logging.CRITICAL,
        ErrorSeverity.ERROR: logging.ERROR,
        ErrorSeverity.WARNING: logging.WARNING,
        ErrorSeverity.INFO: logging.INFO,
    }

    def __init__(self, parent=None):
        """
        Initialize error handler.

        Args:
            parent: Parent widget for message boxes
        """
        super().__init__(parent)
        self.parent_widget = parent
        self._error_count = 0
        self._history = deque(maxlen=self.MAX_STORED_ERRORS)

    def handle_error(self, error: Exception, context: str = "",
                     show_dialog: bool = True) -> None:
        """
        Handle an error with logging and optional user notification.

        Args:
            error: The exception that occurred
            context: What the timeline was doing (e.g. "painting timeline")
            show_dialog: Whether to show an error dialog to the user
        """
        self._error_count += 1

        if isinstance(error, TimelineError):
            message, details, severity = error.message, error.details, error.severity
        else:
            message = f"An unexpected error occurred while {context}" if context else "An unexpected error occurred"
            details = f"{type(error).__name__}: {error}\n{traceback.format_exc()}"
            severity = ErrorSeverity.ERROR

        item_id = getattr(error, 'item_id', None)
        where = f" while {context}" if context else ""
        subject = f" [{item_id}]" if item_id is not None else ""
        logger.log(self.LOG_LEVELS.get(severity, logging.ERROR), f"Timeline error{where}{subject}: {details}")

        self._history.append(ErrorRecord(datetime.now(), severity, context, message, details, item_id))
        self.error_occurred.emit(severity, message, details)

        if show_dialog and self.parent_widget is not None:
            icon, title = self.DIALOG_STYLES.get(severity, self.DIALOG_STYLES[ErrorSeverity.ERROR])
            msg_box = QMessageBox(icon, title, message, QMessageBox.Ok, self.parent_widget)
            msg_box.setDetailedText(details)
            msg_box.exec_()

    def get_error_history(self, item_id: Optional[str] = None) -> list:
        """
        Get recent handled errors, oldest first.

        Args:
            item_id: Only return errors about this item or link

        Returns:
            list: ErrorRecord entries
        """
        if item_id is None:
            return list(self._history)
        return [record for record in self._history if record.item_id == item_id]

    def get_error_count(self) -> int:
        return self._error_count

    def clear_error_history(self):
        """Clear error history and reset count."""
        self._history.clear()
        self._error_count = 0

    @staticmethod
    def safe_execute(func: Callable, *args, default_return: Any = None,
                     error_handler: Optional['ErrorHandler'] = None,
                     context: str = "", **kwargs) -> Any:
        """
        Run a paint or input step, turning any exception into a handled error.

        Args:
            func: Function to execute
            *args: Positional arguments for function
            default_return: Value to return if function fails
            error_handler: ErrorHandler that records the failure (logged only if omitted)
            context: What the step does, used in messages
            **kwargs: Keyword arguments for function

        Returns:
            Function return value, or default_return if error occurs
        """
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if error_handler:
                error_handler.handle_error(e, context, show_dialog=False)
            else:
                logger.error(f"Timeline error while {context}: {e}")
            return default_return
