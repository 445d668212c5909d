"""
Timeline Canvas - Main visualization widget for the timeline.

This module provides the TimelineCanvas class which paints the ruler and the
visible items of a TimelineDataManager and translates mouse and keyboard
input into pan, zoom, drag, link and click operations on it.
"""

import logging

from PyQt5.QtCore import QElapsedTimer, QPointF, QRectF, Qt, QTimer, pyqtSignal
from PyQt5.QtGui import QColor, QPainter
from PyQt5.QtWidgets import QSizePolicy, QWidget

from chronoline.data.models import ITEM_TYPE_EVENT, ITEM_TYPE_FRAME, ITEM_TYPE_PERIOD
from chronoline.rendering.item_renderer import ItemRenderer
from chronoline.rendering.tick_generator import TickGenerator
from chronoline.rendering.viewport import percent_to_coordinate, project_to_percent
from chronoline.rendering.viewport_optimizer import ViewportOptimizer
from chronoline.utils.click_tracker import DOUBLE_CLICK, ClickTracker
from chronoline.utils.error_handler import ErrorHandler, RenderError

logger = logging.getLogger(__name__)


class TimelineCanvas(QWidget):
    """
    Timeline visualization canvas painting directly with QPainter.

    Every paint pass reads one viewport snapshot and uses it for the ruler
    and all item placements, so ticks and items always agree.

    Signals:
        item_selected: Emitted on a committed single click (item id)
        item_double_clicked: Emitted on a double click (item id)
        viewport_changed: Emitted after pan or zoom (start, end)
    """

    item_selected = pyqtSignal(str)
    item_double_clicked = pyqtSignal(str)
    viewport_changed = pyqtSignal(float, float)

    # Movement below this many pixels is a click, not a drag
    DRAG_THRESHOLD_PX = 4

    def __init__(self, data_manager, config=None, error_handler=None, parent=None):
        """
        Initialize the timeline canvas.

        Args:
            data_manager (TimelineDataManager): Session state to show and edit
            config (TimelineConfig): Preferences (optional)
            error_handler (ErrorHandler): Handler for paint/input errors (optional)
            parent: Parent widget
        """
        super().__init__(parent)

        self.data_manager = data_manager
        self.config = config
        self.error_handler = error_handler

        self.locale = config.locale if config else 'en'
        self.background_color = QColor(config.get('theme', 'background_color') if config else '#111827')
        self.frame_opacity = config.get('theme', 'frame_opacity') if config else 100
        self.zoom_in_factor = config.get('view', 'zoom_in_factor') if config else 0.9
        self.zoom_out_factor = config.get('view', 'zoom_out_factor') if config else 1.1

        self.renderer = ItemRenderer(config.get('theme', 'text_color') if config else '#e5e7eb')
        self.viewport_optimizer = ViewportOptimizer()
        self.tick_generator = TickGenerator(
            min_pixel_spacing=config.get('view', 'min_pixel_spacing') if config else 80,
            locale=self.locale,
        )
        self.click_tracker = ClickTracker(
            config.get('view', 'double_click_interval_ms') if config else ClickTracker.DEFAULT_INTERVAL_MS
        )

        self.selected_item_id = None

        # Hit regions of the last paint pass, in paint order
        self._hit_regions = []

        # Gesture state
        self._press_pos = None
        self._press_item_id = None
        self._last_pos = None
        self._is_panning = False
        self._is_dragging_item = False
        self._cursor_pos = None

        self._clock = QElapsedTimer()
        self._clock.start()

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumHeight(300)
        self.setCursor(Qt.OpenHandCursor)

        self.data_manager.add_listener(self.update)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_locale(self, locale):
        self.locale = locale
        self.tick_generator.locale = locale
        self.update()

    def zoom_in(self):
        """Zoom in around the centre of the visible interval."""
        self._zoom(self.zoom_in_factor, self.data_manager.viewport.snapshot())

    def zoom_out(self):
        """Zoom out around the centre of the visible interval."""
        self._zoom(self.zoom_out_factor, self.data_manager.viewport.snapshot())

    def reset_zoom(self):
        """Return to the initial interval."""
        interval = self.data_manager.viewport.reset()
        self.update()
        self.viewport_changed.emit(interval.start, interval.end)

    def _zoom(self, factor, interval, anchor=None):
        if anchor is None:
            anchor = (interval.start + interval.end) / 2
        new_interval = self.data_manager.zoom(factor, anchor)
        if new_interval != interval:
            self.viewport_changed.emit(new_interval.start, new_interval.end)

    def item_at(self, pos):
        """
        Find the top-most item under a widget position.

        Args:
            pos (QPoint): Widget position

        Returns:
            str: Item id, or None for empty space
        """
        point = QPointF(pos)
        for rect, item_id in reversed(self._hit_regions):
            if rect.contains(point):
                return item_id
        return None

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            ErrorHandler.safe_execute(
                self._paint, painter,
                error_handler=self.error_handler,
                context="painting timeline",
            )
        finally:
            painter.end()

    def _paint(self, painter):
        painter.setRenderHint(QPainter.Antialiasing, True)
        rect = QRectF(self.rect())
        painter.fillRect(rect, self.background_color)

        width = rect.width()
        height = rect.height()
        interval = self.data_manager.viewport.snapshot()

        def to_x(coordinate):
            return project_to_percent(coordinate, interval.start, interval.end) / 100 * width

        self.tick_generator.viewport_pixel_width = width
        ticks = self.tick_generator.generate(interval.start, interval.end)
        self.renderer.draw_ruler(painter, rect, ticks, to_x)

        axis_y = height - self.renderer.RULER_HEIGHT
        items = {item.id: item for item in self.data_manager.items}
        placements = self.viewport_optimizer.layout(items.values(), interval)

        regions = []
        for placement in placements:
            item = items[placement.item_id]
            bottom_px = placement.bottom_px + self._pending_drag_offset(item)
            bottom_y = height - bottom_px

            if item.item_type == ITEM_TYPE_EVENT:
                item_rect = self.renderer.event_card_rect(placement.left_percent / 100 * width, bottom_y)
            else:
                item_rect = QRectF(placement.left_percent / 100 * width, bottom_y - placement.height_px,
                                   placement.width_percent / 100 * width, placement.height_px)
            regions.append((item_rect, item, placement))

        rects_by_id = {item.id: item_rect for item_rect, item, _ in regions}
        for link in self.data_manager.links:
            if link.source_id in rects_by_id and link.target_id in rects_by_id:
                self.renderer.draw_link(painter, rects_by_id[link.source_id], rects_by_id[link.target_id], link.color)

        for item_rect, item, placement in regions:
            if item.item_type == ITEM_TYPE_FRAME:
                self.renderer.draw_frame(painter, item_rect, item, self.frame_opacity)
            elif item.item_type == ITEM_TYPE_PERIOD:
                self.renderer.draw_period(painter, item_rect, item, self.locale)
            elif item.item_type == ITEM_TYPE_EVENT:
                self.renderer.draw_event(painter, placement.left_percent / 100 * width, item_rect.bottom(),
                                         axis_y, item, self.locale, item.id == self.selected_item_id)
            else:
                raise RenderError(f"Cannot draw item {item.id!r} of type {item.item_type!r}")

        link_source = self.data_manager.link_source_id
        if link_source in rects_by_id and self._cursor_pos is not None:
            self.renderer.draw_link_preview(painter, rects_by_id[link_source], self._cursor_pos)

        self._hit_regions = [(item_rect, item.id) for item_rect, item, _ in regions]

    def _level_px(self, item):
        if item.item_type == ITEM_TYPE_EVENT:
            return self.viewport_optimizer.EVENT_LEVEL_PX
        if item.item_type == ITEM_TYPE_PERIOD:
            return self.viewport_optimizer.PERIOD_LEVEL_PX
        return self.viewport_optimizer.FRAME_LEVEL_PX

    def _pending_drag_offset(self, item):
        if item.id != self.data_manager.drag_item_id:
            return 0
        return self.data_manager.pending_drag_delta * self._level_px(item)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def wheelEvent(self, event):
        """
        Handle mouse wheel events for zooming under the cursor.

        Args:
            event: QWheelEvent
        """
        factor = self.zoom_in_factor if event.angleDelta().y() > 0 else self.zoom_out_factor
        interval = self.data_manager.viewport.snapshot()
        width = self.width()
        if width > 0:
            anchor = percent_to_coordinate(event.pos().x() / width * 100, interval.start, interval.end)
            self._zoom(factor, interval, anchor)
        event.accept()

    def mousePressEvent(self, event):
        """
        Handle mouse press events for selection, linking, dragging and panning.

        Args:
            event: QMouseEvent
        """
        item_id = self.item_at(event.pos())

        if event.button() == Qt.RightButton:
            if item_id is not None:
                self.data_manager.begin_link(item_id)
                self._cursor_pos = event.pos()
                self.update()
            event.accept()
            return

        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return

        if self.data_manager.link_source_id is not None:
            if item_id is not None:
                self.data_manager.complete_link(item_id)
            else:
                self.data_manager.cancel_link()
            self.update()
            event.accept()
            return

        self._press_pos = event.pos()
        self._last_pos = event.pos()
        self._press_item_id = item_id

        if item_id is not None:
            self.data_manager.begin_drag(item_id)
            self.setCursor(Qt.PointingHandCursor)
        else:
            self._is_panning = True
            self.setCursor(Qt.ClosedHandCursor)
        event.accept()

    def mouseDoubleClickEvent(self, event):
        # Double clicks are recognised by the click tracker from two presses
        self.mousePressEvent(event)

    def mouseMoveEvent(self, event):
        """
        Handle mouse move events for panning, vertical drag and link preview.

        Args:
            event: QMouseEvent
        """
        pos = event.pos()

        if self.data_manager.link_source_id is not None:
            self._cursor_pos = pos
            self.update()
            event.accept()
            return

        if self._last_pos is None:
            self.setCursor(Qt.PointingHandCursor if self.item_at(pos) else Qt.OpenHandCursor)
            super().mouseMoveEvent(event)
            return

        delta = pos - self._last_pos
        self._last_pos = pos

        if self._is_panning:
            interval = self.data_manager.pan(-delta.x(), self.width())
            self.viewport_changed.emit(interval.start, interval.end)
        elif self._press_item_id is not None:
            if not self.data_manager.has_item(self._press_item_id):
                # Pressed item was deleted mid-gesture
                logger.debug(f"Dropping drag of deleted item {self._press_item_id!r}")
                self.cancel_gestures()
                event.accept()
                return
            moved = (pos - self._press_pos).manhattanLength()
            if self._is_dragging_item or moved >= self.DRAG_THRESHOLD_PX:
                self._is_dragging_item = True
                item = self.data_manager.get_item(self._press_item_id)
                # Screen y grows downwards, levels grow upwards
                self.data_manager.drag_by(-delta.y() / self._level_px(item))
                self.update()
        event.accept()

    def mouseReleaseEvent(self, event):
        """
        Handle mouse release events: commit drags and register clicks.

        Args:
            event: QMouseEvent
        """
        if event.button() != Qt.LeftButton or self._press_pos is None:
            super().mouseReleaseEvent(event)
            return

        if self._is_dragging_item:
            self.data_manager.end_drag()
        elif self._press_item_id is not None:
            self.data_manager.cancel_drag()
            self._register_click(self._press_item_id)

        self._press_pos = None
        self._last_pos = None
        self._press_item_id = None
        self._is_panning = False
        self._is_dragging_item = False
        self.setCursor(Qt.PointingHandCursor if self.item_at(event.pos()) else Qt.OpenHandCursor)
        event.accept()

    def keyPressEvent(self, event):
        """
        Handle key presses; Escape cancels any gesture in progress.

        Args:
            event: QKeyEvent
        """
        if event.key() == Qt.Key_Escape:
            self.cancel_gestures()
            event.accept()
            return
        super().keyPressEvent(event)

    def cancel_gestures(self):
        """Abort link, drag, pan and pending click."""
        self.data_manager.cancel_gesture()
        self.click_tracker.reset()
        self._press_pos = None
        self._last_pos = None
        self._press_item_id = None
        self._is_panning = False
        self._is_dragging_item = False
        self._cursor_pos = None
        self.setCursor(Qt.OpenHandCursor)
        self.update()

    # ------------------------------------------------------------------
    # Clicks
    # ------------------------------------------------------------------

    def _register_click(self, item_id):
        outcome = self.click_tracker.press(item_id, self._clock.elapsed())
        if outcome is not None:
            self._emit_click(outcome)
        if self.click_tracker.pending_target is not None:
            QTimer.singleShot(self.click_tracker.interval_ms + 1, self._poll_clicks)

    def _poll_clicks(self):
        outcome = self.click_tracker.poll(self._clock.elapsed())
        if outcome is not None:
            self._emit_click(outcome)

    def _emit_click(self, outcome):
        if not self.data_manager.has_item(outcome.target_id):
            return
        if outcome.kind == DOUBLE_CLICK:
            logger.debug(f"Double click on {outcome.target_id!r}")
            self.item_double_clicked.emit(outcome.target_id)
        else:
            self.selected_item_id = outcome.target_id
            self.item_selected.emit(outcome.target_id)
            self.update()
