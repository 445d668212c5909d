"""
Item Renderer - Handles visual representation of timeline items.

This module provides the ItemRenderer class which paints frames, periods,
event cards, links and the ruler onto a QPainter. The renderer is stateless
apart from its fonts; geometry is computed by the canvas from one viewport
snapshot and passed in.
"""

import logging

from PyQt5.QtCore import Qt, QPointF, QRectF
from PyQt5.QtGui import QBrush, QColor, QFont, QFontMetrics, QPainterPath, QPen

from chronoline.utils.label_formatter import format_event_date, format_period_range

logger = logging.getLogger(__name__)


class ItemRenderer:
    """
    Paints timeline items with QPainter.

    Colors on items are either named palette entries ('blue', 'sky', ...) or
    any string QColor understands ('#60a5fa'). Unknown names fall back to
    gray.
    """

    # Named item colors
    COLORS = {
        'red': '#f87171',
        'orange': '#fb923c',
        'amber': '#fbbf24',
        'yellow': '#facc15',
        'lime': '#a3e635',
        'green': '#4ade80',
        'emerald': '#34d399',
        'teal': '#2dd4bf',
        'cyan': '#22d3ee',
        'sky': '#38bdf8',
        'blue': '#60a5fa',
        'indigo': '#818cf8',
        'violet': '#a78bfa',
        'purple': '#c084fc',
        'pink': '#f472b6',
        'rose': '#fb7185',
        'gray': '#9ca3af',
    }
    FALLBACK_COLOR = 'gray'

    # Ruler
    RULER_HEIGHT = 40
    MAJOR_TICK_LENGTH = 12
    MINOR_TICK_LENGTH = 6
    RULER_COLOR = '#4b5563'

    # Event cards
    CARD_WIDTH = 170
    CARD_HEIGHT = 46
    CARD_RADIUS = 6
    CARD_PADDING = 6
    ANCHOR_RADIUS = 4

    SELECTION_COLOR = '#ffffff'

    def __init__(self, text_color='#e5e7eb'):
        """
        Initialize the item renderer.

        Args:
            text_color (str): Color of labels and card text
        """
        self.text_color = QColor(text_color)
        self.label_font = QFont()
        self.label_font.setPointSize(8)
        self.title_font = QFont()
        self.title_font.setPointSize(9)
        self.title_font.setBold(True)

    def resolve_color(self, color):
        """
        Turn an item color into a QColor.

        Args:
            color (str): Palette name or color string

        Returns:
            QColor: Valid color
        """
        value = self.COLORS.get(color, color)
        qcolor = QColor(value)
        if not qcolor.isValid():
            logger.debug(f"Unknown color {color!r}, using fallback")
            qcolor = QColor(self.COLORS[self.FALLBACK_COLOR])
        return qcolor

    # ------------------------------------------------------------------
    # Ruler
    # ------------------------------------------------------------------

    def draw_ruler(self, painter, rect, ticks, to_x):
        """
        Draw the ruler along the bottom edge of a rectangle.

        Args:
            painter (QPainter): Active painter
            rect (QRectF): Widget rectangle
            ticks (TickSet): Ticks for the current interval
            to_x (callable): Maps a coordinate to a pixel x position
        """
        axis_y = rect.bottom() - self.RULER_HEIGHT

        painter.setPen(QPen(QColor(self.RULER_COLOR), 1))
        painter.drawLine(QPointF(rect.left(), axis_y), QPointF(rect.right(), axis_y))

        for tick in ticks.minor:
            x = to_x(tick.position)
            painter.drawLine(QPointF(x, axis_y), QPointF(x, axis_y + self.MINOR_TICK_LENGTH))

        painter.setFont(self.label_font)
        metrics = QFontMetrics(self.label_font)
        for tick in ticks.major:
            x = to_x(tick.position)
            painter.setPen(QPen(QColor(self.RULER_COLOR), 2))
            painter.drawLine(QPointF(x, axis_y), QPointF(x, axis_y + self.MAJOR_TICK_LENGTH))
            if tick.label:
                text_width = metrics.horizontalAdvance(tick.label)
                painter.setPen(self.text_color)
                painter.drawText(
                    QPointF(x - text_width / 2, axis_y + self.MAJOR_TICK_LENGTH + metrics.ascent() + 2),
                    tick.label,
                )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def draw_frame(self, painter, rect, frame, opacity=100):
        """
        Draw a frame as a dashed, lightly filled box with its title.

        Args:
            painter (QPainter): Active painter
            rect (QRectF): Frame rectangle in widget pixels
            frame (TimelineFrame): Frame to draw
            opacity (int): Frame opacity in percent
        """
        color = self.resolve_color(frame.color)
        fill = QColor(color)
        fill.setAlpha(int(40 * opacity / 100))
        border = QColor(color)
        border.setAlpha(int(255 * opacity / 100))

        painter.setBrush(QBrush(fill))
        painter.setPen(QPen(border, 1, Qt.DashLine))
        painter.drawRect(rect)

        painter.setFont(self.title_font)
        painter.setPen(border)
        painter.drawText(rect.adjusted(self.CARD_PADDING, 2, -self.CARD_PADDING, 0),
                         Qt.AlignLeft | Qt.AlignTop, frame.title)

    def draw_period(self, painter, rect, period, locale='en'):
        """
        Draw a period as a rounded bar with title and date range.

        Args:
            painter (QPainter): Active painter
            rect (QRectF): Bar rectangle in widget pixels
            period (TimelinePeriod): Period to draw
            locale (str): Locale for the date range
        """
        color = self.resolve_color(period.color)
        color.setAlpha(int(255 * period.opacity / 100))

        painter.setBrush(QBrush(color))
        painter.setPen(Qt.NoPen)
        painter.drawRoundedRect(rect, 4, 4)

        text = f"{period.title} ({format_period_range(period.start, period.end, locale)})"
        painter.setFont(self.label_font)
        painter.setPen(self.text_color)
        metrics = QFontMetrics(self.label_font)
        elided = metrics.elidedText(text, Qt.ElideRight, int(max(0, rect.width() - 2 * self.CARD_PADDING)))
        painter.drawText(rect.adjusted(self.CARD_PADDING, 0, -self.CARD_PADDING, 0),
                         Qt.AlignLeft | Qt.AlignVCenter, elided)

    def event_card_rect(self, anchor_x, bottom_y):
        """
        Get the card rectangle of an event anchored at a point.

        Args:
            anchor_x (float): Pixel x of the event date
            bottom_y (float): Pixel y of the card's bottom edge

        Returns:
            QRectF: Card rectangle, centred on the anchor
        """
        return QRectF(anchor_x - self.CARD_WIDTH / 2, bottom_y - self.CARD_HEIGHT,
                      self.CARD_WIDTH, self.CARD_HEIGHT)

    def draw_event(self, painter, anchor_x, bottom_y, axis_y, event, locale='en', selected=False):
        """
        Draw an event card with a stem down to the ruler.

        Args:
            painter (QPainter): Active painter
            anchor_x (float): Pixel x of the event date
            bottom_y (float): Pixel y of the card's bottom edge
            axis_y (float): Pixel y of the ruler line
            event (TimelineEvent): Event to draw
            locale (str): Locale for the date line
            selected (bool): Draw the selection outline

        Returns:
            QRectF: The card rectangle, used as the hit region
        """
        color = self.resolve_color(event.color)
        card = self.event_card_rect(anchor_x, bottom_y)

        painter.setPen(QPen(color, 1))
        painter.drawLine(QPointF(anchor_x, card.bottom()), QPointF(anchor_x, axis_y))
        painter.setBrush(QBrush(color))
        painter.drawEllipse(QPointF(anchor_x, axis_y), self.ANCHOR_RADIUS, self.ANCHOR_RADIUS)

        fill = QColor(color)
        fill.setAlpha(60)
        painter.setBrush(QBrush(fill))
        painter.setPen(QPen(QColor(self.SELECTION_COLOR), 2) if selected else QPen(color, 1))
        painter.drawRoundedRect(card, self.CARD_RADIUS, self.CARD_RADIUS)

        inner = card.adjusted(self.CARD_PADDING, self.CARD_PADDING / 2, -self.CARD_PADDING, -self.CARD_PADDING / 2)
        painter.setPen(self.text_color)

        painter.setFont(self.title_font)
        title_metrics = QFontMetrics(self.title_font)
        painter.drawText(inner, Qt.AlignLeft | Qt.AlignTop,
                         title_metrics.elidedText(event.title, Qt.ElideRight, int(inner.width())))

        painter.setFont(self.label_font)
        painter.drawText(inner, Qt.AlignLeft | Qt.AlignBottom, format_event_date(event.date, locale))

        return card

    def draw_link(self, painter, source_rect, target_rect, color):
        """
        Draw a curved link between the centres of two item rectangles.

        Args:
            painter (QPainter): Active painter
            source_rect (QRectF): Rectangle of the source item
            target_rect (QRectF): Rectangle of the target item
            color (str): Link color
        """
        start = source_rect.center()
        end = target_rect.center()
        control_offset = (end.x() - start.x()) / 2

        path = QPainterPath(start)
        path.cubicTo(QPointF(start.x() + control_offset, start.y()),
                     QPointF(end.x() - control_offset, end.y()),
                     end)

        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(self.resolve_color(color), 2))
        painter.drawPath(path)

    def draw_link_preview(self, painter, source_rect, cursor_pos):
        """Draw the rubber-band line of a link gesture in progress."""
        painter.setPen(QPen(QColor(self.COLORS['cyan']), 1, Qt.DashLine))
        painter.drawLine(source_rect.center(), QPointF(cursor_pos))
