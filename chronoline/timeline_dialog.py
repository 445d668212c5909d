"""
Timeline Dialog - Main window for the timeline.

This module provides the main dialog window, the composition root of the
application: it creates the configuration, the data manager and the canvas
and wires them together.
"""

import logging
import os
import sys

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QApplication, QComboBox, QDialog, QHBoxLayout, QInputDialog, QLabel,
    QMessageBox, QPushButton, QShortcut, QVBoxLayout,
)

from chronoline.data.models import ITEM_TYPE_EVENT
from chronoline.data.timeline_data_manager import TimelineDataManager, sample_items
from chronoline.timeline_canvas import TimelineCanvas
from chronoline.timeline_config import TimelineConfig
from chronoline.utils.date_text_parser import parse_import_text
from chronoline.utils.error_handler import ConfigError, ErrorHandler, ItemNotFoundError
from chronoline.utils.label_formatter import (
    LOCALE_NAMES,
    RANGE_SEPARATOR,
    SUPPORTED_LOCALES,
    format_coordinate,
    format_event_date,
)

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_FILE = os.path.join(os.path.expanduser('~'), '.chronoline', 'config.json')


class TimelineDialog(QDialog):
    """
    Main timeline dialog window.

    Holds the only TimelineDataManager of the session and passes it to the
    canvas explicitly.
    """

    def __init__(self, config=None, data_manager=None, parent=None, load_samples=True):
        """
        Initialize the timeline dialog.

        Args:
            config (TimelineConfig): Preferences (defaults to an unsaved config)
            data_manager (TimelineDataManager): Session state (created if omitted)
            parent: Parent widget
            load_samples (bool): Fill a new data manager with the demo items
        """
        super().__init__(parent)

        self.config = config or TimelineConfig()
        self.error_handler = ErrorHandler(self)

        if data_manager is None:
            data_manager = TimelineDataManager(self.config)
            if load_samples:
                data_manager.add_items(sample_items())
        self.data_manager = data_manager

        self._init_ui()
        self._setup_shortcuts()
        self._update_range_label(self.data_manager.viewport.start, self.data_manager.viewport.end)

    def _init_ui(self):
        """Initialize the user interface components."""
        self.setWindowTitle("Chronoline")
        self.setMinimumSize(1024, 600)

        background = self.config.get('theme', 'background_color')
        text = self.config.get('theme', 'text_color')
        self.setStyleSheet(f"""
            QDialog {{
                background-color: {background};
                color: {text};
            }}
            QLabel {{
                color: {text};
            }}
        """)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(10, 10, 10, 10)
        main_layout.setSpacing(10)

        # Toolbar
        toolbar = QHBoxLayout()

        self.locale_combo = QComboBox()
        for locale in SUPPORTED_LOCALES:
            self.locale_combo.addItem(LOCALE_NAMES[locale], locale)
        self.locale_combo.setCurrentIndex(SUPPORTED_LOCALES.index(self.config.locale))
        self.locale_combo.currentIndexChanged.connect(self._on_locale_changed)
        toolbar.addWidget(self.locale_combo)

        self.import_button = QPushButton("Import...")
        self.import_button.clicked.connect(self._import_text)
        toolbar.addWidget(self.import_button)

        toolbar.addStretch()

        self.range_label = QLabel()
        toolbar.addWidget(self.range_label)
        main_layout.addLayout(toolbar)

        # Canvas
        self.timeline_canvas = TimelineCanvas(self.data_manager, self.config, self.error_handler, self)
        self.timeline_canvas.viewport_changed.connect(self._update_range_label)
        self.timeline_canvas.item_double_clicked.connect(self._show_item_details)
        main_layout.addWidget(self.timeline_canvas, 1)

    def _setup_shortcuts(self):
        """Register keyboard shortcuts for zooming."""
        zoom_in_shortcut = QShortcut(QKeySequence(Qt.Key_Plus), self)
        zoom_in_shortcut.activated.connect(self.timeline_canvas.zoom_in)

        zoom_out_shortcut = QShortcut(QKeySequence(Qt.Key_Minus), self)
        zoom_out_shortcut.activated.connect(self.timeline_canvas.zoom_out)

        reset_zoom_shortcut = QShortcut(QKeySequence(Qt.Key_0), self)
        reset_zoom_shortcut.activated.connect(self.timeline_canvas.reset_zoom)

    def keyPressEvent(self, event):
        # Escape cancels gestures on the canvas instead of closing the dialog
        if event.key() == Qt.Key_Escape:
            self.timeline_canvas.cancel_gestures()
            event.accept()
            return
        super().keyPressEvent(event)

    def _on_locale_changed(self, index):
        locale = self.locale_combo.itemData(index)
        try:
            self.config.set_locale(locale)
        except ConfigError as e:
            self.error_handler.handle_error(e, "changing language")
            return
        self.timeline_canvas.set_locale(locale)
        self._update_range_label(self.data_manager.viewport.start, self.data_manager.viewport.end)

    def _update_range_label(self, start, end):
        locale = self.config.locale
        self.range_label.setText(f"{format_coordinate(start, locale)}{RANGE_SEPARATOR}{format_coordinate(end, locale)}")

    def _import_text(self):
        """Ask for import text and add one event per valid line."""
        text, accepted = QInputDialog.getMultiLineText(
            self, "Import events", "One event per line: DD.MM.YYYY - Title * Description"
        )
        if not accepted or not text.strip():
            return

        events = parse_import_text(text)
        if not events:
            QMessageBox.information(self, "Import events", "No valid lines found.")
            return
        self.data_manager.add_items(events)
        logger.info(f"Imported {len(events)} events")

    def _show_item_details(self, item_id):
        try:
            item = self.data_manager.get_item(item_id)
        except ItemNotFoundError as e:
            self.error_handler.handle_error(e, "opening item details", show_dialog=False)
            return

        if item.item_type == ITEM_TYPE_EVENT:
            subtitle = format_event_date(item.date, self.config.locale)
            body = item.main_text or item.description
        else:
            subtitle = item.item_type.capitalize()
            body = ''
        QMessageBox.information(self, item.title, f"{subtitle}\n\n{body}".strip())


def main():
    """Run the timeline as a standalone application."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = QApplication(sys.argv)
    config = TimelineConfig(DEFAULT_CONFIG_FILE)
    dialog = TimelineDialog(config)
    dialog.show()
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
