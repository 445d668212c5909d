"""
Timeline Configuration Manager for Chronoline
Handles loading and saving view, locale and theme preferences.
"""

import json
import logging
import math
import os

from chronoline.rendering.viewport import Viewport
from chronoline.utils.error_handler import ConfigError
from chronoline.utils.label_formatter import SUPPORTED_LOCALES

logger = logging.getLogger(__name__)


class TimelineConfig:
    """
    Manages timeline preferences grouped into sections.
    Preferences are stored under the 'timeline' key of a JSON config file,
    other keys of that file are preserved on save.
    """

    SECTION_KEY = 'timeline'

    DEFAULT_CONFIG = {
        'view': {
            'view_start': -1000,
            'view_end': 2050,
            'min_pixel_spacing': 80,
            'zoom_in_factor': 0.9,
            'zoom_out_factor': 1.1,
            'double_click_interval_ms': 250,
        },
        'language': {
            'locale': 'en',
        },
        'theme': {
            'background_color': '#111827',
            'text_color': '#e5e7eb',
            'frame_opacity': 100,
        },
    }

    def __init__(self, config_file=None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file (optional)
        """
        self.config_file = config_file
        self.config = {}
        self.reset_to_defaults(save=False)

        if config_file and os.path.exists(config_file):
            self.load()

    def load(self):
        """Load preferences from the configuration file, keeping defaults on failure."""
        if not self.config_file or not os.path.exists(self.config_file):
            return

        try:
            if os.path.getsize(self.config_file) == 0:
                return

            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Error loading configuration from {self.config_file}: {e}")
            return

        section = data.get(self.SECTION_KEY, {}) if isinstance(data, dict) else {}
        for group, values in section.items():
            if group in self.config and isinstance(values, dict):
                known = {key: value for key, value in values.items() if key in self.config[group]}
                self.config[group].update(known)

        if self.config['language']['locale'] not in SUPPORTED_LOCALES:
            logger.warning(f"Ignoring unsupported locale {self.config['language']['locale']!r} in configuration")
            self.config['language']['locale'] = self.DEFAULT_CONFIG['language']['locale']

        start, end = self.view_range
        if not is_valid_view_range(start, end):
            logger.warning(f"Ignoring invalid view range {start!r}..{end!r} in configuration")
            self.config['view']['view_start'] = self.DEFAULT_CONFIG['view']['view_start']
            self.config['view']['view_end'] = self.DEFAULT_CONFIG['view']['view_end']

    def save(self):
        """Save preferences to the configuration file."""
        if not self.config_file:
            return

        existing_data = {}
        if os.path.exists(self.config_file) and os.path.getsize(self.config_file) > 0:
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    existing_data = json.load(f)
            except json.JSONDecodeError:
                # File exists but is not valid JSON, start fresh
                existing_data = {}

        existing_data[self.SECTION_KEY] = self.config

        try:
            config_dir = os.path.dirname(self.config_file)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)

            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(existing_data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Error saving configuration to {self.config_file}: {e}")

    def get(self, group, key):
        """
        Get a single preference.

        Args:
            group: Section name ('view', 'language' or 'theme')
            key: Preference name inside the section

        Returns:
            The stored value
        """
        return self.config[group][key]

    @property
    def view_range(self):
        view = self.config['view']
        return (view['view_start'], view['view_end'])

    @property
    def locale(self):
        return self.config['language']['locale']

    def set_locale(self, locale):
        """
        Set the display locale.

        Args:
            locale: One of SUPPORTED_LOCALES

        Raises:
            ConfigError: If the locale is not supported
        """
        if locale not in SUPPORTED_LOCALES:
            raise ConfigError(f"Unsupported locale {locale!r}, expected one of {', '.join(SUPPORTED_LOCALES)}")
        self.config['language']['locale'] = locale
        self.save()

    def set_view_range(self, start, end):
        """
        Set the initial visible interval.

        Args:
            start: Start coordinate
            end: End coordinate

        Raises:
            ConfigError: If end is not after start or the span is out of zoom bounds
        """
        if not is_valid_view_range(start, end):
            raise ConfigError(
                f"View range must be numeric with a span in "
                f"[{Viewport.MIN_SPAN}, {Viewport.MAX_SPAN}], got {start}..{end}"
            )
        self.config['view']['view_start'] = start
        self.config['view']['view_end'] = end
        self.save()

    def set_theme_color(self, key, color):
        """
        Set a theme color.

        Args:
            key: 'background_color' or 'text_color'
            color: Color string such as '#111827'
        """
        if key not in ('background_color', 'text_color'):
            raise ConfigError(f"Unknown theme color {key!r}")
        self.config['theme'][key] = color
        self.save()

    def set_frame_opacity(self, opacity):
        """Set frame opacity in percent, clamped to 0-100."""
        self.config['theme']['frame_opacity'] = max(0, min(100, opacity))
        self.save()

    def reset_to_defaults(self, save=True):
        """
        Reset all preferences to defaults.

        Args:
            save: Write the defaults to the configuration file
        """
        self.config = {group: values.copy() for group, values in self.DEFAULT_CONFIG.items()}
        if save:
            self.save()


def is_valid_view_range(start, end):
    """
    Check a stored view range before it reaches the viewport.

    Args:
        start: Start coordinate
        end: End coordinate

    Returns:
        bool: True for finite numbers with a span inside the zoom bounds
    """
    for value in (start, end):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            return False
    return Viewport.MIN_SPAN <= end - start <= Viewport.MAX_SPAN
