"""
Label Formatter - Locale-aware display strings for timeline dates.

This module renders dates and coordinates as human-readable text with era
suffixes and month names. Labels are display-only and are never used for
comparing or ordering dates.

Supported locales form a closed set: English, Russian and Belarusian.
"""

import logging

from chronoline.utils.calendar_math import from_coordinate, is_valid_date

logger = logging.getLogger(__name__)


DEFAULT_LOCALE = 'en'
SUPPORTED_LOCALES = ('en', 'ru', 'be')

LOCALE_NAMES = {
    'en': 'English',
    'ru': 'Русский',
    'be': 'Беларуская',
}

MONTH_NAMES = {
    'en': ("January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"),
    'ru': ("Январь", "Февраль", "Март", "Апрель", "Май", "Июнь", "Июль",
           "Август", "Сентябрь", "Октябрь", "Ноябрь", "Декабрь"),
    'be': ("Студзень", "Люты", "Сакавік", "Красавік", "Травень", "Чэрвень",
           "Ліпень", "Жнівень", "Верасень", "Кастрычнік", "Лістапад", "Снежань"),
}

MONTH_ABBREVIATIONS = {
    'en': ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep",
           "Oct", "Nov", "Dec"),
    'ru': ("Янв", "Фев", "Мар", "Апр", "Май", "Июн", "Июл", "Авг", "Сен",
           "Окт", "Ноя", "Дек"),
    'be': ("Сту", "Лют", "Сак", "Кра", "Тра", "Чэр", "Ліп", "Жні", "Вер",
           "Кас", "Ліс", "Сне"),
}

BCE_LABELS = {
    'en': 'BCE',
    'ru': 'до н.э.',
    'be': 'да н.э.',
}

RANGE_SEPARATOR = ' – '


def resolve_locale(locale):
    """
    Map a requested locale onto the supported set.

    Args:
        locale (str): Locale code such as 'en'

    Returns:
        str: The locale itself if supported, DEFAULT_LOCALE otherwise
    """
    if locale in SUPPORTED_LOCALES:
        return locale
    logger.debug(f"Unsupported locale {locale!r}, using {DEFAULT_LOCALE!r}")
    return DEFAULT_LOCALE


def month_name(month, locale=DEFAULT_LOCALE):
    return MONTH_NAMES[resolve_locale(locale)][month - 1]


def month_abbreviation(month, locale=DEFAULT_LOCALE):
    return MONTH_ABBREVIATIONS[resolve_locale(locale)][month - 1]


def format_era(year, locale=DEFAULT_LOCALE):
    """
    Format a year with its era.

    Negative years get the BCE label. Year 0 is conventionally 1 BCE, since
    there is no year zero. Positive years are shown as a plain number.

    Args:
        year (int): Astronomical year
        locale (str): Locale code

    Returns:
        str: e.g. "44 BCE", "1 BCE" or "1969"
    """
    bce = BCE_LABELS[resolve_locale(locale)]
    if year < 0:
        return f"{abs(year)} {bce}"
    if year == 0:
        return f"1 {bce}"
    return f"{year}"


def _format_date(date, months, locale):
    year_string = format_era(date.year, locale)
    month = date.month

    if month and 1 <= month <= 12:
        if is_valid_date(date.year, month, date.day):
            return f"{months[month - 1]} {date.day}, {year_string}"
        return f"{months[month - 1]}, {year_string}"

    return year_string


def format_event_date(date, locale=DEFAULT_LOCALE):
    """
    Format an event date for its card, using full month names.

    Precision degrades from full date to month and year to year only.

    Args:
        date (DateValue): Date to format
        locale (str): Locale code

    Returns:
        str: e.g. "July 20, 1969", "July, 1969" or "1969"
    """
    locale = resolve_locale(locale)
    return _format_date(date, MONTH_NAMES[locale], locale)


def format_period_date(date, locale=DEFAULT_LOCALE):
    """
    Format a period boundary with abbreviated month names.

    Args:
        date (DateValue): Date to format
        locale (str): Locale code

    Returns:
        str: e.g. "Jul 20, 1969", "Jul, 1969" or "1969"
    """
    locale = resolve_locale(locale)
    return _format_date(date, MONTH_ABBREVIATIONS[locale], locale)


def format_period_range(start, end, locale=DEFAULT_LOCALE):
    return f"{format_period_date(start, locale)}{RANGE_SEPARATOR}{format_period_date(end, locale)}"


def format_coordinate(coordinate, locale=DEFAULT_LOCALE):
    """
    Format a raw axis coordinate as a full date string.

    Args:
        coordinate (float): Continuous coordinate
        locale (str): Locale code

    Returns:
        str: Date text for the day containing the coordinate
    """
    return format_event_date(from_coordinate(coordinate), locale)
