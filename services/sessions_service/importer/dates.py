"""
Spreadsheet date normalisation.

Cells arrive as real dates (xlsx), serial numbers (xlsx cells formatted as
numbers, or copied into CSV) or free text in whatever order the coach's
locale writes dates. Everything is reduced to ``YYYY-MM-DD``; a value that
cannot be read falls back to today so the row is still imported.
"""

import datetime as dt
import re
from typing import Any, Optional

from dateutil import parser as date_parser

MIN_YEAR = 1900
MAX_YEAR = 2100
MAX_SERIAL = 100_000

# Serial 1 is 1900-01-01. Spreadsheets also count a fictitious 1900-02-29
# (serial 60), so serials from 60 onwards are anchored one day earlier.
SERIAL_EPOCH = dt.date(1899, 12, 31)
SERIAL_EPOCH_AFTER_LEAP_BUG = dt.date(1899, 12, 30)
LEAP_BUG_SERIAL = 60

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SLASHED = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")


def _in_range(year: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR


def _fmt(value: dt.date) -> str:
    return value.strftime("%Y-%m-%d")


def serial_to_date(serial: float) -> Optional[dt.date]:
    """Convert a 1900-system spreadsheet serial to a date, ignoring the time part."""
    days = int(serial)
    if days <= 0 or days >= MAX_SERIAL:
        return None
    epoch = SERIAL_EPOCH if days < LEAP_BUG_SERIAL else SERIAL_EPOCH_AFTER_LEAP_BUG
    result = epoch + dt.timedelta(days=days)
    return result if _in_range(result.year) else None


def _build(year: int, month: int, day: int) -> Optional[dt.date]:
    if not (1 <= day <= 31 and 1 <= month <= 12 and _in_range(year)):
        return None
    try:
        return dt.date(year, month, day)
    except ValueError:
        # e.g. 31/04
        return None


def _parse_slashed(text: str) -> Optional[dt.date]:
    match = _SLASHED.match(text)
    if not match:
        return None
    first, second, year_text = match.groups()
    first, second, year = int(first), int(second), int(year_text)
    if len(year_text) == 2:
        year += 2000

    # Day-first wins whenever both readings are possible
    day_first = _build(year, second, first)
    if day_first:
        return day_first
    # Only reached when the second part cannot be a month, e.g. 03/15/2024
    return _build(year, first, second)


def _parse_iso(text: str) -> Optional[dt.date]:
    if not _ISO_DATE.match(text):
        return None
    try:
        value = dt.date.fromisoformat(text)
    except ValueError:
        return None
    return value if _in_range(value.year) else None


def _parse_generic(text: str) -> Optional[dt.date]:
    try:
        value = date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError):
        return None
    return value if _in_range(value.year) else None


def normalize_date(value: Any, today: Optional[dt.date] = None) -> str:
    """Return ``value`` as ``YYYY-MM-DD``; unreadable input becomes ``today``.

    Order of attempts: native date objects, spreadsheet serials,
    ``DD/MM/YY[YY]``, ``MM/DD/YYYY`` when the day-first reading is
    impossible, ISO ``YYYY-MM-DD``, then a lenient day-first parse.
    """
    fallback = _fmt(today or dt.date.today())

    if value is None:
        return fallback
    if isinstance(value, dt.datetime):
        return _fmt(value.date()) if _in_range(value.year) else fallback
    if isinstance(value, dt.date):
        return _fmt(value) if _in_range(value.year) else fallback

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        converted = serial_to_date(value)
        return _fmt(converted) if converted else fallback

    text = str(value).strip()
    if not text:
        return fallback

    # Serials pasted as text into CSV exports
    try:
        number = float(text)
    except ValueError:
        number = None
    if number is not None:
        converted = serial_to_date(number)
        if converted:
            return _fmt(converted)

    for parse in (_parse_slashed, _parse_iso, _parse_generic):
        parsed = parse(text)
        if parsed:
            return _fmt(parsed)
    return fallback


def to_date(value: Any, today: Optional[dt.date] = None) -> dt.date:
    return dt.date.fromisoformat(normalize_date(value, today=today))
