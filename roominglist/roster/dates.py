"""
Date parsing for email timestamps and flight dates.

Both parsers fall back to ``datetime.min`` instead of raising, so a record
with an unreadable date is ordered first (and loses timestamp ties) rather
than aborting a batch.
"""
import re
from datetime import date, datetime, timezone
from typing import Any

FALLBACK_INSTANT = datetime.min

_DAY_MONTH_YEAR = re.compile(r'^\s*(\d{1,2})[./\-](\d{1,2})[./\-](\d{2,4})\s*$')
_ISO_DATE = re.compile(r'^\s*(\d{4})-(\d{1,2})-(\d{1,2})\s*$')


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an email timestamp into a comparable instant.

    Accepts datetime/date objects and ISO 8601 text ("2025-01-02",
    "2025-01-02 10:00:00", "2025-01-02T10:00", offsets, trailing "Z").
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not value:
        return FALLBACK_INSTANT

    text = str(value).strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        return _naive_utc(datetime.fromisoformat(text))
    except ValueError:
        return FALLBACK_INSTANT


def is_parsable_timestamp(value: Any) -> bool:
    return parse_timestamp(value) != FALLBACK_INSTANT


def parse_flight_date(value: Any) -> datetime:
    """
    Parse a flight date written day-month-year ("05.03.25", "05.03.2025").

    Two-digit years are 20xx. ISO "YYYY-MM-DD" is also accepted since the
    extraction service normalises dates.
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not value:
        return FALLBACK_INSTANT

    text = str(value)
    try:
        match = _DAY_MONTH_YEAR.match(text)
        if match:
            day, month, year = (int(part) for part in match.groups())
            if year < 100:
                year += 2000
            return datetime(year, month, day)

        match = _ISO_DATE.match(text)
        if match:
            year, month, day = (int(part) for part in match.groups())
            return datetime(year, month, day)
    except ValueError:
        # Out of range day or month
        return FALLBACK_INSTANT

    return parse_timestamp(text)
