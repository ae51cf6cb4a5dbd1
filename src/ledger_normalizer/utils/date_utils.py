"""Date and time parsing helpers for ledger timestamps.

Timestamps are read as wall-clock values: a trailing offset or "Z" is accepted
but never used to shift the calendar date or time-of-day.
"""

import re
from collections.abc import Iterable
from datetime import date, datetime, time

# Calendar date prefix of an ISO-like string ("2024-01-15", "2024-01-15T10:00:00Z")
ISO_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")

# Fallback formats seen on manually entered and exported entries
TIMESTAMP_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
]

DEFAULT_SENTINEL_TIMES = ("00:00:00", "01:00:00")

TIME_COMPONENT = re.compile(r"\d{1,2}:\d{2}")


def parse_timestamp(raw: object | None) -> datetime | None:
    """Parse a date or date-time value into a naive datetime.

    Date-only values parse to midnight.

    Args:
        raw: String, date or datetime value.

    Returns:
        Naive datetime (wall-clock), or None if the value cannot be parsed.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.replace(tzinfo=None)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if not isinstance(raw, str):
        return None

    value = raw.strip()
    if not value:
        return None

    iso_value = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return datetime.fromisoformat(iso_value).replace(tzinfo=None)
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    return None


def calendar_date(raw: object | None) -> str | None:
    """Return the calendar-date component of a timestamp as YYYY-MM-DD.

    Args:
        raw: Date or date-time value.

    Returns:
        ISO calendar date, or None if no valid date can be read.
    """
    if isinstance(raw, str):
        match = ISO_DATE_PREFIX.match(raw.strip())
        if match:
            try:
                return date(int(match.group(1)), int(match.group(2)), int(match.group(3))).isoformat()
            except ValueError:
                return None

    parsed = parse_timestamp(raw)
    return parsed.date().isoformat() if parsed else None


def format_date(value: str, fmt: str) -> str:
    """Render an ISO calendar date with a strftime format.

    Values that are not ISO dates are returned unchanged.
    """
    try:
        return date.fromisoformat(value).strftime(fmt)
    except (TypeError, ValueError):
        return value


def time_of_day(raw: object | None) -> time | None:
    """Return the time-of-day of a timestamp, or None for date-only values."""
    if isinstance(raw, str) and not TIME_COMPONENT.search(raw):
        return None
    if isinstance(raw, date) and not isinstance(raw, datetime):
        return None
    parsed = parse_timestamp(raw)
    return parsed.time().replace(microsecond=0) if parsed else None


def parse_sentinel_times(values: Iterable[str]) -> frozenset[time]:
    """Parse HH:MM[:SS] sentinel strings into a set of times.

    Raises:
        ValueError: If a value is not a valid time.
    """
    return frozenset(time.fromisoformat(str(v).strip()) for v in values)


def is_meaningful_time(value: time | None, sentinels: frozenset[time]) -> bool:
    """Check whether a time-of-day is a real recorded time.

    Args:
        value: Time to check.
        sentinels: Placeholder times that mean "no time recorded".

    Returns:
        True if value is present and not a sentinel.
    """
    return value is not None and value.replace(microsecond=0) not in sentinels
