"""
Day bucketing for reading activity.

Every instant is mapped to a canonical calendar day in one fixed reference
timezone, so two devices observing the same event agree on its day. The
reference is a fixed UTC offset in minutes rather than the viewer's clock.

Accepted inputs:
- aware datetimes
- naive datetimes (interpreted as UTC)
- dates and date-only ISO strings (already canonical days)
- ISO-8601 timestamps, with or without a trailing 'Z'
"""

from datetime import datetime, date, timedelta, tzinfo
from functools import lru_cache
from typing import Iterable, Set, Union

import pytz


DEFAULT_REFERENCE_OFFSET_MINUTES = 330  # IST, UTC+5:30

Temporal = Union[datetime, date, str]


class InvalidTimestamp(ValueError):
    """Raised when a timestamp cannot be parsed into an instant."""

    def __init__(self, value, reason: str = ''):
        self.value = value
        message = f"Invalid timestamp: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


@lru_cache(maxsize=64)
def reference_zone(offset_minutes: int) -> tzinfo:
    """Fixed-offset tzinfo for the reference timezone."""
    if isinstance(offset_minutes, bool) or not isinstance(offset_minutes, int):
        raise ValueError(f"Reference offset must be an integer number of minutes, got {offset_minutes!r}")
    if abs(offset_minutes) >= 24 * 60:
        raise ValueError(f"Reference offset out of range: {offset_minutes}")
    if offset_minutes == 0:
        return pytz.utc
    return pytz.FixedOffset(offset_minutes)


def parse_temporal(value: Temporal) -> Union[datetime, date]:
    """Parse a raw value into either an aware datetime or a plain date.

    Date-only values stay dates: they already name a calendar day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return pytz.utc.localize(value)
        return value
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidTimestamp(value, f"unsupported type {type(value).__name__}")

    cleaned = value.strip()
    if not cleaned:
        raise InvalidTimestamp(value, "empty string")

    if 'T' not in cleaned and ' ' not in cleaned and len(cleaned) <= 10:
        try:
            return date.fromisoformat(cleaned)
        except ValueError as e:
            raise InvalidTimestamp(value, str(e)) from e

    if cleaned.endswith('Z') or cleaned.endswith('z'):
        cleaned = cleaned[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError as e:
        raise InvalidTimestamp(value, str(e)) from e
    if parsed.tzinfo is None:
        parsed = pytz.utc.localize(parsed)
    return parsed


def parse_instant(value: Temporal) -> datetime:
    """Parse a raw value into an aware datetime.

    Plain dates become UTC midnight of that day, matching how the backend's
    date-only fields are read everywhere else.
    """
    parsed = parse_temporal(value)
    if isinstance(parsed, datetime):
        return parsed
    return pytz.utc.localize(datetime(parsed.year, parsed.month, parsed.day))


def to_canonical_day(instant: Temporal,
                     reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> date:
    """Map an instant to its calendar day in the reference timezone."""
    parsed = parse_temporal(instant)
    if not isinstance(parsed, datetime):
        return parsed
    zone = reference_zone(reference_offset_minutes)
    return parsed.astimezone(zone).date()


def start_of_day(instant: Temporal,
                 reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> datetime:
    """Canonical day of an instant, expressed as UTC midnight of the shifted value.

    Used identically for "now" and for historical timestamps so the two can be
    compared without mixing offsets.
    """
    day = to_canonical_day(instant, reference_offset_minutes)
    return pytz.utc.localize(datetime(day.year, day.month, day.day))


def canonical_days(values: Iterable[Temporal],
                   reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> Set[date]:
    """Bucket many instants at once; duplicates collapse to one day."""
    return {to_canonical_day(v, reference_offset_minutes) for v in values}


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def previous_day(day: date) -> date:
    return day - timedelta(days=1)
