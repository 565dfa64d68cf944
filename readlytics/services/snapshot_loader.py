"""
Snapshot loading.

Turns raw JSON payloads (from the reading tracker backend or from API request
bodies) into domain objects for the analytics engine. Keys are accepted in
camelCase, as the backend sends them, or snake_case.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from readlytics.domain.models import BookRecord, InvalidActivityDay, InvalidBookRecord, ReadingGoal
from readlytics.analytics.day_bucketing import (
    DEFAULT_REFERENCE_OFFSET_MINUTES, Temporal, parse_temporal, to_canonical_day,
)

logger = logging.getLogger(__name__)


def _get(data: Dict[str, Any], *keys: str, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _optional_temporal(value: Any) -> Optional[Temporal]:
    if value in (None, ''):
        return None
    return parse_temporal(value)


def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise InvalidBookRecord(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value.strip())
    if isinstance(value, int):
        return value
    raise InvalidBookRecord(f"{field_name} must be an integer, got {value!r}")


def book_from_dict(data: Dict[str, Any]) -> BookRecord:
    """Build a BookRecord from a backend book object."""
    if not isinstance(data, dict):
        raise InvalidBookRecord(f"Book entry must be an object, got {type(data).__name__}")
    book_id = _get(data, 'id', 'uid')
    return BookRecord(
        status=_get(data, 'status', 'readingStatus', 'reading_status'),
        total_pages=_as_int(_get(data, 'totalPages', 'total_pages', 'pageCount', 'page_count'), 'totalPages'),
        pages_read=_as_int(_get(data, 'pagesRead', 'pages_read', default=0), 'pagesRead'),
        start_date=_optional_temporal(_get(data, 'startDate', 'start_date')),
        complete_date=_optional_temporal(_get(data, 'completeDate', 'complete_date', 'finishDate', 'finish_date')),
        id=str(book_id) if book_id is not None else None,
        title=_get(data, 'title'),
    )


def books_from_payload(payload: Any) -> List[BookRecord]:
    """Parse a list of book objects; a wrapped {'books': [...]} shape is accepted too."""
    if isinstance(payload, dict):
        payload = _get(payload, 'books', 'data', default=[])
    if not isinstance(payload, list):
        raise InvalidBookRecord(f"Books payload must be a list, got {type(payload).__name__}")
    return [book_from_dict(item) for item in payload]


def activity_from_payload(payload: Any,
                          reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> Dict[date, int]:
    """
    Parse activity into canonical day -> pages.

    Accepts the activities/dates shape ({'activityDates': [...]}), a bare list of
    date strings, a list of {'date', 'pages'} objects, or a {date: pages} mapping.
    Unparseable dates raise InvalidTimestamp.

    A date without a page count is an activity day with unknown pages (0). An
    entry reporting exactly 0 pages records no reading and is left out, so the
    zero-filled days of a dailyStats week never count toward a streak.
    """
    if isinstance(payload, dict) and 'activityDates' in payload:
        payload = payload.get('activityDates') or []
    elif isinstance(payload, dict) and 'dailyStats' in payload:
        payload = payload.get('dailyStats') or []

    days: Dict[date, int] = {}
    if payload is None:
        return days
    if isinstance(payload, dict):
        items = [{'date': key, 'pages': value} for key, value in payload.items()]
    elif isinstance(payload, list):
        items = payload
    else:
        raise ValueError(f"Activity payload must be a list or object, got {type(payload).__name__}")

    for item in items:
        if isinstance(item, dict):
            day = to_canonical_day(_get(item, 'date', 'day'), reference_offset_minutes)
            pages = _get(item, 'pages', 'pagesRead', 'pages_read')
            if pages is None:
                days.setdefault(day, 0)
                continue
            if isinstance(pages, bool) or not isinstance(pages, (int, float)) or pages < 0:
                raise InvalidActivityDay(f"Invalid pages value for {day.isoformat()}: {pages!r}")
            if pages == 0:
                continue
            days[day] = days.get(day, 0) + int(pages)
        else:
            day = to_canonical_day(item, reference_offset_minutes)
            days.setdefault(day, 0)
    return days


def goal_from_payload(payload: Any) -> Optional[ReadingGoal]:
    """Parse {'year', 'targetBooks'}; anything else means no goal is set."""
    if not isinstance(payload, dict):
        return None
    year = _get(payload, 'year')
    target = _get(payload, 'targetBooks', 'target_books')
    if year is None or target is None:
        return None
    try:
        return ReadingGoal(year=int(year), target_books=int(target))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed reading goal payload: {payload!r}")
        return None
