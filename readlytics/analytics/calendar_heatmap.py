"""
Calendar heatmap builder.

Produces one grid per month, from the month of the anchor start (account
creation, else earliest activity, else now) through the current month. Each
grid starts with empty padding cells so day 1 lands on its weekday column
(Sunday first), followed by one cell per day classified into an intensity bin.
"""

import calendar
import logging
from datetime import date
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from readlytics.domain.models import ActivityDay, CalendarDay, CalendarMonth
from readlytics.analytics.day_bucketing import (
    DEFAULT_REFERENCE_OFFSET_MINUTES, Temporal, to_canonical_day,
)

logger = logging.getLogger(__name__)

# (minimum pages, intensity); evaluated from the highest bin down
INTENSITY_THRESHOLDS: Tuple[Tuple[int, int], ...] = (
    (15, 5),
    (10, 4),
    (5, 3),
    (3, 2),
    (1, 1),
)
MAX_INTENSITY = 5


def intensity_for_pages(pages: int) -> int:
    """Map a day's page count to an intensity bin in [0, 5]."""
    for minimum, intensity in INTENSITY_THRESHOLDS:
        if pages >= minimum:
            return intensity
    return 0


def resolve_anchor_start(account_created: Optional[Temporal],
                         activity_days: Iterable[Union[date, ActivityDay]],
                         now: Temporal) -> Temporal:
    """Pick the heatmap anchor: account creation, else earliest activity, else now."""
    if account_created is not None:
        return account_created
    days = [d.day if isinstance(d, ActivityDay) else d for d in activity_days]
    if days:
        return min(days)
    return now


def leading_padding(year: int, month: int) -> int:
    """Number of empty cells before day 1 with Sunday as column 0."""
    monday_based, _ = calendar.monthrange(year, month)
    return (monday_based + 1) % 7


def iter_months(start: date, end: date) -> Iterator[Tuple[int, int]]:
    """Yield (year, month) from start's month through end's month inclusive."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        if month == 12:
            year, month = year + 1, 1
        else:
            month += 1


def build_month(year: int, month: int, pages_by_day: Mapping[date, int],
                today: date, anchor_day: date) -> CalendarMonth:
    days: List[CalendarDay] = [CalendarDay.empty() for _ in range(leading_padding(year, month))]
    _, days_in_month = calendar.monthrange(year, month)
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        pages = max(0, int(pages_by_day.get(day, 0) or 0))
        days.append(CalendarDay(
            day=day,
            pages_read=pages,
            intensity=intensity_for_pages(pages),
            is_future=day > today,
            is_before_account_start=day < anchor_day,
        ))
    return CalendarMonth(year=year, month=month, days=days)


def build_calendar(activity_days: Mapping[date, int], anchor_start: Temporal, now: Temporal,
                   reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> List[CalendarMonth]:
    """
    Build the ordered list of month grids (oldest first).

    Args:
        activity_days: canonical day -> pages read
        anchor_start: account creation instant or earliest activity
        now: the current instant

    Returns:
        list of CalendarMonth in chronological order; an anchor after now
        yields the current month only
    """
    today = to_canonical_day(now, reference_offset_minutes)
    anchor_day = to_canonical_day(anchor_start, reference_offset_minutes)
    first_month_day = min(anchor_day, today)

    months = [
        build_month(year, month, activity_days, today, anchor_day)
        for year, month in iter_months(first_month_day, today)
    ]
    logger.debug(f"Built {len(months)} calendar month(s) from {first_month_day} to {today}")
    return months


def month_for(months: List[CalendarMonth], year: int, month: int) -> Optional[CalendarMonth]:
    for candidate in months:
        if candidate.year == year and candidate.month == month:
            return candidate
    return None


def most_recent_first(months: List[CalendarMonth]) -> List[CalendarMonth]:
    """Navigation order used by the presentation layer."""
    return list(reversed(months))
