"""
Analytics facade.

Composes the streak, period, pace, calendar and goal calculators into the
derived statistics consumed by the presentation layer. Every function here is
a pure projection of the snapshot it is given; nothing performs I/O.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pytz

from readlytics.domain.models import (
    ActivityDay, AnalyticsReport, BookRecord, BookStatus, DailyStat, DerivedStats,
    PeriodPages, ReadingGoal, now_utc,
)
from readlytics.analytics.day_bucketing import (
    DEFAULT_REFERENCE_OFFSET_MINUTES, Temporal, parse_instant, to_canonical_day,
)
from readlytics.analytics.streaks import compute_streaks
from readlytics.analytics.periods import aggregate, empty_week
from readlytics.analytics.pace import compute_pace, round_half_up
from readlytics.analytics.calendar_heatmap import build_calendar, resolve_anchor_start
from readlytics.analytics.goals import compute_goal_progress
from readlytics.utils.simple_cache import cache_get, cache_set, snapshot_key

logger = logging.getLogger(__name__)

ActivityInput = Union[Mapping[date, int], Iterable[Union[date, ActivityDay]]]


def pages_by_day(activity_days: Optional[ActivityInput]) -> Dict[date, int]:
    """Normalize activity input into canonical day -> pages.

    Plain dates (activity without a page count) map to zero pages; repeated
    ActivityDay entries for one day are summed.
    """
    if not activity_days:
        return {}
    if isinstance(activity_days, Mapping):
        return {day: int(pages or 0) for day, pages in activity_days.items()}
    result: Dict[date, int] = {}
    for item in activity_days:
        if isinstance(item, ActivityDay):
            result[item.day] = result.get(item.day, 0) + item.pages
        else:
            result.setdefault(item, 0)
    return result


def compute_derived_stats(books: Iterable[BookRecord],
                          activity_days: Optional[ActivityInput] = None,
                          goal: Optional[ReadingGoal] = None,
                          now: Optional[Temporal] = None,
                          reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES,
                          period_pages: Optional[PeriodPages] = None) -> DerivedStats:
    """
    Compute the full DerivedStats projection for one snapshot.

    Args:
        books: book snapshot
        activity_days: canonical days with activity (mapping to pages, or an
            iterable of dates / ActivityDay values)
        goal: optional yearly reading goal
        now: the current instant (defaults to the wall clock)
        reference_offset_minutes: fixed offset used for day bucketing
        period_pages: backend-reported page totals per period, if available

    Returns:
        DerivedStats
    """
    books = list(books)
    if now is None:
        now = now_utc()
    today = to_canonical_day(now, reference_offset_minutes)
    daily_pages = pages_by_day(activity_days)

    completed_count = sum(1 for b in books if b.status is BookStatus.FINISHED)
    reading_count = sum(1 for b in books if b.status is BookStatus.READING)
    total_pages_read = sum(b.pages_read for b in books)
    avg_pages_per_book = round_half_up(total_pages_read / len(books)) if books else 0

    streak = compute_streaks(daily_pages.keys(), today)
    periods = aggregate(books, now, daily_pages=daily_pages, period_pages=period_pages,
                        reference_offset_minutes=reference_offset_minutes)
    pace = compute_pace(books, now)
    goal_progress = compute_goal_progress(goal, books, reference_offset_minutes) if goal else None

    return DerivedStats(
        completed_count=completed_count,
        reading_count=reading_count,
        total_pages_read=total_pages_read,
        books_this_week=periods.books_this_week,
        books_this_month=periods.books_this_month,
        books_this_year=periods.books_this_year,
        pages_this_week=periods.pages_this_week,
        pages_this_month=periods.pages_this_month,
        pages_this_year=periods.pages_this_year,
        current_streak=streak.current,
        longest_streak=streak.longest,
        avg_pages_per_book=avg_pages_per_book,
        reading_pace=pace,
        goal=goal_progress,
    )


def _snapshot_payload(books: List[BookRecord], daily_pages: Dict[date, int],
                      goal: Optional[ReadingGoal], now: Temporal,
                      reference_offset_minutes: int, period_pages: Optional[PeriodPages]) -> Dict[str, Any]:
    return {
        'books': [b.to_dict() for b in books],
        'activity': sorted((d.isoformat(), p) for d, p in daily_pages.items()),
        'goal': [goal.year, goal.target_books] if goal else None,
        'today': to_canonical_day(now, reference_offset_minutes),
        # Pace depends on the exact instant, not just the day
        'nowMinute': parse_instant(now).astimezone(pytz.utc).replace(second=0, microsecond=0),
        'offset': reference_offset_minutes,
        'periodPages': [period_pages.pages_this_week, period_pages.pages_this_month,
                        period_pages.pages_this_year] if period_pages else None,
    }


def cached_derived_stats(books: Iterable[BookRecord],
                         activity_days: Optional[ActivityInput] = None,
                         goal: Optional[ReadingGoal] = None,
                         now: Optional[Temporal] = None,
                         reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES,
                         period_pages: Optional[PeriodPages] = None,
                         ttl_seconds: int = 60) -> DerivedStats:
    """compute_derived_stats memoized under a content hash of the snapshot.

    The key includes the canonical today and now truncated to the minute, so a
    cached result never outlives the day it was computed for and pace stays
    current to the minute.
    """
    books = list(books)
    if now is None:
        now = now_utc()
    daily_pages = pages_by_day(activity_days)
    key = snapshot_key('derived_stats', _snapshot_payload(
        books, daily_pages, goal, now, reference_offset_minutes, period_pages))

    cached_value = cache_get(key)
    if cached_value is not None:
        logger.debug(f"Derived stats cache hit for {key}")
        return cached_value

    result = compute_derived_stats(books, daily_pages, goal=goal, now=now,
                                   reference_offset_minutes=reference_offset_minutes,
                                   period_pages=period_pages)
    cache_set(key, result, ttl_seconds)
    return result


def build_dashboard(books: Iterable[BookRecord],
                    activity_days: Optional[ActivityInput] = None,
                    daily_stats: Optional[List[DailyStat]] = None,
                    goal: Optional[ReadingGoal] = None,
                    account_created: Optional[Temporal] = None,
                    now: Optional[Temporal] = None,
                    reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES,
                    period_pages: Optional[PeriodPages] = None) -> AnalyticsReport:
    """Derived stats, the seven-day series and the calendar for one snapshot.

    Page counts from the daily series are merged into the activity map so the
    heatmap can shade recent days even when the activity feed only lists dates.
    """
    books = list(books)
    if now is None:
        now = now_utc()
    today = to_canonical_day(now, reference_offset_minutes)
    daily_pages = pages_by_day(activity_days)
    if daily_stats is None:
        daily_stats = empty_week(today)
    for stat in daily_stats:
        if stat.pages > 0:
            daily_pages[stat.day] = max(daily_pages.get(stat.day, 0), stat.pages)

    stats = compute_derived_stats(books, daily_pages, goal=goal, now=now,
                                  reference_offset_minutes=reference_offset_minutes,
                                  period_pages=period_pages)
    anchor = resolve_anchor_start(account_created, daily_pages.keys(), now)
    months = build_calendar(daily_pages, anchor, now, reference_offset_minutes)
    return AnalyticsReport(stats=stats, daily_stats=list(daily_stats), calendar=months)
