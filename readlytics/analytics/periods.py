"""
Period aggregation (week / month / year) anchored to the canonical today.

Windows overlap rather than partition: a book finished today counts toward
the week, the month and the year at the same time.

- week: the trailing seven canonical days, today included
- month: first of the current month through today
- year: January 1st through today
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

from readlytics.domain.models import (
    BookRecord, DailyStat, Period, PeriodAggregate, PeriodBounds, PeriodPages,
)
from readlytics.analytics.day_bucketing import (
    DEFAULT_REFERENCE_OFFSET_MINUTES, InvalidTimestamp, Temporal, to_canonical_day,
)

logger = logging.getLogger(__name__)

WEEK_LENGTH_DAYS = 7


def period_bounds(period: Period, today: date) -> PeriodBounds:
    if period is Period.WEEK:
        start = today - timedelta(days=WEEK_LENGTH_DAYS - 1)
    elif period is Period.MONTH:
        start = today.replace(day=1)
    elif period is Period.YEAR:
        start = today.replace(month=1, day=1)
    else:
        raise ValueError(f"Unknown period: {period!r}")
    return PeriodBounds(period=period, start=start, end=today)


def all_period_bounds(today: date) -> Dict[Period, PeriodBounds]:
    return {period: period_bounds(period, today) for period in Period}


def count_finished_books(books: Iterable[BookRecord], bounds: Dict[Period, PeriodBounds],
                         reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> Dict[Period, int]:
    """Count FINISHED books with a completion day inside each window."""
    counts = {period: 0 for period in bounds}
    for book in books:
        # Status transitions are not re-validated: a completion date is enough
        if not book.is_finished or book.complete_date is None:
            continue
        completion_day = to_canonical_day(book.complete_date, reference_offset_minutes)
        for period, window in bounds.items():
            if window.contains(completion_day):
                counts[period] += 1
    return counts


def sum_pages(daily_pages: Optional[Mapping[date, int]], bounds: Dict[Period, PeriodBounds]) -> Dict[Period, int]:
    """Sum externally supplied per-day page deltas over each window."""
    totals = {period: 0 for period in bounds}
    if not daily_pages:
        return totals
    for day, pages in daily_pages.items():
        if not pages:
            continue
        for period, window in bounds.items():
            if window.contains(day):
                totals[period] += pages
    return totals


def aggregate(books: Iterable[BookRecord], now: Temporal,
              daily_pages: Optional[Mapping[date, int]] = None,
              period_pages: Optional[PeriodPages] = None,
              reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> PeriodAggregate:
    """
    Books finished and pages read for the week, month and year windows.

    Args:
        books: book snapshot
        now: the current instant
        daily_pages: canonical day -> pages read that day
        period_pages: backend-reported page totals; when given they replace
            the totals summed from daily_pages

    Returns:
        PeriodAggregate
    """
    today = to_canonical_day(now, reference_offset_minutes)
    bounds = all_period_bounds(today)

    book_counts = count_finished_books(books, bounds, reference_offset_minutes)
    if period_pages is not None:
        pages = {
            Period.WEEK: period_pages.pages_this_week,
            Period.MONTH: period_pages.pages_this_month,
            Period.YEAR: period_pages.pages_this_year,
        }
    else:
        pages = sum_pages(daily_pages, bounds)

    return PeriodAggregate(
        books_this_week=book_counts[Period.WEEK],
        books_this_month=book_counts[Period.MONTH],
        books_this_year=book_counts[Period.YEAR],
        pages_this_week=pages[Period.WEEK],
        pages_this_month=pages[Period.MONTH],
        pages_this_year=pages[Period.YEAR],
    )


def empty_week(today: date) -> List[DailyStat]:
    """Seven zero-activity days ending today, oldest first."""
    return [DailyStat(day=today - timedelta(days=offset), pages=0)
            for offset in range(WEEK_LENGTH_DAYS - 1, -1, -1)]


def normalize_daily_stats(payload: Any, today: date,
                          reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> List[DailyStat]:
    """
    Turn a backend daily-stats response into a seven-day series.

    Analytics are supplementary, so a malformed response (missing key, wrong
    length, unparseable entry) degrades to an empty week instead of failing.
    """
    entries = payload.get('dailyStats') if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        logger.warning("Daily stats missing from backend response, synthesizing empty week")
        return empty_week(today)
    if len(entries) != WEEK_LENGTH_DAYS:
        logger.warning(f"Daily stats has {len(entries)} entries, expected {WEEK_LENGTH_DAYS}; synthesizing empty week")
        return empty_week(today)

    stats = []
    for idx, entry in enumerate(entries):
        try:
            if not isinstance(entry, dict):
                raise ValueError(f"entry is {type(entry).__name__}, not an object")
            day = to_canonical_day(entry['date'], reference_offset_minutes)
            pages = entry.get('pages') or 0
            if isinstance(pages, bool) or not isinstance(pages, (int, float)) or pages < 0:
                raise ValueError(f"invalid pages value {pages!r}")
            stats.append(DailyStat(day=day, pages=int(pages)))
        except (KeyError, ValueError, InvalidTimestamp) as e:
            logger.warning(f"Daily stats entry {idx} is malformed ({e}); synthesizing empty week")
            return empty_week(today)

    stats.sort(key=lambda s: s.day)
    return stats


def parse_period_pages(payload: Any) -> PeriodPages:
    """Read backend period-stats figures, treating missing values as zero."""
    if not isinstance(payload, dict):
        logger.warning("Period stats response is not an object, using zeros")
        return PeriodPages()

    def _value(key: str) -> int:
        raw = payload.get(key)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw < 0:
            if raw is not None:
                logger.warning(f"Ignoring invalid {key} value {raw!r}")
            return 0
        return int(raw)

    return PeriodPages(
        pages_this_week=_value('pagesThisWeek'),
        pages_this_month=_value('pagesThisMonth'),
        pages_this_year=_value('pagesThisYear'),
    )


def daily_pages_from_stats(stats: Iterable[DailyStat]) -> Dict[date, int]:
    pages: Dict[date, int] = {}
    for stat in stats:
        pages[stat.day] = pages.get(stat.day, 0) + stat.pages
    return pages
