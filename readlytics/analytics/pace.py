"""Reading pace: average pages per elapsed day across the whole library."""

import math
from typing import Iterable, Optional

from readlytics.domain.models import BookRecord
from readlytics.analytics.day_bucketing import Temporal, parse_instant


SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def compute_pace(books: Iterable[BookRecord], now: Temporal) -> Optional[int]:
    """
    Pages per day since the earliest start date of an active book.

    Elapsed time is measured between real instants; date-only start dates
    count from UTC midnight, so the result does not depend on the reference
    offset used for day bucketing.

    Returns None when no READING or FINISHED book has a start date; None means
    "no signal yet" and is distinct from a pace of zero.
    """
    books = list(books)
    start_instants = [
        parse_instant(book.start_date)
        for book in books
        if book.is_active and book.start_date is not None
    ]
    if not start_instants:
        return None

    earliest_start = min(start_instants)
    elapsed_seconds = (parse_instant(now) - earliest_start).total_seconds()
    elapsed_days = max(1, int(elapsed_seconds // SECONDS_PER_DAY))

    total_pages_read = sum(book.pages_read for book in books)
    return round_half_up(total_pages_read / elapsed_days)
