"""
Domain models for the reading activity analytics engine.

These models represent raw snapshots handed to the engine (books, activity days,
goals) and the derived projections it produces (streaks, period aggregates,
calendar months). None of them are persisted by the engine itself.
"""

import calendar
from dataclasses import dataclass, field
from datetime import datetime, date, timezone
from enum import Enum
from typing import Optional, List, Dict, Any, Union


Instant = Union[datetime, date]


def now_utc() -> datetime:
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class InvalidActivityDay(ValueError):
    """Raised when an activity day reports a negative page count."""


class InvalidBookRecord(ValueError):
    """Raised when a book snapshot breaks the page or status invariants."""


class BookStatus(Enum):
    """Reading status of a tracked book."""
    WANT_TO_READ = "WANT_TO_READ"
    READING = "READING"
    FINISHED = "FINISHED"

    @classmethod
    def parse(cls, raw: Any) -> 'BookStatus':
        """Parse a backend status string, tolerating case and common aliases."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            raise InvalidBookRecord(f"Missing or invalid book status: {raw!r}")
        cleaned = raw.strip().lower().replace('-', '_').replace(' ', '_')
        status = STATUS_ALIASES.get(cleaned)
        if status is None:
            raise InvalidBookRecord(f"Unknown book status: {raw!r}")
        return status


STATUS_ALIASES = {
    'want_to_read': BookStatus.WANT_TO_READ,
    'plan_to_read': BookStatus.WANT_TO_READ,
    'not_started': BookStatus.WANT_TO_READ,
    'tbr': BookStatus.WANT_TO_READ,
    'reading': BookStatus.READING,
    'currently_reading': BookStatus.READING,
    'finished': BookStatus.FINISHED,
    'read': BookStatus.FINISHED,
    'completed': BookStatus.FINISHED,
    'complete': BookStatus.FINISHED,
}


class Period(Enum):
    """Aggregation windows anchored to the canonical today."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass
class BookRecord:
    """Read-only snapshot of one tracked book."""
    status: BookStatus
    total_pages: int
    pages_read: int = 0
    start_date: Optional[Instant] = None
    complete_date: Optional[Instant] = None
    id: Optional[str] = None
    title: Optional[str] = None

    def __post_init__(self):
        self.status = BookStatus.parse(self.status)
        if isinstance(self.total_pages, bool) or not isinstance(self.total_pages, int) or self.total_pages <= 0:
            raise InvalidBookRecord(f"total_pages must be a positive integer, got {self.total_pages!r}")
        if isinstance(self.pages_read, bool) or not isinstance(self.pages_read, int):
            raise InvalidBookRecord(f"pages_read must be an integer, got {self.pages_read!r}")
        if self.pages_read < 0 or self.pages_read > self.total_pages:
            raise InvalidBookRecord(
                f"pages_read must be between 0 and {self.total_pages}, got {self.pages_read}"
            )

    @property
    def is_finished(self) -> bool:
        return self.status is BookStatus.FINISHED

    @property
    def is_active(self) -> bool:
        """Reading or finished, i.e. contributes to pace."""
        return self.status in (BookStatus.READING, BookStatus.FINISHED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'status': self.status.value,
            'totalPages': self.total_pages,
            'pagesRead': self.pages_read,
            'startDate': _iso(self.start_date),
            'completeDate': _iso(self.complete_date),
        }


@dataclass(frozen=True, order=True)
class ActivityDay:
    """A canonical calendar day with the pages read on it.

    Equality, hashing and ordering only consider the day.
    """
    day: date
    pages: int = field(default=0, compare=False)

    def __post_init__(self):
        if self.pages < 0:
            raise InvalidActivityDay(f"pages must be non-negative, got {self.pages}")


@dataclass(frozen=True)
class PeriodBounds:
    """Inclusive day range of one period window."""
    period: Period
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class StreakResult:
    current: int = 0
    longest: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {'current': self.current, 'longest': self.longest}


@dataclass(frozen=True)
class PeriodPages:
    """Pages-per-period figures as reported by the activity backend."""
    pages_this_week: int = 0
    pages_this_month: int = 0
    pages_this_year: int = 0


@dataclass(frozen=True)
class PeriodAggregate:
    books_this_week: int = 0
    books_this_month: int = 0
    books_this_year: int = 0
    pages_this_week: int = 0
    pages_this_month: int = 0
    pages_this_year: int = 0


@dataclass(frozen=True)
class DailyStat:
    """One bar of the trailing seven-day activity series."""
    day: date
    pages: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.day.isoformat(), 'pages': self.pages}


@dataclass(frozen=True)
class ReadingGoal:
    """Yearly target number of finished books."""
    year: int
    target_books: int


@dataclass(frozen=True)
class GoalProgress:
    year: int
    target_books: int
    books_completed: int
    progress_percentage: float
    completed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'targetBooks': self.target_books,
            'booksCompleted': self.books_completed,
            'progressPercentage': self.progress_percentage,
            'completed': self.completed,
        }


@dataclass(frozen=True)
class DerivedStats:
    """Derived reading statistics consumed by the presentation layer."""
    completed_count: int = 0
    reading_count: int = 0
    total_pages_read: int = 0
    books_this_week: int = 0
    books_this_month: int = 0
    books_this_year: int = 0
    pages_this_week: int = 0
    pages_this_month: int = 0
    pages_this_year: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    avg_pages_per_book: int = 0
    reading_pace: Optional[int] = None
    goal: Optional[GoalProgress] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'completedCount': self.completed_count,
            'readingCount': self.reading_count,
            'totalPagesRead': self.total_pages_read,
            'booksThisWeek': self.books_this_week,
            'booksThisMonth': self.books_this_month,
            'booksThisYear': self.books_this_year,
            'pagesThisWeek': self.pages_this_week,
            'pagesThisMonth': self.pages_this_month,
            'pagesThisYear': self.pages_this_year,
            'currentStreak': self.current_streak,
            'longestStreak': self.longest_streak,
            'avgPagesPerBook': self.avg_pages_per_book,
            'readingPace': self.reading_pace,
            'goal': self.goal.to_dict() if self.goal else None,
        }


@dataclass(frozen=True)
class CalendarDay:
    """One heatmap cell; a cell without a day is leading padding."""
    day: Optional[date] = None
    pages_read: int = 0
    intensity: int = 0
    is_future: bool = False
    is_before_account_start: bool = False

    @classmethod
    def empty(cls) -> 'CalendarDay':
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.day is None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_empty:
            return {'empty': True}
        return {
            'empty': False,
            'date': self.day.isoformat(),
            'pagesRead': self.pages_read,
            'intensity': self.intensity,
            'isFuture': self.is_future,
            'isBeforeAccountStart': self.is_before_account_start,
        }


@dataclass
class CalendarMonth:
    year: int
    month: int
    days: List[CalendarDay] = field(default_factory=list)

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def active_days(self) -> int:
        return sum(1 for d in self.days if not d.is_empty and d.pages_read > 0)

    @property
    def total_pages(self) -> int:
        return sum(d.pages_read for d in self.days if not d.is_empty)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'month': self.month,
            'monthName': self.month_name,
            'activeDays': self.active_days,
            'totalPages': self.total_pages,
            'days': [d.to_dict() for d in self.days],
        }


@dataclass
class AnalyticsReport:
    """Everything the dashboard needs, computed from one snapshot."""
    stats: DerivedStats
    daily_stats: List[DailyStat] = field(default_factory=list)
    calendar: List[CalendarMonth] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stats': self.stats.to_dict(),
            'dailyStats': [d.to_dict() for d in self.daily_stats],
            'calendar': [m.to_dict() for m in self.calendar],
        }


def _iso(value: Optional[Instant]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()
