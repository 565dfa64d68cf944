"""Yearly reading goal progress."""

from typing import Iterable

from readlytics.domain.models import BookRecord, GoalProgress, ReadingGoal
from readlytics.analytics.day_bucketing import DEFAULT_REFERENCE_OFFSET_MINUTES, to_canonical_day


def count_finished_in_year(books: Iterable[BookRecord], year: int,
                           reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> int:
    return sum(
        1 for book in books
        if book.is_finished and book.complete_date is not None
        and to_canonical_day(book.complete_date, reference_offset_minutes).year == year
    )


def compute_goal_progress(goal: ReadingGoal, books: Iterable[BookRecord],
                          reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES) -> GoalProgress:
    """Books finished in the goal year against the target, percentage capped at 100."""
    completed = count_finished_in_year(books, goal.year, reference_offset_minutes)
    if goal.target_books <= 0:
        percentage = 0.0
    else:
        percentage = round(min(100.0, completed * 100.0 / goal.target_books), 1)
    return GoalProgress(
        year=goal.year,
        target_books=goal.target_books,
        books_completed=completed,
        progress_percentage=percentage,
        completed=completed >= goal.target_books,
    )
