from datetime import date, datetime, timezone

from readlytics.analytics.goals import compute_goal_progress, count_finished_in_year
from readlytics.domain.models import BookRecord, BookStatus, ReadingGoal


def _finished(complete_date):
    return BookRecord(status=BookStatus.FINISHED, total_pages=100, pages_read=100, complete_date=complete_date)


def test_progress_counts_books_finished_in_goal_year():
    books = [_finished(date(2024, 2, 1)), _finished(date(2024, 5, 9)), _finished(date(2023, 12, 30))]
    progress = compute_goal_progress(ReadingGoal(year=2024, target_books=8), books)
    assert progress.books_completed == 2
    assert progress.progress_percentage == 25.0
    assert progress.completed is False


def test_progress_is_capped_at_one_hundred():
    books = [_finished(date(2024, 1, d)) for d in range(1, 6)]
    progress = compute_goal_progress(ReadingGoal(year=2024, target_books=3), books)
    assert progress.progress_percentage == 100.0
    assert progress.completed is True


def test_progress_percentage_is_rounded_to_one_decimal():
    progress = compute_goal_progress(ReadingGoal(year=2024, target_books=3), [_finished(date(2024, 3, 3))])
    assert progress.progress_percentage == 33.3


def test_zero_target_is_trivially_complete():
    progress = compute_goal_progress(ReadingGoal(year=2024, target_books=0), [])
    assert progress.progress_percentage == 0.0
    assert progress.completed is True


def test_year_boundary_uses_reference_timezone():
    # 19:00 UTC on New Year's Eve is already January 1st at UTC+5:30
    book = _finished(datetime(2023, 12, 31, 19, 0, tzinfo=timezone.utc))
    assert count_finished_in_year([book], 2024, 330) == 1
    assert count_finished_in_year([book], 2024, 0) == 0


def test_unfinished_books_do_not_count():
    book = BookRecord(status=BookStatus.READING, total_pages=100, pages_read=10, complete_date=date(2024, 1, 5))
    assert count_finished_in_year([book], 2024) == 0


def test_progress_serialization():
    payload = compute_goal_progress(ReadingGoal(2024, 4), [_finished(date(2024, 1, 2))]).to_dict()
    assert payload == {
        'year': 2024,
        'targetBooks': 4,
        'booksCompleted': 1,
        'progressPercentage': 25.0,
        'completed': False,
    }
