from datetime import date, datetime, timezone

from readlytics.analytics.pace import compute_pace, round_half_up
from readlytics.domain.models import BookRecord, BookStatus


def test_pace_is_pages_per_elapsed_day():
    book = BookRecord(status=BookStatus.READING, total_pages=300, pages_read=100, start_date=date(2024, 1, 1))
    assert compute_pace([book], date(2024, 1, 11)) == 10


def test_date_only_start_counts_from_utc_midnight():
    # 9 days and 20 hours after 2024-01-01T00:00Z floors to 9 elapsed days
    book = BookRecord(status=BookStatus.READING, total_pages=300, pages_read=100, start_date=date(2024, 1, 1))
    now = datetime(2024, 1, 10, 20, 0, tzinfo=timezone.utc)
    assert compute_pace([book], now) == 11


def test_no_start_dates_means_no_pace():
    book = BookRecord(status=BookStatus.READING, total_pages=300, pages_read=100)
    assert compute_pace([book], date(2024, 1, 11)) is None
    assert compute_pace([], date(2024, 1, 11)) is None


def test_want_to_read_start_dates_are_ignored():
    book = BookRecord(status=BookStatus.WANT_TO_READ, total_pages=300, pages_read=0, start_date=date(2024, 1, 1))
    assert compute_pace([book], date(2024, 1, 11)) is None


def test_earliest_active_start_anchors_pace_and_all_pages_count():
    books = [
        BookRecord(status=BookStatus.FINISHED, total_pages=200, pages_read=200, start_date=date(2024, 1, 1)),
        BookRecord(status=BookStatus.READING, total_pages=300, pages_read=50, start_date=date(2024, 1, 6)),
        BookRecord(status=BookStatus.WANT_TO_READ, total_pages=100, pages_read=0, start_date=date(2023, 1, 1)),
    ]
    assert compute_pace(books, date(2024, 1, 11)) == 25


def test_pace_started_today_uses_one_day_minimum():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    book = BookRecord(status=BookStatus.READING, total_pages=300, pages_read=42,
                      start_date=datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc))
    assert compute_pace([book], now) == 42


def test_partial_days_are_floored():
    book = BookRecord(status=BookStatus.READING, total_pages=300, pages_read=30,
                      start_date=datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc))
    # two and a half days elapsed counts as two
    now = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)
    assert compute_pace([book], now) == 15


def test_zero_pages_is_zero_not_none():
    book = BookRecord(status=BookStatus.READING, total_pages=300, pages_read=0, start_date=date(2024, 1, 1))
    assert compute_pace([book], date(2024, 1, 11)) == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
    assert round_half_up(0) == 0
