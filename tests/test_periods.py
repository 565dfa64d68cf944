"""Tests for period windows, book/page aggregation and the daily-stats fallback."""
from datetime import date, datetime, timezone

from readlytics.analytics.periods import (
    aggregate,
    empty_week,
    normalize_daily_stats,
    parse_period_pages,
    period_bounds,
)
from readlytics.domain.models import BookRecord, BookStatus, DailyStat, Period, PeriodPages


def _finished(complete_date, pages=100):
    return BookRecord(status=BookStatus.FINISHED, total_pages=pages, pages_read=pages,
                      complete_date=complete_date)


def test_week_is_trailing_seven_days_including_today():
    bounds = period_bounds(Period.WEEK, date(2024, 6, 20))
    assert bounds.start == date(2024, 6, 14)
    assert bounds.end == date(2024, 6, 20)
    assert not bounds.contains(date(2024, 6, 13))


def test_month_and_year_windows_start_on_the_first():
    today = date(2024, 6, 20)
    assert period_bounds(Period.MONTH, today).start == date(2024, 6, 1)
    assert period_bounds(Period.YEAR, today).start == date(2024, 1, 1)


def test_book_finished_counts_in_all_overlapping_windows():
    result = aggregate([_finished(date(2024, 6, 15))], datetime(2024, 6, 20, 12, tzinfo=timezone.utc))
    assert result.books_this_week == 1
    assert result.books_this_month == 1
    assert result.books_this_year == 1


def test_books_bucket_into_the_windows_they_fall_in():
    books = [
        _finished(date(2024, 6, 19)),   # week, month, year
        _finished(date(2024, 6, 2)),    # month, year
        _finished(date(2024, 2, 10)),   # year
        _finished(date(2023, 12, 31)),  # none
    ]
    result = aggregate(books, date(2024, 6, 20))
    assert (result.books_this_week, result.books_this_month, result.books_this_year) == (1, 2, 3)


def test_only_finished_books_with_completion_date_count():
    books = [
        BookRecord(status=BookStatus.READING, total_pages=100, pages_read=50, complete_date=date(2024, 6, 19)),
        BookRecord(status=BookStatus.FINISHED, total_pages=100, pages_read=100),
        BookRecord(status='finished', total_pages=100, pages_read=100, complete_date='2024-06-18'),
    ]
    result = aggregate(books, date(2024, 6, 20))
    assert result.books_this_week == 1


def test_completion_instant_is_bucketed_in_reference_timezone():
    # 19:00 UTC on May 31 is June 1 at UTC+5:30
    book = _finished(datetime(2024, 5, 31, 19, 0, tzinfo=timezone.utc))
    result = aggregate([book], date(2024, 6, 20), reference_offset_minutes=330)
    assert result.books_this_month == 1
    result_utc = aggregate([book], date(2024, 6, 20), reference_offset_minutes=0)
    assert result_utc.books_this_month == 0


def test_future_completion_dates_are_not_counted():
    result = aggregate([_finished(date(2024, 6, 25))], date(2024, 6, 20))
    assert result.books_this_week == 0
    assert result.books_this_year == 0


def test_pages_are_summed_from_daily_pages():
    daily = {
        date(2024, 6, 20): 10,
        date(2024, 6, 14): 5,
        date(2024, 6, 13): 7,
        date(2024, 3, 1): 20,
        date(2023, 12, 31): 99,
    }
    result = aggregate([], date(2024, 6, 20), daily_pages=daily)
    assert result.pages_this_week == 15
    assert result.pages_this_month == 22
    assert result.pages_this_year == 42


def test_backend_period_pages_override_local_sums():
    result = aggregate([], date(2024, 6, 20), daily_pages={date(2024, 6, 20): 10},
                       period_pages=PeriodPages(30, 120, 900))
    assert (result.pages_this_week, result.pages_this_month, result.pages_this_year) == (30, 120, 900)


def test_empty_week_is_seven_zero_days_ending_today():
    week = empty_week(date(2024, 3, 3))
    assert len(week) == 7
    assert week[0].day == date(2024, 2, 26)
    assert week[-1].day == date(2024, 3, 3)
    assert all(stat.pages == 0 for stat in week)


def test_valid_daily_stats_are_parsed_in_date_order():
    payload = {'dailyStats': [{'date': f'2024-03-0{d}', 'pages': d} for d in range(7, 0, -1)]}
    stats = normalize_daily_stats(payload, date(2024, 3, 7))
    assert stats[0] == DailyStat(date(2024, 3, 1), 1)
    assert stats[-1] == DailyStat(date(2024, 3, 7), 7)


def test_missing_daily_stats_fall_back_to_empty_week():
    today = date(2024, 3, 7)
    assert normalize_daily_stats({}, today) == empty_week(today)
    assert normalize_daily_stats(None, today) == empty_week(today)
    assert normalize_daily_stats({'dailyStats': 'oops'}, today) == empty_week(today)


def test_wrong_length_daily_stats_fall_back_to_empty_week():
    today = date(2024, 3, 7)
    payload = {'dailyStats': [{'date': '2024-03-07', 'pages': 4}]}
    assert normalize_daily_stats(payload, today) == empty_week(today)


def test_malformed_daily_stats_entry_falls_back_to_empty_week():
    today = date(2024, 3, 7)
    entries = [{'date': f'2024-03-0{d}', 'pages': 1} for d in range(1, 8)]
    entries[3] = {'date': 'not-a-date', 'pages': 1}
    assert normalize_daily_stats({'dailyStats': entries}, today) == empty_week(today)

    entries[3] = {'date': '2024-03-04', 'pages': -5}
    assert normalize_daily_stats({'dailyStats': entries}, today) == empty_week(today)


def test_parse_period_pages_defaults_missing_values_to_zero():
    assert parse_period_pages({'pagesThisWeek': 12, 'pagesThisYear': 300}) == PeriodPages(12, 0, 300)
    assert parse_period_pages(None) == PeriodPages()
    assert parse_period_pages({'pagesThisWeek': 'lots'}) == PeriodPages()
