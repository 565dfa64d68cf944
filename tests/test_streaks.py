"""Tests for the reading streak calculator."""
import random
from datetime import date, timedelta

from readlytics.analytics.streaks import compute_streaks
from readlytics.domain.models import ActivityDay, StreakResult


def _days(*isos):
    return [date.fromisoformat(d) for d in isos]


def test_empty_activity_has_no_streak():
    assert compute_streaks([], date(2024, 3, 5)) == StreakResult(0, 0)


def test_consecutive_days_ending_today():
    result = compute_streaks(_days('2024-03-01', '2024-03-02', '2024-03-03'), date(2024, 3, 3))
    assert result == StreakResult(current=3, longest=3)


def test_gap_breaks_current_streak_but_not_longest():
    result = compute_streaks(_days('2024-03-01', '2024-03-02', '2024-03-05'), date(2024, 3, 5))
    assert result == StreakResult(current=1, longest=2)


def test_stale_activity_has_no_current_streak():
    result = compute_streaks(_days('2024-03-01'), date(2024, 3, 5))
    assert result == StreakResult(current=0, longest=1)


def test_streak_ending_yesterday_still_counts():
    result = compute_streaks(_days('2024-03-02', '2024-03-03', '2024-03-04'), date(2024, 3, 5))
    assert result == StreakResult(current=3, longest=3)


def test_single_day_today():
    assert compute_streaks(_days('2024-03-05'), date(2024, 3, 5)) == StreakResult(1, 1)


def test_duplicate_days_count_once():
    assert compute_streaks(_days('2024-01-01', '2024-01-01'), date(2024, 1, 1)) == \
        compute_streaks(_days('2024-01-01'), date(2024, 1, 1))


def test_activity_day_values_are_accepted_and_deduplicated():
    days = [ActivityDay(date(2024, 1, 1), 5), ActivityDay(date(2024, 1, 1), 12), ActivityDay(date(2024, 1, 2), 3)]
    assert compute_streaks(days, date(2024, 1, 2)) == StreakResult(2, 2)


def test_unordered_input():
    result = compute_streaks(_days('2024-03-03', '2024-02-01', '2024-03-01', '2024-03-02'), date(2024, 3, 4))
    assert result == StreakResult(current=3, longest=3)


def test_longest_run_in_the_past():
    days = _days('2024-01-01', '2024-01-02', '2024-01-03', '2024-01-04', '2024-03-04', '2024-03-05')
    assert compute_streaks(days, date(2024, 3, 5)) == StreakResult(current=2, longest=4)


def test_future_dated_activity_is_ignored():
    days = _days('2024-03-04', '2024-03-05', '2024-03-07')
    assert compute_streaks(days, date(2024, 3, 5)) == StreakResult(current=2, longest=2)


def test_streak_across_month_and_year_boundaries():
    days = _days('2023-12-30', '2023-12-31', '2024-01-01')
    assert compute_streaks(days, date(2024, 1, 1)) == StreakResult(3, 3)


def test_current_never_exceeds_longest_on_random_inputs():
    rng = random.Random(42)
    today = date(2024, 6, 30)
    for _ in range(200):
        days = [today - timedelta(days=rng.randint(0, 40)) for _ in range(rng.randint(1, 25))]
        result = compute_streaks(days, today)
        assert result.current <= result.longest
        most_recent = max(days)
        if most_recent not in (today, today - timedelta(days=1)):
            assert result.current == 0
