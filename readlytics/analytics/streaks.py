"""Reading streak calculation over canonical activity days."""

import logging
from datetime import date
from typing import Iterable, List, Union

from readlytics.domain.models import ActivityDay, StreakResult
from readlytics.analytics.day_bucketing import days_between, previous_day

logger = logging.getLogger(__name__)


def _distinct_days_desc(activity_days: Iterable[Union[date, ActivityDay]], today: date) -> List[date]:
    days = set()
    for item in activity_days:
        day = item.day if isinstance(item, ActivityDay) else item
        # Activity stamped after today cannot extend a streak
        if day > today:
            continue
        days.add(day)
    return sorted(days, reverse=True)


def compute_streaks(activity_days: Iterable[Union[date, ActivityDay]], today: date) -> StreakResult:
    """
    Compute the current and longest reading streak.

    A streak is a run of consecutive canonical days with activity. The current
    streak only counts when the most recent activity is today or yesterday;
    any gap longer than one day ends a run.

    Args:
        activity_days: canonical days (or ActivityDay values); duplicates allowed
        today: the canonical day of "now"

    Returns:
        StreakResult with current <= longest
    """
    sorted_days = _distinct_days_desc(activity_days, today)
    if not sorted_days:
        return StreakResult(0, 0)

    current = 0
    most_recent = sorted_days[0]
    if most_recent == today or most_recent == previous_day(today):
        current = 1
        for previous, day in zip(sorted_days, sorted_days[1:]):
            if days_between(day, previous) == 1:
                current += 1
            else:
                break

    longest = 1
    run = 1
    for previous, day in zip(sorted_days, sorted_days[1:]):
        if days_between(day, previous) == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)

    longest = max(longest, current)
    logger.debug(f"Streaks over {len(sorted_days)} active days: current={current} longest={longest}")
    return StreakResult(current, longest)
