"""
Reading activity analytics engine.

Modules:
- day_bucketing: instant -> canonical day in a fixed reference timezone
- streaks: current / longest reading streak
- periods: week / month / year aggregates and the seven-day fallback
- pace: pages per elapsed day
- calendar_heatmap: month grids with intensity bins
- goals: yearly goal progress
- facade: composition into DerivedStats
"""

from .day_bucketing import (
    DEFAULT_REFERENCE_OFFSET_MINUTES, InvalidTimestamp, start_of_day, to_canonical_day,
)
from .streaks import compute_streaks
from .periods import aggregate, normalize_daily_stats
from .pace import compute_pace
from .calendar_heatmap import build_calendar, intensity_for_pages, resolve_anchor_start
from .goals import compute_goal_progress
from .facade import build_dashboard, cached_derived_stats, compute_derived_stats

__all__ = [
    'DEFAULT_REFERENCE_OFFSET_MINUTES',
    'InvalidTimestamp',
    'start_of_day',
    'to_canonical_day',
    'compute_streaks',
    'aggregate',
    'normalize_daily_stats',
    'compute_pace',
    'build_calendar',
    'intensity_for_pages',
    'resolve_anchor_start',
    'compute_goal_progress',
    'build_dashboard',
    'cached_derived_stats',
    'compute_derived_stats',
]
