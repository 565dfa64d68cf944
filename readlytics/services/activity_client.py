"""
Reading tracker backend client.

Responsibilities:
- Fetch the raw snapshot the analytics engine needs: books, activity dates,
  daily and period page stats, the current reading goal, the account profile
- Convert responses into domain objects via snapshot_loader

Notes:
- Uses requests with short timeouts and bearer-token auth
- Performs no retries; backoff belongs to the caller
- Daily stats degrade to an empty week instead of failing the whole view
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

import requests  # type: ignore

from readlytics.domain.models import BookRecord, DailyStat, PeriodPages, ReadingGoal
from readlytics.analytics.day_bucketing import (
    DEFAULT_REFERENCE_OFFSET_MINUTES, Temporal, parse_temporal, to_canonical_day,
)
from readlytics.analytics.periods import empty_week, normalize_daily_stats, parse_period_pages
from readlytics.services.snapshot_loader import activity_from_payload, books_from_payload, goal_from_payload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 8


class BackendUnavailable(Exception):
    """Raised when the reading tracker backend cannot be reached or answers with an error."""

    def __init__(self, path: str, reason: str, status_code: Optional[int] = None):
        self.path = path
        self.status_code = status_code
        super().__init__(f"Backend request to {path} failed: {reason}")


@dataclass
class ActivitySnapshot:
    """One consistent fetch of everything the engine reads."""
    books: List[BookRecord] = field(default_factory=list)
    activity_days: Dict[date, int] = field(default_factory=dict)
    daily_stats: List[DailyStat] = field(default_factory=list)
    period_pages: Optional[PeriodPages] = None
    goal: Optional[ReadingGoal] = None
    account_created: Optional[Temporal] = None


class ActivityClient:
    def __init__(self, base_url: str, api_token: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
                 reference_offset_minutes: int = DEFAULT_REFERENCE_OFFSET_MINUTES,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or '').rstrip('/')
        self.api_token = api_token or ''
        self.timeout = timeout
        self.reference_offset_minutes = reference_offset_minutes
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'ActivityClient':
        return cls(
            base_url=config.get('BACKEND_API_URL', ''),
            api_token=config.get('BACKEND_API_TOKEN'),
            timeout=config.get('BACKEND_API_TIMEOUT', DEFAULT_TIMEOUT),
            reference_offset_minutes=config.get('ANALYTICS_REFERENCE_OFFSET_MINUTES',
                                                DEFAULT_REFERENCE_OFFSET_MINUTES),
        )

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        bearer = token or self.api_token
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    def _url(self, path: str) -> str:
        if not path.startswith('/'):
            path = '/' + path
        return f"{self.base_url}{path}"

    def _get_json(self, path: str, token: Optional[str] = None, allow_missing: bool = False) -> Any:
        """GET a backend path and decode JSON; 404 returns None when allow_missing."""
        if not self.base_url:
            raise BackendUnavailable(path, "missing base URL")
        try:
            resp = self.session.get(self._url(path), headers=self._headers(token), timeout=self.timeout)
        except requests.RequestException as e:
            raise BackendUnavailable(path, str(e)) from e

        if allow_missing and resp.status_code in (204, 404):
            return None
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise BackendUnavailable(path, str(e), status_code=resp.status_code) from e
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise BackendUnavailable(path, f"invalid JSON: {e}", status_code=resp.status_code) from e

    def get_activity_dates(self, token: Optional[str] = None) -> Dict[date, int]:
        """GET activities/dates -> canonical activity days (pages unknown, so 0)."""
        data = self._get_json('/activities/dates', token)
        return activity_from_payload(data or {'activityDates': []}, self.reference_offset_minutes)

    def get_daily_stats(self, now: Temporal, token: Optional[str] = None) -> List[DailyStat]:
        """GET activities/daily-stats; any failure yields a synthesized empty week."""
        today = to_canonical_day(now, self.reference_offset_minutes)
        try:
            data = self._get_json('/activities/daily-stats', token)
        except BackendUnavailable as e:
            logger.warning(f"Daily stats unavailable, synthesizing empty week: {e}")
            return empty_week(today)
        return normalize_daily_stats(data, today, self.reference_offset_minutes)

    def get_period_stats(self, token: Optional[str] = None) -> PeriodPages:
        """GET activities/period-stats -> pages this week / month / year."""
        return parse_period_pages(self._get_json('/activities/period-stats', token))

    def get_books(self, token: Optional[str] = None) -> List[BookRecord]:
        data = self._get_json('/books', token)
        return books_from_payload(data or [])

    def get_current_goal(self, token: Optional[str] = None) -> Optional[ReadingGoal]:
        """GET goals/current; a missing goal is not an error."""
        return goal_from_payload(self._get_json('/goals/current', token, allow_missing=True))

    def get_account_created(self, token: Optional[str] = None) -> Optional[Temporal]:
        """Account creation instant from the profile, used as the heatmap anchor."""
        profile = self._get_json('/social/profile/me', token, allow_missing=True)
        if not isinstance(profile, dict):
            return None
        raw = profile.get('createdAt') or profile.get('created_at')
        if not raw:
            return None
        return parse_temporal(raw)

    def fetch_snapshot(self, now: Temporal, token: Optional[str] = None) -> ActivitySnapshot:
        """Fetch every input of the engine for one user."""
        books = self.get_books(token)
        activity_days = self.get_activity_dates(token)
        daily_stats = self.get_daily_stats(now, token)
        period_pages = self.get_period_stats(token)
        goal = self.get_current_goal(token)
        account_created = self.get_account_created(token)
        logger.info(f"Fetched snapshot: {len(books)} books, {len(activity_days)} activity days")
        return ActivitySnapshot(
            books=books,
            activity_days=activity_days,
            daily_stats=daily_stats,
            period_pages=period_pages,
            goal=goal,
            account_created=account_created,
        )
