"""
Analytics API Endpoints

Exposes the reading activity analytics engine over JSON. The POST endpoints
compute from a snapshot supplied in the request body; the dashboard endpoint
fetches the snapshot from the reading tracker backend first.
"""

import traceback

from flask import Blueprint, request, jsonify, current_app

from ..api_auth import api_token_required
from ..analytics.day_bucketing import InvalidTimestamp, parse_temporal, to_canonical_day
from ..analytics.facade import build_dashboard, cached_derived_stats
from ..analytics.calendar_heatmap import build_calendar, most_recent_first, resolve_anchor_start
from ..analytics.periods import parse_period_pages
from ..analytics.streaks import compute_streaks
from ..domain.models import InvalidBookRecord, now_utc
from ..services import BackendUnavailable, get_activity_client
from ..services.snapshot_loader import activity_from_payload, books_from_payload, goal_from_payload

# Create API blueprint
analytics_api = Blueprint('analytics_api', __name__, url_prefix='/api/v1/analytics')


def _reference_offset() -> int:
    return current_app.config.get('ANALYTICS_REFERENCE_OFFSET_MINUTES', 330)


def _request_now(body, key: str = 'now'):
    raw = body.get(key)
    if raw in (None, ''):
        return now_utc()
    return parse_temporal(raw)


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None
    return body


def _bad_request(message: str, error: Exception = None):
    payload = {'status': 'error', 'message': message}
    if error is not None:
        payload['error'] = str(error)
    return jsonify(payload), 400


@analytics_api.route('/stats', methods=['POST'])
@api_token_required
def derived_stats():
    """Compute DerivedStats from a posted snapshot."""
    body = _json_body()
    if body is None:
        return _bad_request('Request body must be a JSON object')
    try:
        offset = _reference_offset()
        now = _request_now(body)
        books = books_from_payload(body.get('books') or [])
        activity = activity_from_payload(body.get('activityDays'), offset)
        goal = goal_from_payload(body.get('goal'))
        period_pages = parse_period_pages(body['periodStats']) if body.get('periodStats') is not None else None

        stats = cached_derived_stats(
            books, activity, goal=goal, now=now,
            reference_offset_minutes=offset,
            period_pages=period_pages,
            ttl_seconds=current_app.config.get('ANALYTICS_CACHE_TTL', 60),
        )
        return jsonify({'status': 'success', 'data': stats.to_dict()}), 200

    except InvalidTimestamp as e:
        return _bad_request('Invalid timestamp in snapshot', e)
    except InvalidBookRecord as e:
        return _bad_request('Invalid book record in snapshot', e)
    except ValueError as e:
        return _bad_request('Invalid snapshot', e)
    except Exception as e:
        current_app.logger.error(f"Error computing derived stats: {e}")
        current_app.logger.error(traceback.format_exc())
        return jsonify({
            'status': 'error',
            'message': 'Failed to compute reading statistics',
            'error': str(e)
        }), 500


@analytics_api.route('/streaks', methods=['POST'])
@api_token_required
def streaks():
    """Current and longest streak for a posted list of activity dates."""
    body = _json_body()
    if body is None:
        return _bad_request('Request body must be a JSON object')
    try:
        offset = _reference_offset()
        activity = activity_from_payload(body.get('activityDates') or [], offset)
        today = to_canonical_day(_request_now(body, 'today'), offset)
        result = compute_streaks(activity.keys(), today)
        return jsonify({'status': 'success', 'data': result.to_dict()}), 200

    except ValueError as e:
        return _bad_request('Invalid activity dates', e)
    except Exception as e:
        current_app.logger.error(f"Error computing streaks: {e}")
        current_app.logger.error(traceback.format_exc())
        return jsonify({
            'status': 'error',
            'message': 'Failed to compute reading streaks',
            'error': str(e)
        }), 500


@analytics_api.route('/calendar', methods=['POST'])
@api_token_required
def calendar_heatmap():
    """Month grids from the anchor start through now.

    Query parameter order=desc returns the most recent month first.
    """
    body = _json_body()
    if body is None:
        return _bad_request('Request body must be a JSON object')
    try:
        offset = _reference_offset()
        now = _request_now(body)
        activity = activity_from_payload(body.get('activityDays'), offset)
        account_created = body.get('accountCreatedAt')
        if account_created not in (None, ''):
            account_created = parse_temporal(account_created)
        else:
            account_created = None

        anchor = resolve_anchor_start(account_created, activity.keys(), now)
        months = build_calendar(activity, anchor, now, offset)
        if request.args.get('order', 'asc').lower() == 'desc':
            months = most_recent_first(months)

        return jsonify({
            'status': 'success',
            'data': [m.to_dict() for m in months],
            'count': len(months)
        }), 200

    except ValueError as e:
        return _bad_request('Invalid calendar request', e)
    except Exception as e:
        current_app.logger.error(f"Error building calendar heatmap: {e}")
        current_app.logger.error(traceback.format_exc())
        return jsonify({
            'status': 'error',
            'message': 'Failed to build calendar heatmap',
            'error': str(e)
        }), 500


@analytics_api.route('/dashboard', methods=['GET'])
@api_token_required
def dashboard():
    """Fetch the snapshot from the backend and return stats, daily series and calendar.

    An X-Backend-Token header is forwarded to the backend in place of the
    configured service token.
    """
    try:
        offset = _reference_offset()
        now = now_utc()
        client = get_activity_client()
        snapshot = client.fetch_snapshot(now, token=request.headers.get('X-Backend-Token'))

        report = build_dashboard(
            snapshot.books,
            snapshot.activity_days,
            daily_stats=snapshot.daily_stats,
            goal=snapshot.goal,
            account_created=snapshot.account_created,
            now=now,
            reference_offset_minutes=offset,
            period_pages=snapshot.period_pages,
        )
        return jsonify({'status': 'success', 'data': report.to_dict()}), 200

    except BackendUnavailable as e:
        current_app.logger.error(f"Backend unavailable for dashboard: {e}")
        return jsonify({
            'status': 'error',
            'message': 'Reading data is temporarily unavailable',
            'error': str(e)
        }), 502
    except ValueError as e:
        current_app.logger.error(f"Backend returned invalid reading data: {e}")
        return jsonify({
            'status': 'error',
            'message': 'Backend returned invalid reading data',
            'error': str(e)
        }), 502
    except Exception as e:
        current_app.logger.error(f"Error building dashboard: {e}")
        current_app.logger.error(traceback.format_exc())
        return jsonify({
            'status': 'error',
            'message': 'Failed to build reading dashboard',
            'error': str(e)
        }), 500
