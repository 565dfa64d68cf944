"""
API Authentication Module

Provides bearer-token authentication for the analytics API endpoints.
"""

import logging
import secrets
from functools import wraps
from flask import request, jsonify, current_app

logger = logging.getLogger(__name__)


def validate_api_token(token: str) -> bool:
    """
    Validate an API token against the configured token.
    With no token configured every request is rejected.
    """
    if not token:
        return False

    expected = current_app.config.get('API_TEST_TOKEN')
    if not expected:
        logger.warning("API_TEST_TOKEN is not configured; rejecting API request")
        return False

    return secrets.compare_digest(token, expected)


def api_token_required(f):
    """
    Decorator for API endpoints that require token authentication.
    Expects an 'Authorization: Bearer <token>' header.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        if not auth_header or not auth_header.startswith('Bearer '):
            logger.info(f"API request to {request.path} without bearer token")
            return jsonify({
                'error': 'Authentication required',
                'message': 'This API endpoint requires a Bearer token in the Authorization header.'
            }), 401

        token = auth_header.split(' ', 1)[1].strip()
        if not validate_api_token(token):
            logger.info(f"Invalid API token for {request.path}")
            return jsonify({'error': 'Invalid API token'}), 401

        return f(*args, **kwargs)

    return decorated_function
