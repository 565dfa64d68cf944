"""
Services Package

- ActivityClient: fetches raw reading data from the tracker backend
- snapshot_loader: converts backend / request payloads into domain objects
"""

from flask import current_app

from .activity_client import ActivityClient, ActivitySnapshot, BackendUnavailable

_activity_client = None


def get_activity_client() -> ActivityClient:
    """Get the backend client with lazy initialization from app config."""
    global _activity_client
    if _activity_client is None:
        _activity_client = ActivityClient.from_config(current_app.config)
    return _activity_client


def reset_activity_client(client: ActivityClient = None) -> None:
    """Replace (or drop) the shared client; used when config changes and in tests."""
    global _activity_client
    _activity_client = client


__all__ = [
    'ActivityClient',
    'ActivitySnapshot',
    'BackendUnavailable',
    'get_activity_client',
    'reset_activity_client',
]
