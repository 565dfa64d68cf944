import os
import secrets
from dotenv import load_dotenv

# Load environment variables from .env file(s)
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


def _read_int_env(name: str, default: int) -> int:
    try:
        raw = os.environ.get(name)
        if raw in (None, ''):
            return default
        return int(raw)
    except (TypeError, ValueError):
        return default


def _read_float_env(name: str, default: float) -> float:
    try:
        raw = os.environ.get(name)
        if raw in (None, ''):
            return default
        return float(raw)
    except (TypeError, ValueError):
        return default


class Config:
    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        SECRET_KEY = secrets.token_hex(32)

    # API Authentication
    API_TEST_TOKEN = os.environ.get('API_TEST_TOKEN')  # No default - must be set via env var

    # Upstream reading tracker backend (source of books and activity data)
    BACKEND_API_URL = os.environ.get('BACKEND_API_URL', 'http://localhost:8080/api')
    BACKEND_API_TOKEN = os.environ.get('BACKEND_API_TOKEN')
    BACKEND_API_TIMEOUT = _read_float_env('BACKEND_API_TIMEOUT', 8.0)

    # Analytics settings
    # Fixed reference offset used for day bucketing (330 = IST, UTC+5:30)
    ANALYTICS_REFERENCE_OFFSET_MINUTES = _read_int_env('ANALYTICS_REFERENCE_OFFSET_MINUTES', 330)
    ANALYTICS_CACHE_TTL = _read_int_env('ANALYTICS_CACHE_TTL', 60)

    # Application settings
    SITE_NAME = os.environ.get('SITE_NAME', 'Readlytics')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'ERROR').upper()

    # Debug settings (disabled by default)
    DEBUG_MODE = os.environ.get('READLYTICS_DEBUG', 'false').lower() in ['true', 'on', '1']


class TestingConfig(Config):
    TESTING = True
    API_TEST_TOKEN = 'test-token'
    BACKEND_API_URL = 'http://backend.test/api'
    BACKEND_API_TOKEN = 'backend-token'
    ANALYTICS_CACHE_TTL = 1
