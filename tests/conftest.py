import pytest

from config import TestingConfig
from readlytics import create_app
from readlytics.utils.simple_cache import cache_clear


@pytest.fixture(autouse=True)
def _clear_cache():
    cache_clear()
    yield
    cache_clear()


@pytest.fixture
def app():
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {'Authorization': f'Bearer {TestingConfig.API_TEST_TOKEN}'}
