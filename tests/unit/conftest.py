from unittest.mock import MagicMock

import pytest
import redis

import dynamiclinks
from dynamiclinks.models import Client
from dynamiclinks.constants import ENV


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Isolate tests from the host's configuration environment."""
    for group in (ENV.App, ENV.DynamicLinks, ENV.Redis, ENV.AppConfig):
        for name in group:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _defaults():
    """Start every test without a cached configuration or shortener."""
    dynamiclinks.reset_defaults()
    yield
    dynamiclinks.reset_defaults()


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def client() -> Client:
    return Client(id='42', scheme='https', hostname='dl.example', name='Example')


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis pipeline-compatible client."""
    _redis_client = MagicMock(spec=redis.client.Pipeline)
    _redis_client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    _redis_client.ping.return_value = True
    _redis_client.exists.return_value = False
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.get.return_value = None
    return _redis_client
