"""Unit tests for helper utilities in helpers.py

Test coverage includes:

1. build_short_url()
   - Composes <scheme>://<hostname>/<shortcode>.

2. parse_expires_at()
   - Accepts datetimes, dates and ISO-8601 strings; naive values are UTC.
   - Unparseable values are logged and treated as "no expiration".

3. require_environment()
   - Decorated function executes when all env vars are present.
   - Missing or empty env vars raise MissingEnvironmentVariableError.
"""

import logging
from datetime import date, datetime, timedelta, timezone, UTC

import pytest

from dynamiclinks.models import Client
from dynamiclinks.exceptions import ConfigurationError, MissingEnvironmentVariableError
from dynamiclinks.utils.helpers import build_short_url, parse_expires_at, require_environment


# -------------------------------
# 1. build_short_url()
# -------------------------------


@pytest.mark.parametrize(
    'scheme, hostname, shortcode, expected',
    [
        ('https', 'dl.example', 'ab12cd', 'https://dl.example/ab12cd'),
        ('http', 'localhost:8080', 'Zz9', 'http://localhost:8080/Zz9'),
        ('https', 'dl.example/', 'ab12cd', 'https://dl.example/ab12cd'),
    ],
)
def test_build_short_url(scheme, hostname, shortcode, expected):
    assert build_short_url(Client(id='1', scheme=scheme, hostname=hostname), shortcode) == expected


# -------------------------------
# 2. parse_expires_at()
# -------------------------------


@pytest.mark.parametrize(
    'expires_at, expected',
    [
        (None, None),
        (datetime(2025, 11, 1, 12, 30, tzinfo=UTC), datetime(2025, 11, 1, 12, 30, tzinfo=UTC)),
        (datetime(2025, 11, 1, 12, 30), datetime(2025, 11, 1, 12, 30, tzinfo=UTC)),
        (date(2025, 11, 1), datetime(2025, 11, 1, tzinfo=UTC)),
        ('2025-11-01', datetime(2025, 11, 1, tzinfo=UTC)),
        ('2025-11-01T00:00:00Z', datetime(2025, 11, 1, tzinfo=UTC)),
        (' 2025-11-01T02:00:00+02:00 ', datetime(2025, 11, 1, 2, tzinfo=timezone(timedelta(hours=2)))),
    ],
)
def test_parse_expires_at(expires_at, expected):
    assert parse_expires_at(expires_at) == expected


def test_parse_expires_at_returns_aware_datetimes():
    assert parse_expires_at('2025-11-01T08:00:00').tzinfo is UTC


@pytest.mark.parametrize('expires_at', ['not-a-date', '', '2025-13-45', 1761955200, ['2025-11-01']])
def test_parse_expires_at_is_lenient(expires_at, caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_expires_at(expires_at) is None

    assert 'Error parsing expires_at, ignoring expiration.' in caplog.text


# -------------------------------
# 3. require_environment()
# -------------------------------


def test_require_environment_happy_path(monkeypatch):
    monkeypatch.setenv('ENV1', 'value1')
    monkeypatch.setenv('ENV2', 'value2')

    @require_environment('ENV1', 'ENV2')
    def sample_function(x: int) -> int:
        return x + 1

    assert sample_function(1) == 2


@pytest.mark.parametrize(
    'env_setup, missing_names',
    [
        ({'ENV1': None, 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': '', 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': None, 'ENV2': None}, ["'ENV1'", "'ENV2'"]),
    ],
)
def test_require_environment_missing_or_empty(monkeypatch, env_setup, missing_names):
    for name, value in env_setup.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    @require_environment('ENV1', 'ENV2')
    def sample_function() -> None:
        pass

    expected_message = f'Missing required environment variables: {", ".join(missing_names)}'
    with pytest.raises(MissingEnvironmentVariableError, match=expected_message) as exc_info:
        sample_function()

    assert isinstance(exc_info.value, ConfigurationError)
    assert exc_info.value.error_code == 'config:missing_environment_variable_error'
