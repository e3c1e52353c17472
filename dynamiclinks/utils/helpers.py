"""Helper utilities shared by the shortener and its collaborators.

Functions:
    build_short_url(client, shortcode) -> str
        Compose the full short URL for a client's shortcode
    parse_expires_at(expires_at) -> datetime | None
        Leniently parse an optional expiration value
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from dynamiclinks.models import Client
    >>> from dynamiclinks.utils.helpers import build_short_url, parse_expires_at
    >>> build_short_url(Client(id='1', scheme='https', hostname='dl.example'), 'ab12cd')
    'https://dl.example/ab12cd'
    >>> parse_expires_at('2025-11-01T00:00:00Z')
    datetime.datetime(2025, 11, 1, 0, 0, tzinfo=datetime.timezone.utc)
    >>> parse_expires_at('not-a-date') is None
    True
"""

import os
import logging
import functools
from datetime import date, datetime, time, UTC
from typing import Any
from collections.abc import Callable

from dynamiclinks.models import Client
from dynamiclinks.exceptions import ExpirationParseError, MissingEnvironmentVariableError


logger = logging.getLogger(__name__)


def build_short_url(client: Client, shortcode: str) -> str:
    """Get string representation of a client's short URL

    Args:
        client (Client): owner of the short link domain
        shortcode (str): generated shortcode

    Returns:
        str: short url as <scheme>://<hostname>/<shortcode>
    """
    return f'{client.scheme}://{client.hostname.rstrip("/")}/{shortcode}'


def _to_datetime(expires_at: Any) -> datetime:
    if isinstance(expires_at, datetime):
        parsed = expires_at
    elif isinstance(expires_at, date):
        parsed = datetime.combine(expires_at, time.min)
    elif isinstance(expires_at, str):
        try:
            parsed = datetime.fromisoformat(expires_at.strip())
        except ValueError as e:
            raise ExpirationParseError(f"Can't parse expiration '{expires_at}'.") from e
    else:
        raise ExpirationParseError(f'Unsupported expiration type: {type(expires_at)}.')

    # Naive values are taken as UTC
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def parse_expires_at(expires_at: Any) -> datetime | None:
    """Leniently parse an optional expiration value

    Accepts a datetime, a date (midnight UTC), an ISO-8601 string or None.
    Unparseable input is logged and treated as "no expiration" instead of
    failing the whole shortening request.

    Args:
        expires_at (datetime | date | str | None): raw expiration value

    Returns:
        datetime | None: timezone-aware expiration, or None
    """
    if expires_at is None:
        return None

    try:
        return _to_datetime(expires_at)
    except ExpirationParseError as e:
        logger.warning('Error parsing expires_at, ignoring expiration.', extra={'expiresAt': repr(expires_at), 'error': str(e)})
        return None


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
