"""Multi-tenant URL shortening: pluggable shortcode strategies and async dedup

`shorten_url()` loads the active configuration once per process and keeps
one shortener (one Redis connection pool) per distinct configuration.
Call `reset_defaults()` to pick up a new AppConfig deployment.

Example:
    >>> import dynamiclinks
    >>> from dynamiclinks.models import Client
    >>> client = Client(id='42', scheme='https', hostname='dl.example')
    >>> dynamiclinks.shorten_url('https://example.com/a', client)
    'https://dl.example/Kx3Vb'
"""

import functools
from typing import Any, Optional

from dynamiclinks.models import Client, ShortenedURLModel
from dynamiclinks.shortener import Shortener
from dynamiclinks.strategy_factory import StrategyFactory
from dynamiclinks.utils.config import Configuration, get_configuration


__version__ = '0.1.0'


@functools.cache
def default_configuration() -> Configuration:
    """Active configuration, loaded once per process"""
    return get_configuration()


@functools.cache
def shortener_for(configuration: Configuration) -> Shortener:
    """Shortener wired from `configuration`, built once per distinct configuration"""
    return Shortener.from_configuration(configuration)


def reset_defaults() -> None:
    """Forget the cached configuration and shorteners"""
    default_configuration.cache_clear()
    shortener_for.cache_clear()


def shorten_url(
    url: str,
    client: Client,
    expires_at: Any = None,
    async_processing: Optional[bool] = None,
    configuration: Optional[Configuration] = None,
    shortener: Optional[Shortener] = None,
) -> str | None:
    """Shorten a URL for a client with the configured strategy

    Args:
        url (str):
            The URL to be shortened.
        client (Client):
            The client that owns the URL.
        expires_at (datetime | date | str | None):
            Optional expiration.
        async_processing (Optional[bool]):
            Use the locked async path. Defaults to `configuration.async_processing`.
        configuration (Optional[Configuration]):
            Defaults to `default_configuration()`.
        shortener (Optional[Shortener]):
            Pre-built shortener. Defaults to the cached one for the configuration.

    Returns:
        str | None: the full short URL, or None in async mode (the shortcode
                    is persisted later by the queued job)
    """
    configuration = configuration if configuration is not None else default_configuration()
    shortener = shortener if shortener is not None else shortener_for(configuration)
    async_processing = configuration.async_processing if async_processing is None else async_processing

    if async_processing:
        shortener.shorten_async(client, url, expires_at=expires_at)
        return None
    return shortener.shorten(client, url, expires_at=expires_at)


__all__ = [
    'Client',
    'ShortenedURLModel',
    'Configuration',
    'Shortener',
    'StrategyFactory',
    'default_configuration',
    'reset_defaults',
    'shorten_url',
    'shortener_for',
]
