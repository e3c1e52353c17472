"""Translate redis-py failures into storage errors

Functions:
    connection_label(client) -> str
        Render a client's pool target as host:port/db for error messages
    handle_redis_connection_error(method) -> method
        Decorator: Re-raise connectivity failures as DataStoreError
"""

import functools
from typing import Any
from collections.abc import Callable

import redis

from dynamiclinks.dao.exceptions import DataStoreError


__all__ = ['connection_label', 'handle_redis_connection_error']

# Failures meaning "Redis can't be reached", as opposed to command errors
UNREACHABLE_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def connection_label(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Re-raise Redis connectivity failures of a collaborator method as DataStoreError

    The decorated method must belong to an object exposing its client as
    `self.redis` (see RedisClientMixin). Command errors such as WRONGTYPE
    propagate unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def locked(self, key):
        ...     return self.redis.exists(key)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except UNREACHABLE_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}.") from e

    return wrapper
