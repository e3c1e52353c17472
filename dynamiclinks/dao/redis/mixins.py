"""Shared Redis plumbing for the storage, locker, queue and counter collaborators

A Redis-backed collaborator either reuses an injected client, so that one
connection pool serves a whole Shortener, or builds its own from `redis_*`
keyword arguments (the shape of `Configuration.redis_kwargs`). Either way
the client is PINGed once on construction.

Example:
    >>> class RedisLocker(RedisClientMixin, BaseLocker):
    ...     pass
    ...
    >>> locker = RedisLocker(redis_host='redis.internal', prefix='dynamiclinks:prod')
    >>> locker.keys.lock_key('lock:shorten_url:42:ff')
    'dynamiclinks:prod:lock:shorten_url:42:ff'
"""

from typing import Any, Optional

import redis

from dynamiclinks.dao.exceptions import DataStoreError
from dynamiclinks.dao.redis.helpers import UNREACHABLE_ERRORS, connection_label
from dynamiclinks.dao.redis.redis_key_schema import RedisKeySchema


def connect(
    redis_host: str = 'localhost',
    redis_port: int | str = 6379,
    redis_db: int | str = 0,
    redis_decode_responses: bool = True,
    redis_username: Optional[str] = None,
    redis_password: Optional[str] = None,
) -> redis.Redis:
    """Build a client from `redis_*` settings. Ports and db indexes may come in as strings (environment)."""
    return redis.Redis(
        host=redis_host,
        port=int(redis_port),
        db=int(redis_db),
        decode_responses=redis_decode_responses,
        username=redis_username,
        password=redis_password,
    )


class RedisClientMixin:
    """Give a collaborator a healthy Redis client and a namespaced key schema.

    Attributes:
        redis (redis.Redis):
            Client used by the collaborator's commands.
        keys (RedisKeySchema):
            Key schema namespaced with `prefix`.

    Args:
        redis_client (Optional[redis.Redis]):
            Client to share. If None, one is built by `connect(**redis_kwargs)`.
        prefix (Optional[str]):
            Namespace for every key, e.g. 'dynamiclinks:prod'.
        **redis_kwargs:
            redis_host, redis_port, redis_db, redis_decode_responses,
            redis_username, redis_password.

    Raises:
        DataStoreError:
            If Redis does not answer the initial PING.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, prefix: Optional[str] = None, **redis_kwargs: Any):
        self.redis = redis_client if redis_client is not None else connect(**redis_kwargs)
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis. Returns False when unreachable, unless `raise_error` asks for a DataStoreError."""
        try:
            self.redis.ping()
        except UNREACHABLE_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}. Check the provided configuration parameters.") from e
        return True
