"""Redis-backed locker

Locks are plain keys written with SET NX EX, so acquisition is atomic and
every lock expires on its own even if its holder crashes:

    SET <prefix>:lock:shorten_url:<client id>:<url sha256> 1 NX EX <ttl>

Example:
    >>> from dynamiclinks.locker import RedisLocker
    >>> locker = RedisLocker(prefix='dynamiclinks:dev', ttl=60)
    >>> key = locker.generate_lock_key(client, 'https://example.com')
    >>> locker.lock_if_absent(key, lambda: print('enqueue'))
    enqueue
    True
    >>> locker.lock_if_absent(key, lambda: print('enqueue'))
    False
"""

import logging
from typing import Any

from beartype import beartype

from dynamiclinks.constants import TTL
from dynamiclinks.dao.redis.mixins import RedisClientMixin
from dynamiclinks.dao.redis.helpers import handle_redis_connection_error
from dynamiclinks.locker.base import BaseLocker


logger = logging.getLogger(__name__)


class RedisLocker(RedisClientMixin, BaseLocker):
    """Locker backed by Redis keys with expiry.

    Args:
        ttl (int):
            Default lock lifetime in seconds.
        **redis_kwargs:
            Forwarded to RedisClientMixin (redis_client, redis_host, ..., prefix).

    Raises:
        DataStoreError:
            If Redis is unreachable.
    """

    def __init__(self, ttl: int = TTL.LOCK, **redis_kwargs: Any):
        BaseLocker.__init__(self, ttl=ttl)
        RedisClientMixin.__init__(self, **redis_kwargs)

    @handle_redis_connection_error
    @beartype
    def acquire(self, key: str, ttl: int) -> bool:
        acquired = bool(self.redis.set(self.keys.lock_key(key), 1, nx=True, ex=ttl))
        if not acquired:
            logger.debug('Lock already held.', extra={'lockKey': key})
        return acquired

    @handle_redis_connection_error
    @beartype
    def unlock(self, key: str) -> bool:
        return bool(self.redis.delete(self.keys.lock_key(key)))

    @handle_redis_connection_error
    @beartype
    def locked(self, key: str) -> bool:
        return bool(self.redis.exists(self.keys.lock_key(key)))
