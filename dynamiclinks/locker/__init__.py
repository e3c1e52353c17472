from dynamiclinks.locker.base import BaseLocker
from dynamiclinks.locker.memory_locker import InMemoryLocker
from dynamiclinks.locker.redis_locker import RedisLocker


__all__ = [
    'BaseLocker',
    'InMemoryLocker',
    'RedisLocker',
]
