import functools
from collections.abc import Callable

from dynamiclinks.constants import SHORTEN_URL_QUEUE


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for short links, locks, counters and queues.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "dynamiclinks:prod" or "dynamiclinks:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_url_key(self, client_id: str, shortcode: str) -> str:
        return f'clients:{client_id}:links:{shortcode}:url'

    @prefix_key
    def counter_key(self) -> str:
        return 'links:counter'

    @prefix_key
    def lock_key(self, lock_key: str) -> str:
        return lock_key

    @prefix_key
    def queue_key(self, queue: str = SHORTEN_URL_QUEUE) -> str:
        return queue
