"""Counter-based shortening strategy backed by a global Redis counter

Every call increments `<prefix>:links:counter` and scrambles the new value
into a fixed-length Base62 shortcode. Consecutive calls observe different
counters, so the strategy is always growing, but the output carries no
visible sequential pattern.

Example:
    >>> from dynamiclinks.strategies import RedisCounterStrategy
    >>> strategy = RedisCounterStrategy(redis_host='localhost', prefix='dynamiclinks:dev', salt='my_secret')
    >>> len(strategy.shorten('https://example.com', min_length=7))
    7
"""

import math
from typing import Any

import xxhash

from dynamiclinks.constants import BASE, CodeLength
from dynamiclinks.dao.redis.mixins import RedisClientMixin
from dynamiclinks.dao.redis.helpers import handle_redis_connection_error
from dynamiclinks.strategies.base import BaseStrategy, base62_encode


class RedisCounterStrategy(RedisClientMixin, BaseStrategy):
    """Shorten URLs by permuting a global Redis counter.

    Args:
        salt (str):
            Secret string used to randomize the output space.
            Highly recommended to set a custom salt for security.
        mult (int):
            Multiplicative factor for the permutation.
            Must be coprime with BASE (and therefore with BASE**length).
        min_length (int), max_length (int):
            See BaseStrategy.
        **redis_kwargs:
            Forwarded to RedisClientMixin (redis_client, redis_host, ..., prefix).

    Raises:
        TypeError, ValueError:
            On an invalid salt or multiplicative factor.
        DataStoreError:
            If Redis is unreachable (at construction or when shortening).
    """

    def __init__(
        self,
        salt: str = 'default_salt',
        mult: int = 1315423911,
        min_length: int = CodeLength.MIN,
        max_length: int = CodeLength.MAX,
        **redis_kwargs: Any,
    ):
        if not isinstance(salt, str):
            raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
        if not salt:
            raise ValueError(f'Salt must be a non-empty string (given value: {salt}).')
        if math.gcd(mult, BASE) != 1:
            raise ValueError(f'Multiplicative factor must be coprime with {BASE} (given value: mult={mult}).')

        BaseStrategy.__init__(self, min_length=min_length, max_length=max_length)
        RedisClientMixin.__init__(self, **redis_kwargs)

        self.salt = salt
        self.mult = mult

    @handle_redis_connection_error
    def next_counter(self) -> int:
        return int(self.redis.incr(self.keys.counter_key()))

    def permute(self, counter: int, length: int) -> str:
        """Scramble a counter into a `length`-character Base62 string

        Applies an affine (multiplicative + additive) permutation over the
        modulo space BASE**length, which is a 1:1 mapping as long as
        `counter < BASE**length`. Collisions only occur after the counter wraps
        around; short links are expected to expire before exhaustion.
        """
        modulo_space = BASE**length
        salt_hash = xxhash.xxh64_intdigest(self.salt) % modulo_space
        permuted = (counter * self.mult + salt_hash) % modulo_space
        return self._fit(base62_encode(permuted), length)

    def generate(self, url: str, length: int) -> str:
        return self.permute(self.next_counter(), length)

    def always_growing(self) -> bool:
        return True
