from dynamiclinks.strategies.base import BaseStrategy, base62_encode
from dynamiclinks.strategies.nano_id_strategy import NanoIDStrategy
from dynamiclinks.strategies.digest_strategies import DigestStrategy, MD5Strategy, SHA256Strategy, CRC32Strategy
from dynamiclinks.strategies.redis_counter_strategy import RedisCounterStrategy


__all__ = [
    'BaseStrategy',
    'base62_encode',
    'NanoIDStrategy',
    'DigestStrategy',
    'MD5Strategy',
    'SHA256Strategy',
    'CRC32Strategy',
    'RedisCounterStrategy',
]
