from dynamiclinks.dao.redis.redis_key_schema import RedisKeySchema
from dynamiclinks.dao.redis.mixins import RedisClientMixin
from dynamiclinks.dao.redis.shortened_url_redis_dao import ShortenedURLRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortenedURLRedisDAO',
]
