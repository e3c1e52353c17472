from dynamiclinks.dao.base import ShortenedURLBaseDAO
from dynamiclinks.dao.redis import ShortenedURLRedisDAO


__all__ = [
    'ShortenedURLBaseDAO',
    'ShortenedURLRedisDAO',
]
