from dynamiclinks.jobs.base import BaseAsyncWorker
from dynamiclinks.jobs.shorten_url_job import ShortenURLJob
from dynamiclinks.jobs.redis_queue_worker import RedisQueueWorker


__all__ = [
    'BaseAsyncWorker',
    'ShortenURLJob',
    'RedisQueueWorker',
]
