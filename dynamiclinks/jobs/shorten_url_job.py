"""Deferred persistence of asynchronously shortened URLs

The shortener generates a shortcode while holding the (client, url) lock and
queues this job. The job stores the mapping the same way the synchronous
path does and then releases the lock, so the next async request for the
pair is processed again.

Example:
    >>> job = ShortenURLJob(strategy=strategy, storage=dao, locker=locker)
    >>> job.perform(client, 'https://example.com', 'ab12cd', lock_key)
    ShortenedURLModel(client_id='42', url='https://example.com', shortcode='ab12cd', expires_at=None)
"""

import logging
from datetime import datetime

from dynamiclinks.models import Client, ShortenedURLModel
from dynamiclinks.dao.base import ShortenedURLBaseDAO
from dynamiclinks.locker.base import BaseLocker
from dynamiclinks.strategies.base import BaseStrategy


logger = logging.getLogger(__name__)


class ShortenURLJob:
    def __init__(self, strategy: BaseStrategy, storage: ShortenedURLBaseDAO, locker: BaseLocker):
        self.strategy = strategy
        self.storage = storage
        self.locker = locker

    def perform(self, client: Client, url: str, shortcode: str, lock_key: str, expires_at: datetime | None = None) -> ShortenedURLModel:
        """Persist a shortcode generated by `Shortener.shorten_async()`

        Growing strategies always create a new mapping, deterministic ones
        find-or-create it. The lock is released whatever the outcome.

        Raises:
            StorageError: on any storage failure (logged, then re-raised)
        """
        try:
            if self.strategy.always_growing():
                short_url = self.storage.create(client, url, shortcode, expires_at)
            else:
                short_url = self.storage.find_or_create(client, shortcode, url, expires_at)
        except Exception as e:
            logger.error(
                'Error processing shorten URL job.',
                extra={'clientId': client.id, 'shortcode': shortcode, 'error': str(e), 'errorType': type(e).__name__},
            )
            raise
        finally:
            self.locker.unlock(lock_key)

        logger.info('Processed shorten URL job.', extra={'clientId': client.id, 'shortcode': shortcode})
        return short_url
