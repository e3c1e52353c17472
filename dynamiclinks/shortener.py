"""Orchestrate synchronous and asynchronous URL shortening

Synchronous path (`Shortener.shorten`):
    - Step 1: Leniently parse the optional expiration
    - Step 2: Generate a shortcode with the configured strategy
    - Step 3: Store the mapping (create for growing strategies,
              find-or-create for deterministic ones)
    - Step 4: Return <scheme>://<hostname>/<shortcode>

Asynchronous path (`Shortener.shorten_async`):
    - Step 1: Compute the (client, url) lock key
    - Step 2: Leniently parse the optional expiration
    - Step 3: Under the lock, generate a shortcode and queue its persistence
    - Step 4: If the lock is held, do nothing (an in-flight request covers the caller)

Only expiration parsing is lenient. Every other failure is logged and
re-raised unchanged, so the caller decides the user-visible response.

Example:
    >>> from dynamiclinks.models import Client
    >>> from dynamiclinks.shortener import Shortener
    >>> shortener = Shortener.from_configuration()
    >>> client = Client(id='42', scheme='https', hostname='dl.example')
    >>> shortener.shorten(client, 'https://example.com/a')
    'https://dl.example/Kx3Vb'
"""

import logging
from typing import Any, Optional

import redis

from dynamiclinks.models import Client
from dynamiclinks.exceptions import MissingAsyncWorkerError
from dynamiclinks.dao.base import ShortenedURLBaseDAO
from dynamiclinks.dao.redis import ShortenedURLRedisDAO
from dynamiclinks.jobs.base import BaseAsyncWorker
from dynamiclinks.jobs.redis_queue_worker import RedisQueueWorker
from dynamiclinks.jobs.shorten_url_job import ShortenURLJob
from dynamiclinks.locker.base import BaseLocker
from dynamiclinks.locker.redis_locker import RedisLocker
from dynamiclinks.strategies.base import BaseStrategy
from dynamiclinks.strategy_factory import StrategyFactory
from dynamiclinks.utils.config import Configuration, get_configuration
from dynamiclinks.utils.helpers import build_short_url, parse_expires_at


logger = logging.getLogger(__name__)


class Shortener:
    """Shorten URLs for clients through a strategy, a store, a locker and a queue.

    Attributes:
        strategy (BaseStrategy):
            Shortcode generation strategy.
        storage (ShortenedURLBaseDAO):
            Persistent client -> shortcode mapping store.
        locker (BaseLocker):
            Best-effort dedup of async requests.
        async_worker (BaseAsyncWorker | None):
            Queue for deferred persistence. Required by `shorten_async()` only.
    """

    def __init__(
        self,
        strategy: BaseStrategy,
        storage: ShortenedURLBaseDAO,
        locker: BaseLocker,
        async_worker: Optional[BaseAsyncWorker] = None,
    ):
        self.strategy = strategy
        self.storage = storage
        self.locker = locker
        self.async_worker = async_worker

    @classmethod
    def from_configuration(cls, configuration: Optional[Configuration] = None, redis_client: Optional[redis.Redis] = None) -> 'Shortener':
        """Wire a shortener with the Redis-backed collaborators

        Args:
            configuration (Optional[Configuration]):
                Defaults to `get_configuration()` (AppConfig or environment).
            redis_client (Optional[redis.Redis]):
                Client shared by all collaborators. If None, one is created
                from `configuration.redis`.

        Raises:
            UnsupportedStrategyError:
                If the configured strategy is unknown.
            DataStoreError:
                If Redis is unreachable.
        """
        configuration = configuration if configuration is not None else get_configuration()
        storage = ShortenedURLRedisDAO(redis_client=redis_client, prefix=configuration.prefix, **configuration.redis_kwargs)

        # Share the storage's client with every other collaborator
        redis_kwargs: dict[str, Any] = {'redis_client': storage.redis, 'prefix': configuration.prefix}
        return cls(
            strategy=StrategyFactory(configuration, redis_client=storage.redis).get_strategy(),
            storage=storage,
            locker=RedisLocker(ttl=configuration.lock_ttl, **redis_kwargs),
            async_worker=RedisQueueWorker(**redis_kwargs),
        )

    def job(self) -> ShortenURLJob:
        """Build the job persisting what `shorten_async()` queued, with the same collaborators"""
        return ShortenURLJob(strategy=self.strategy, storage=self.storage, locker=self.locker)

    def shorten(self, client: Client, url: str, expires_at: Any = None) -> str:
        """Shorten a URL and store the mapping right away

        Args:
            client (Client):
                The client that owns the URL.
            url (str):
                The URL to be shortened.
            expires_at (datetime | date | str | None):
                Optional expiration. Unparseable values mean "no expiration".

        Returns:
            str: the full short URL, e.g. 'https://dl.example/ab12cd'

        Raises:
            GenerationError, StorageError, ...:
                Logged and re-raised unchanged.
        """
        try:
            parsed_expires_at = parse_expires_at(expires_at)
            shortcode = self.strategy.shorten(url)

            if self.strategy.always_growing():
                self.storage.create(client, url, shortcode, parsed_expires_at)
            else:
                self.storage.find_or_create(client, shortcode, url, parsed_expires_at)
        except Exception as e:
            logger.error(
                'Error shortening URL.',
                extra={'clientId': client.id, 'strategy': self.strategy.name, 'error': str(e), 'errorType': type(e).__name__},
            )
            raise

        logger.debug('Shortened URL.', extra={'clientId': client.id, 'shortcode': shortcode})
        return build_short_url(client, shortcode)

    def shorten_async(self, client: Client, url: str, expires_at: Any = None) -> bool:
        """Shorten a URL and queue persistence of the mapping

        Lock acquisition strictly precedes code generation, which strictly
        precedes the enqueue. The lock is released by the deferred job (or
        expires after the locker's TTL).

        Args:
            client (Client):
                The client that owns the URL.
            url (str):
                The URL to be shortened.
            expires_at (datetime | date | str | None):
                Optional expiration. Unparseable values mean "no expiration".

        Returns:
            bool: True if a job was queued, False if an in-flight request
                  for the same (client, url) already holds the lock.

        Raises:
            MissingAsyncWorkerError:
                If the shortener has no async worker.
            GenerationError, EnqueueError, DataStoreError, ...:
                Logged and re-raised unchanged.
        """
        try:
            if self.async_worker is None:
                raise MissingAsyncWorkerError('Asynchronous shortening requires an async worker.')

            lock_key = self.locker.generate_lock_key(client, url)
            parsed_expires_at = parse_expires_at(expires_at)

            def generate_and_enqueue() -> None:
                shortcode = self.strategy.shorten(url)
                self.async_worker.perform_later(client, url, shortcode, lock_key, parsed_expires_at)

            enqueued = self.locker.lock_if_absent(lock_key, generate_and_enqueue)
        except Exception as e:
            logger.error(
                'Error shortening URL asynchronously.',
                extra={'clientId': client.id, 'strategy': self.strategy.name, 'error': str(e), 'errorType': type(e).__name__},
            )
            raise

        if not enqueued:
            logger.debug('Shortening already in progress, skipping.', extra={'clientId': client.id, 'lockKey': lock_key})
        return enqueued
