"""Redis list-backed queue for deferred shortening jobs

Producers LPUSH JSON payloads onto `<prefix>:jobs:shorten_url`; consumers
BRPOP them and hand them to a ShortenURLJob:

    {
        "client": {"id": "42", "scheme": "https", "hostname": "dl.example", "name": null},
        "url": "https://example.com/a",
        "shortcode": "ab12cd",
        "lock_key": "lock:shorten_url:42:<url sha256>",
        "expires_at": "2025-11-01T00:00:00+00:00"
    }

Example:
    >>> worker = RedisQueueWorker(redis_client=client, prefix='dynamiclinks:dev')
    >>> worker.perform_later(client, 'https://example.com/a', 'ab12cd', lock_key)
    >>> worker.work(job, burst=True)
    1
"""

import json
import logging
from datetime import datetime
from typing import Any

import redis

from dynamiclinks.models import Client
from dynamiclinks.types import JobPayload
from dynamiclinks.exceptions import EnqueueError
from dynamiclinks.dao.redis.mixins import RedisClientMixin
from dynamiclinks.dao.redis.helpers import handle_redis_connection_error
from dynamiclinks.jobs.base import BaseAsyncWorker
from dynamiclinks.jobs.shorten_url_job import ShortenURLJob


logger = logging.getLogger(__name__)


def encode_payload(client: Client, url: str, shortcode: str, lock_key: str, expires_at: datetime | None) -> str:
    payload: JobPayload = {
        'client': client.to_dict(),
        'url': url,
        'shortcode': shortcode,
        'lock_key': lock_key,
        'expires_at': None if expires_at is None else expires_at.isoformat(),
    }
    return json.dumps(payload)


def decode_payload(raw: str | bytes) -> dict[str, Any]:
    """Turn a queued JSON payload back into ShortenURLJob.perform() arguments

    Raises:
        ValueError: on malformed JSON, missing fields or a bad expiration
    """
    try:
        payload = json.loads(raw)
        expires_at = payload.get('expires_at')
        return {
            'client': Client.from_dict(payload['client']),
            'url': payload['url'],
            'shortcode': payload['shortcode'],
            'lock_key': payload['lock_key'],
            'expires_at': None if expires_at is None else datetime.fromisoformat(expires_at),
        }
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f'Malformed shorten URL job payload: {e}') from e


class RedisQueueWorker(RedisClientMixin, BaseAsyncWorker):
    """Async worker queueing shortening jobs on a Redis list.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client holding the queue.
        keys (RedisKeySchema):
            Key schema helper for the namespaced queue key.
    """

    def perform_later(self, client: Client, url: str, shortcode: str, lock_key: str, expires_at: datetime | None = None) -> None:
        """Queue persistence of (client, url, shortcode)

        Raises:
            EnqueueError: on any Redis failure
        """
        try:
            self.redis.lpush(self.keys.queue_key(), encode_payload(client, url, shortcode, lock_key, expires_at))
        except redis.exceptions.RedisError as e:
            raise EnqueueError(f"Can't enqueue shorten URL job for shortcode '{shortcode}'.") from e

        logger.debug('Enqueued shorten URL job.', extra={'clientId': client.id, 'shortcode': shortcode})

    @handle_redis_connection_error
    def pending(self) -> int:
        return int(self.redis.llen(self.keys.queue_key()))

    @handle_redis_connection_error
    def dequeue(self, timeout: int = 1) -> dict[str, Any] | None:
        """Pop the next job payload, waiting up to `timeout` seconds. None if the queue stayed empty."""
        item = self.redis.brpop([self.keys.queue_key()], timeout=timeout)
        if item is None:
            return None
        _, raw = item
        return decode_payload(raw)

    def work(self, job: ShortenURLJob, max_jobs: int | None = None, timeout: int = 1, burst: bool = False) -> int:
        """Process queued jobs

        A failing job is logged and skipped; retrying it is up to the operator.

        Args:
            job (ShortenURLJob):
                Job performing the persistence.
            max_jobs (int | None):
                Stop after this many jobs (processed or failed). None: no limit.
            timeout (int):
                Seconds to block on an empty queue per poll.
            burst (bool):
                If True, return as soon as the queue is empty.

        Returns:
            int: number of successfully processed jobs

        Raises:
            DataStoreError: if Redis becomes unreachable
        """
        processed = attempted = 0
        while max_jobs is None or attempted < max_jobs:
            try:
                arguments = self.dequeue(timeout=timeout)
            except ValueError as e:
                attempted += 1
                logger.error('Dropping malformed shorten URL job.', extra={'error': str(e)})
                continue

            if arguments is None:
                if burst:
                    break
                continue

            attempted += 1
            try:
                job.perform(**arguments)
            except Exception:
                logger.exception('Shorten URL job failed.', extra={'shortcode': arguments['shortcode']})
            else:
                processed += 1

        return processed
