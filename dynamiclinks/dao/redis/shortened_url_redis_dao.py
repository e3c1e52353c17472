"""Data Access Object (DAO) implementation for client-scoped short links in Redis

Responsibilities:
    - Create client-scoped short code mappings with an optional expiration;
    - Idempotently find-or-create a mapping keyed by (client, shortcode);
    - Retrieve mappings together with their remaining lifetime;
    - Raise appropriate DAO exceptions.

Every mapping is a single string key holding the original URL:

    <prefix>:clients:<client id>:links:<shortcode>:url -> <original url>

written with SET NX (so uniqueness per client is enforced by Redis itself)
and EXAT when an expiration is given.

Classes:
    ShortenedURLRedisDAO:
        DAO for storing and retrieving ShortenedURLModel in a Redis datastore.

Example:
    >>> from dynamiclinks.models import Client
    >>> from dynamiclinks.dao.redis import ShortenedURLRedisDAO

    >>> dao = ShortenedURLRedisDAO(prefix="app:dev")
    >>> client = Client(id='42', scheme='https', hostname='dl.example')

    >>> dao.create(client, 'https://example.com/page', 'abc123')
    ShortenedURLModel(client_id='42', url='https://example.com/page', shortcode='abc123', expires_at=None)

    >>> dao.get(client, 'abc123').url
    'https://example.com/page'
"""

import logging
from datetime import datetime, timedelta, UTC

from beartype import beartype

from dynamiclinks.models import Client, ShortenedURLModel
from dynamiclinks.dao.base import ShortenedURLBaseDAO
from dynamiclinks.dao.redis.mixins import RedisClientMixin
from dynamiclinks.dao.redis.helpers import handle_redis_connection_error
from dynamiclinks.dao.exceptions import DataStoreError, ShortenedURLAlreadyExistsError, ShortenedURLNotFoundError


logger = logging.getLogger(__name__)


class ShortenedURLRedisDAO(RedisClientMixin, ShortenedURLBaseDAO):
    """Redis-based Data Access Object (DAO) for client-scoped short URL mappings

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
    """

    @staticmethod
    def _expire_at(expires_at: datetime | None) -> int | None:
        return None if expires_at is None else int(expires_at.timestamp())

    def _read(self, client: Client, shortcode: str) -> ShortenedURLModel | None:
        link_url_key = self.keys.link_url_key(client.id, shortcode)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(link_url_key)
            pipe.ttl(link_url_key)
            url, ttl = pipe.execute()

        if url is None:
            return None

        # TTL of -1 means the key never expires
        expires_at = datetime.now(UTC) + timedelta(seconds=ttl) if ttl is not None and ttl >= 0 else None
        return ShortenedURLModel(client_id=client.id, url=url, shortcode=shortcode, expires_at=expires_at)

    def _insert(self, client: Client, url: str, shortcode: str, expires_at: datetime | None) -> bool:
        link_url_key = self.keys.link_url_key(client.id, shortcode)
        return bool(self.redis.set(link_url_key, url, nx=True, exat=self._expire_at(expires_at)))

    @handle_redis_connection_error
    @beartype
    def create(self, client: Client, url: str, shortcode: str, expires_at: datetime | None = None) -> ShortenedURLModel:
        """Insert a (client, shortcode) -> url mapping into Redis

        Raises:
            ShortenedURLAlreadyExistsError:
                If the client already owns this shortcode.
            InvalidShortCodeError:
                If the shortcode violates the safe alphabet.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        self.validate_shortcode(shortcode)

        if not self._insert(client, url, shortcode, expires_at):
            raise ShortenedURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists for client '{client.id}'.")

        logger.debug('Created short URL.', extra={'clientId': client.id, 'shortcode': shortcode})
        return ShortenedURLModel(client_id=client.id, url=url, shortcode=shortcode, expires_at=expires_at)

    @handle_redis_connection_error
    @beartype
    def find_or_create(self, client: Client, shortcode: str, url: str, expires_at: datetime | None = None) -> ShortenedURLModel:
        """Return the stored mapping for (client, shortcode), creating it if absent

        NOTE: an existing mapping is returned unchanged, even if it points to
              another URL (a digest collision). The collision is logged.
        NOTE: the existing key may expire between the failed SET NX and the GET.
              In that case the insertion is attempted once more.

        Raises:
            InvalidShortCodeError:
                If the shortcode violates the safe alphabet.
            DataStoreError:
                If a Redis connection issue occurs or the mapping keeps vanishing.
        """
        self.validate_shortcode(shortcode)

        for _ in range(2):
            if self._insert(client, url, shortcode, expires_at):
                logger.debug('Created short URL.', extra={'clientId': client.id, 'shortcode': shortcode})
                return ShortenedURLModel(client_id=client.id, url=url, shortcode=shortcode, expires_at=expires_at)

            existing = self._read(client, shortcode)
            if existing is not None:
                if existing.url != url:
                    logger.warning(
                        'Shortcode collision: existing short URL points to another URL.',
                        extra={'clientId': client.id, 'shortcode': shortcode},
                    )
                return existing

        raise DataStoreError(f"Short URL with code '{shortcode}' could neither be found nor created for client '{client.id}'.")

    @handle_redis_connection_error
    @beartype
    def get(self, client: Client, shortcode: str) -> ShortenedURLModel:
        """Retrieve a stored mapping by (client, shortcode)

        Raises:
            ShortenedURLNotFoundError:
                If the mapping does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        short_url = self._read(client, shortcode)
        if short_url is None:
            raise ShortenedURLNotFoundError(f"Short URL with code '{shortcode}' not found for client '{client.id}'.")
        return short_url
