"""Abstract base class for shortened URL data access objects (DAOs).

This class establishes the storage contract the shortener depends on,
regardless of the underlying storage mechanism (e.g., Redis, PostgreSQL).

Responsibilities:
    - Create client-scoped short code mappings.
    - Provide an idempotent find-or-create keyed by (client, shortcode).
    - Enforce the safe alphabet constraint on shortcodes.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from dynamiclinks.models import Client
        >>> from dynamiclinks.dao.redis import ShortenedURLRedisDAO

        >>> dao = ShortenedURLRedisDAO(...)
        >>> client = Client(id='42', scheme='https', hostname='dl.example')

        >>> dao.create(client, 'https://example.com/blog/article-123', 'a1b2c3')
        ShortenedURLModel(client_id='42', url='https://example.com/blog/article-123', shortcode='a1b2c3', expires_at=None)

        >>> dao.find_or_create(client, 'a1b2c3', 'https://example.com/blog/article-123').shortcode
        'a1b2c3'
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime

from dynamiclinks.constants import SAFE_ALPHABET
from dynamiclinks.models import Client, ShortenedURLModel
from dynamiclinks.dao.exceptions import InvalidShortCodeError


SHORTCODE_PATTERN = re.compile(f'^[{re.escape(SAFE_ALPHABET)}]+$')


class ShortenedURLBaseDAO(ABC):
    """Interface for shortened URL data access objects (DAOs).

    Methods:
        create(client, url, shortcode, expires_at=None) -> ShortenedURLModel:
            Insert a new mapping for (client, shortcode).
            Raises ShortenedURLAlreadyExistsError if the pair already exists.
            Raises InvalidShortCodeError if the shortcode is not SMS-safe.
            Raises DataStoreError on connection or write failure.

        find_or_create(client, shortcode, url, expires_at=None) -> ShortenedURLModel:
            Return the existing mapping for (client, shortcode) or create it.
            Raises InvalidShortCodeError if the shortcode is not SMS-safe.
            Raises DataStoreError on connection or write failure.

        get(client, shortcode) -> ShortenedURLModel:
            Retrieve a mapping by (client, shortcode).
            Raises ShortenedURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations must extend this class and
        implement all abstract methods.
    """

    @staticmethod
    def validate_shortcode(shortcode: str) -> str:
        """Ensure a shortcode only contains SMS-safe characters (0-9, A-Z, a-z)

        Raises:
            InvalidShortCodeError: on any other character or an empty shortcode
        """
        if not SHORTCODE_PATTERN.match(shortcode):
            raise InvalidShortCodeError(
                f"Shortcode '{shortcode}' must contain only alphanumeric characters (0-9, A-Z, a-z) for SMS compatibility."
            )
        return shortcode

    @abstractmethod
    def create(self, client: Client, url: str, shortcode: str, expires_at: datetime | None = None) -> ShortenedURLModel:
        """Insert a new (client, shortcode) -> url mapping.

        Args:
            client (Client):
                Owner of the mapping.

            url (str):
                Original long URL.

            shortcode (str):
                Generated shortcode, unique per client.

            expires_at (datetime | None):
                Optional expiration, after which the mapping is gone.

        Returns:
            ShortenedURLModel: the stored mapping

        Raises:
            ShortenedURLAlreadyExistsError:
                If the client already owns this shortcode.

            InvalidShortCodeError:
                If the shortcode violates the safe alphabet.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_or_create(self, client: Client, shortcode: str, url: str, expires_at: datetime | None = None) -> ShortenedURLModel:
        """Return the mapping for (client, shortcode), creating it when absent.

        Returns:
            ShortenedURLModel: the existing or newly stored mapping

        Raises:
            InvalidShortCodeError:
                If the shortcode violates the safe alphabet.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, client: Client, shortcode: str) -> ShortenedURLModel:
        """Retrieve the mapping for (client, shortcode).

        Raises:
            ShortenedURLNotFoundError:
                If no such mapping exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
