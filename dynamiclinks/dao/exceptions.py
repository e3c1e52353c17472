"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    StorageError:
        Generic base class for storage-related exceptions.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    ShortenedURLAlreadyExistsError:
        Raised when creating a mapping whose (client, shortcode) pair already exists.

    ShortenedURLNotFoundError:
        Raised when a mapping is not found in the data store.

    InvalidShortCodeError:
        Raised when a shortcode contains characters outside the safe alphabet.

Example:
    >>> from dynamiclinks.dao.exceptions import ShortenedURLNotFoundError
    >>> raise ShortenedURLNotFoundError("Short URL with code 'abc12' not found.")
    Traceback (most recent call last):
        ...
    dynamiclinks.dao.exceptions.ShortenedURLNotFoundError: Short URL with code 'abc12' not found.
"""

from dynamiclinks.exceptions import DynamicLinksError


class StorageError(DynamicLinksError):
    """Generic base class for storage-related exceptions."""

    error_code = 'storage:storage_error'


class DataStoreError(StorageError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'storage:data_store_error'


class ShortenedURLAlreadyExistsError(StorageError):
    """Exception raised when a (client, shortcode) mapping already exists in the data store."""

    error_code = 'storage:shortened_url_already_exists_error'


class ShortenedURLNotFoundError(StorageError):
    """Exception raised when a mapping is not found in the data store."""

    error_code = 'storage:shortened_url_not_found_error'


class InvalidShortCodeError(StorageError):
    """Exception raised when a shortcode violates the safe alphabet constraint."""

    error_code = 'storage:invalid_shortcode_error'
