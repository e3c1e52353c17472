"""Best-effort locking used to dedup asynchronous shortening requests.

A lock is keyed by a deterministic fingerprint of (client, url). While it is
held, further async requests for the same pair are skipped: the caller is
covered by the in-flight request. This is an at-most-once-attempt dedup,
not a correctness-critical mutex. If a lock expires before its guarded job
runs, a duplicate run is possible.

State machine of a single key:

    absent --lock_if_absent()--> locked --unlock() / TTL expiry--> absent

Re-entrant acquisition is not supported: a second `lock_if_absent()` on a
held key simply reports "already held".
"""

import hashlib
import logging
from abc import ABC, abstractmethod

from dynamiclinks.constants import TTL
from dynamiclinks.models import Client
from dynamiclinks.types import LockAction


LOCK_KEY_NAMESPACE = 'lock:shorten_url'

logger = logging.getLogger(__name__)


class BaseLocker(ABC):
    """Interface for lockers.

    Attributes:
        ttl (int):
            Default lock lifetime in seconds (safety net against crashed holders).

    Methods:
        generate_lock_key(client, url) -> str:
            Deterministic fingerprint of (client, url).

        lock_if_absent(key, action, ttl=None, release=False) -> bool:
            Acquire `key` and run `action` if the key is absent.

        unlock(key) -> bool:
            Release `key`. True if it was held.

        locked(key) -> bool:
            True if `key` is currently held.
    """

    def __init__(self, ttl: int = TTL.LOCK):
        if ttl < 1:
            raise ValueError(f'Lock TTL must be a positive number of seconds (given value: {ttl}).')
        self.ttl = ttl

    def generate_lock_key(self, client: Client, url: str) -> str:
        """Return the lock key for a (client, url) pair

        Example:
            >>> locker.generate_lock_key(Client(id='42', scheme='https', hostname='dl.example'), 'https://example.com')
            'lock:shorten_url:42:100680ad546ce6a577f42f52df33b4cfdca756859e664b8d7de329b150d09ce9'
        """
        fingerprint = hashlib.sha256(url.encode('utf-8', 'surrogatepass')).hexdigest()
        return f'{LOCK_KEY_NAMESPACE}:{client.id}:{fingerprint}'

    def lock_if_absent(self, key: str, action: LockAction, ttl: int | None = None, release: bool = False) -> bool:
        """Run `action` exactly once if `key` can be acquired

        Args:
            key (str):
                Lock key, see `generate_lock_key()`.
            action (Callable[[], Any]):
                Guarded action.
            ttl (int | None):
                Lock lifetime in seconds. Defaults to `self.ttl`.
            release (bool):
                If True, release the lock right after `action` completes.
                Otherwise the lock is left for the deferred job (or the TTL)
                to release.

        Returns:
            bool: True if the lock was acquired and `action` ran, False if
                  the key was already held (action skipped).

        Raises:
            Whatever `action` raises (the lock is released first; a failing
            release is logged and left to the TTL), or a backend error if
            the lock can't be acquired.
        """
        if not self.acquire(key, self.ttl if ttl is None else ttl):
            return False

        try:
            action()
        except Exception:
            self._release_after_failure(key)
            raise

        if release:
            self.unlock(key)
        return True

    def _release_after_failure(self, key: str) -> None:
        try:
            self.unlock(key)
        except Exception as e:
            # The action's error is the one callers act on; the TTL frees the key
            logger.error(
                'Error releasing lock after failed action.',
                extra={'lockKey': key, 'error': str(e), 'errorType': type(e).__name__},
            )

    @abstractmethod
    def acquire(self, key: str, ttl: int) -> bool:
        """Atomically lock `key` for `ttl` seconds if absent. True on success."""
        pass

    @abstractmethod
    def unlock(self, key: str) -> bool:
        pass

    @abstractmethod
    def locked(self, key: str) -> bool:
        pass
