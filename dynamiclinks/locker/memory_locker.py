import time
import threading
from collections.abc import Callable

from dynamiclinks.constants import TTL
from dynamiclinks.locker.base import BaseLocker


class InMemoryLocker(BaseLocker):
    """Process-local locker for tests and single-process deployments.

    Keys map to their expiry deadline on a monotonic clock. The clock can be
    injected so tests can drive expiry deterministically. Check-and-set runs
    under a mutex, the guarded action does not.
    """

    def __init__(self, ttl: int = TTL.LOCK, clock: Callable[[], float] = time.monotonic):
        super().__init__(ttl=ttl)
        self._clock = clock
        self._deadlines: dict[str, float] = {}
        self._mutex = threading.Lock()

    def _held(self, key: str) -> bool:
        deadline = self._deadlines.get(key)
        if deadline is None:
            return False
        if deadline <= self._clock():
            del self._deadlines[key]
            return False
        return True

    def _prune(self) -> None:
        now = self._clock()
        for key in [key for key, deadline in self._deadlines.items() if deadline <= now]:
            del self._deadlines[key]

    def acquire(self, key: str, ttl: int) -> bool:
        with self._mutex:
            # Every expired key goes, including ones never looked up again
            self._prune()
            if key in self._deadlines:
                return False
            self._deadlines[key] = self._clock() + ttl
            return True

    def unlock(self, key: str) -> bool:
        with self._mutex:
            held = self._held(key)
            self._deadlines.pop(key, None)
            return held

    def locked(self, key: str) -> bool:
        with self._mutex:
            return self._held(key)
