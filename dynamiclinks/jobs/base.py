from abc import ABC, abstractmethod
from datetime import datetime

from dynamiclinks.models import Client


class BaseAsyncWorker(ABC):
    """Interface for queues performing deferred persistence of short links.

    Delivery and retry semantics belong to the job system behind the
    implementation, not to the shortener.
    """

    @abstractmethod
    def perform_later(self, client: Client, url: str, shortcode: str, lock_key: str, expires_at: datetime | None = None) -> None:
        """Queue persistence of (client, url, shortcode).

        Raises:
            EnqueueError: if the job can't be queued
        """
        pass
