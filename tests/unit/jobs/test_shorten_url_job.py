"""Unit tests for ShortenURLJob

Test coverage includes:

1. Persistence
   - Deterministic strategies find-or-create, growing ones create.
   - Expirations are forwarded to the store.

2. Lock release
   - The lock is released after success and after failure.
   - Storage failures are logged and re-raised.
"""

import logging
from datetime import datetime, UTC

import pytest

from dynamiclinks.dao.exceptions import ShortenedURLAlreadyExistsError
from dynamiclinks.jobs import ShortenURLJob
from dynamiclinks.locker import InMemoryLocker
from tests.unit.fakes import InMemoryShortenedURLDAO, StaticStrategy


@pytest.fixture
def storage():
    return InMemoryShortenedURLDAO()


@pytest.fixture
def locker():
    return InMemoryLocker()


@pytest.fixture
def lock_key(locker, client):
    key = locker.generate_lock_key(client, 'https://example.com/a')
    locker.acquire(key, 60)
    return key


# -------------------------------
# 1. Persistence
# -------------------------------


def test_perform_with_deterministic_strategy(storage, locker, client, lock_key):
    job = ShortenURLJob(strategy=StaticStrategy(), storage=storage, locker=locker)

    first = job.perform(client, 'https://example.com/a', 'ab12cd', lock_key)
    second = job.perform(client, 'https://example.com/a', 'ab12cd', lock_key)

    assert first == second
    assert len(storage.records) == 1


def test_perform_with_growing_strategy(storage, locker, client, lock_key):
    job = ShortenURLJob(strategy=StaticStrategy(growing=True), storage=storage, locker=locker)
    job.perform(client, 'https://example.com/a', 'ab12cd', lock_key)

    with pytest.raises(ShortenedURLAlreadyExistsError):
        job.perform(client, 'https://example.com/a', 'ab12cd', lock_key)


def test_perform_forwards_expiration(storage, locker, client, lock_key):
    expires_at = datetime(2025, 11, 1, tzinfo=UTC)
    job = ShortenURLJob(strategy=StaticStrategy(), storage=storage, locker=locker)

    short_url = job.perform(client, 'https://example.com/a', 'ab12cd', lock_key, expires_at)

    assert short_url.expires_at == expires_at
    assert storage.get(client, 'ab12cd').expires_at == expires_at


# -------------------------------
# 2. Lock release
# -------------------------------


def test_perform_releases_lock(storage, locker, client, lock_key):
    job = ShortenURLJob(strategy=StaticStrategy(), storage=storage, locker=locker)

    job.perform(client, 'https://example.com/a', 'ab12cd', lock_key)

    assert not locker.locked(lock_key)


def test_perform_releases_lock_on_failure(storage, locker, client, lock_key, caplog):
    job = ShortenURLJob(strategy=StaticStrategy(growing=True), storage=storage, locker=locker)
    storage.create(client, 'https://example.com/other', 'ab12cd')

    with caplog.at_level(logging.ERROR), pytest.raises(ShortenedURLAlreadyExistsError):
        job.perform(client, 'https://example.com/a', 'ab12cd', lock_key)

    assert not locker.locked(lock_key)
    assert 'Error processing shorten URL job.' in caplog.text
    assert any(getattr(record, 'errorType', None) == 'ShortenedURLAlreadyExistsError' for record in caplog.records)
