"""Unit tests for RedisLocker

Test coverage includes:

1. Acquisition
   - SET NX EX on the namespaced lock key, action run once.
   - Held lock skips the action.

2. Release
   - DEL on failure of the action, or when asked to release.
   - locked() inspects the key with EXISTS.

3. Error handling
   - Redis connectivity issues raise DataStoreError.
   - A release failing after the action failed keeps the action's error.
   - Invalid parameter types raise type errors.
"""

import logging
from unittest.mock import MagicMock

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from dynamiclinks.dao.exceptions import DataStoreError
from dynamiclinks.locker import RedisLocker


@pytest.fixture
def locker(redis_client, app_prefix):
    return RedisLocker(ttl=30, redis_client=redis_client, prefix=app_prefix)


@pytest.fixture
def lock_key(locker, client):
    return locker.generate_lock_key(client, 'https://example.com/a')


# -------------------------------
# 1. Acquisition
# -------------------------------


def test_lock_if_absent_acquires_and_runs_action(locker, redis_client, lock_key):
    redis_client.set.return_value = True
    action = MagicMock()

    assert locker.lock_if_absent(lock_key, action) is True

    action.assert_called_once_with()
    redis_client.set.assert_called_once_with(f'testapp:test:{lock_key}', 1, nx=True, ex=30)
    redis_client.delete.assert_not_called()


def test_lock_if_absent_with_custom_ttl(locker, redis_client, lock_key):
    redis_client.set.return_value = True

    locker.lock_if_absent(lock_key, MagicMock(), ttl=5)

    redis_client.set.assert_called_once_with(f'testapp:test:{lock_key}', 1, nx=True, ex=5)


def test_lock_if_absent_skips_action_when_held(locker, redis_client, lock_key):
    redis_client.set.return_value = None
    action = MagicMock()

    assert locker.lock_if_absent(lock_key, action) is False
    action.assert_not_called()


def test_lock_without_prefix(redis_client, lock_key):
    redis_client.set.return_value = True
    locker = RedisLocker(redis_client=redis_client)

    locker.lock_if_absent(lock_key, MagicMock())

    redis_client.set.assert_called_once_with(lock_key, 1, nx=True, ex=60)


# -------------------------------
# 2. Release
# -------------------------------


def test_lock_is_released_when_action_raises(locker, redis_client, lock_key):
    redis_client.set.return_value = True
    action = MagicMock(side_effect=RuntimeError('enqueue failed'))

    with pytest.raises(RuntimeError, match='enqueue failed'):
        locker.lock_if_absent(lock_key, action)

    redis_client.delete.assert_called_once_with(f'testapp:test:{lock_key}')


def test_lock_if_absent_with_release(locker, redis_client, lock_key):
    redis_client.set.return_value = True

    locker.lock_if_absent(lock_key, MagicMock(), release=True)

    redis_client.delete.assert_called_once_with(f'testapp:test:{lock_key}')


def test_unlock(locker, redis_client, lock_key):
    redis_client.delete.return_value = 1
    assert locker.unlock(lock_key) is True

    redis_client.delete.return_value = 0
    assert locker.unlock(lock_key) is False


def test_locked(locker, redis_client, lock_key):
    redis_client.exists.return_value = 1
    assert locker.locked(lock_key) is True
    redis_client.exists.assert_called_with(f'testapp:test:{lock_key}')

    redis_client.exists.return_value = 0
    assert locker.locked(lock_key) is False


# -------------------------------
# 3. Error handling
# -------------------------------


def test_redis_connection_error_raises_data_store_error(locker, redis_client, lock_key):
    redis_client.set.side_effect = redis.exceptions.ConnectionError('Connection error')
    redis_client.connection_pool = MagicMock()
    redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    action = MagicMock()

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        locker.lock_if_absent(lock_key, action)

    action.assert_not_called()


def test_unlock_with_invalid_type(locker):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        locker.unlock(12345)


def test_release_failure_keeps_action_error(locker, redis_client, lock_key, caplog):
    redis_client.set.return_value = True
    redis_client.delete.side_effect = redis.exceptions.ConnectionError('Connection error')
    action = MagicMock(side_effect=RuntimeError('enqueue failed'))

    with caplog.at_level(logging.ERROR), pytest.raises(RuntimeError, match='enqueue failed'):
        locker.lock_if_absent(lock_key, action)

    record = next(record for record in caplog.records if record.getMessage() == 'Error releasing lock after failed action.')
    assert record.errorType == 'DataStoreError'
