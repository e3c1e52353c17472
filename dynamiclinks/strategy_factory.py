"""Resolve a configured strategy identifier to a shortening strategy

The registry is static. Instances are built from the Configuration the
factory was constructed with and cached per identifier, since strategies
hold no per-request state.

Example:
    >>> from dynamiclinks.utils.config import Configuration
    >>> from dynamiclinks.strategy_factory import StrategyFactory
    >>> factory = StrategyFactory(Configuration(shortening_strategy='nano_id'))
    >>> factory.get_strategy()
    <dynamiclinks.strategies.nano_id_strategy.NanoIDStrategy object at ...>
    >>> factory.get_strategy('sha1')
    Traceback (most recent call last):
        ...
    dynamiclinks.exceptions.UnsupportedStrategyError: Unsupported shortening strategy: 'sha1'.
"""

import logging
import threading
from typing import Optional

import redis

from dynamiclinks.constants import StrategyName
from dynamiclinks.exceptions import UnsupportedStrategyError
from dynamiclinks.strategies import BaseStrategy, NanoIDStrategy, MD5Strategy, SHA256Strategy, CRC32Strategy, RedisCounterStrategy
from dynamiclinks.utils.config import Configuration


logger = logging.getLogger(__name__)


class StrategyFactory:
    """Build and cache shortening strategies by identifier.

    Attributes:
        REGISTRY (dict[StrategyName, type[BaseStrategy]]):
            Known identifiers and their strategy classes.
        configuration (Configuration):
            Source of the default identifier and length bounds.

    Args:
        configuration (Optional[Configuration]):
            Defaults to Configuration() (md5, lengths 5..12).
        redis_client (Optional[redis.Redis]):
            Client shared with the Redis counter strategy. If None, the
            strategy builds one from `configuration.redis`.
    """

    REGISTRY: dict[StrategyName, type[BaseStrategy]] = {
        StrategyName.NANO_ID: NanoIDStrategy,
        StrategyName.MD5: MD5Strategy,
        StrategyName.SHA256: SHA256Strategy,
        StrategyName.CRC32: CRC32Strategy,
        StrategyName.REDIS_COUNTER: RedisCounterStrategy,
    }

    def __init__(self, configuration: Optional[Configuration] = None, redis_client: Optional[redis.Redis] = None):
        self.configuration = configuration if configuration is not None else Configuration()
        self.redis_client = redis_client
        self._instances: dict[StrategyName, BaseStrategy] = {}
        self._lock = threading.Lock()

    @classmethod
    def supported_strategies(cls) -> list[str]:
        return [name.value for name in cls.REGISTRY]

    def resolve(self, identifier: str | StrategyName | None = None) -> StrategyName:
        """Map an identifier (default: the configured one) to a known StrategyName

        Raises:
            UnsupportedStrategyError: if the identifier is not registered
        """
        identifier = self.configuration.shortening_strategy if identifier is None else identifier
        try:
            return StrategyName(str(identifier).strip().lower())
        except ValueError as e:
            raise UnsupportedStrategyError(f"Unsupported shortening strategy: '{identifier}'.") from e

    def get_strategy(self, identifier: str | StrategyName | None = None) -> BaseStrategy:
        """Return the (cached) strategy for an identifier

        Args:
            identifier (str | StrategyName | None):
                Strategy identifier, e.g. 'md5'. Defaults to the configured one.

        Returns:
            BaseStrategy: strategy instance

        Raises:
            UnsupportedStrategyError:
                If the identifier is unknown.
            DataStoreError:
                If the Redis counter strategy can't reach Redis.
        """
        name = self.resolve(identifier)

        with self._lock:
            if name not in self._instances:
                self._instances[name] = self._build(name)
                logger.debug('Built shortening strategy.', extra={'strategy': name.value})
            return self._instances[name]

    def _build(self, name: StrategyName) -> BaseStrategy:
        lengths = {'min_length': self.configuration.min_length, 'max_length': self.configuration.max_length}
        if name is StrategyName.REDIS_COUNTER:
            return RedisCounterStrategy(
                salt=self.configuration.counter_salt,
                redis_client=self.redis_client,
                prefix=self.configuration.prefix,
                **self.configuration.redis_kwargs,
                **lengths,
            )
        return self.REGISTRY[name](**lengths)
