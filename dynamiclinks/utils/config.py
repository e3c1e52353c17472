"""Shortener configuration: one validated value, loaded from AppConfig or the environment

Configuration is an explicit `Configuration` value handed to the strategy
factory and the shortener; nothing reads process-wide mutable state at
shortening time. The value is built from one of two sources:

    1. AWS AppConfig (preferred when `APPCONFIG_*` variables are set). The
       deployed JSON document follows this structure:

           {
               "build": 42,
               "configs": {
                   "dynamic_links": {
                       "shortening_strategy": "md5",
                       "min_length": 5,
                       "async_processing": true,
                       "lock_ttl": 60,
                       "redis": {"host": "...", "port": 6379, "db": 0}
                   }
               }
           }

    2. Environment variables (`DYNAMIC_LINKS_*` and `REDIS_*`).

Functions:
    app_env(), app_name(), app_prefix()
        Deployment identity from APP_ENV and APP_NAME, and the Redis key
        namespace derived from it.

    load_config(section: str) -> dict
        Load a configuration section from AWS AppConfig.

    get_configuration() -> Configuration
        Build the active Configuration from AppConfig or the environment.

Example:
    >>> from dynamiclinks.utils.config import get_configuration
    >>> configuration = get_configuration()
    >>> configuration.shortening_strategy
    'md5'
"""

import os
import json
import logging
from dataclasses import dataclass, field
from typing import Any

import boto3

from dynamiclinks.constants import ENV, TTL, APPCONFIG_SECTION, CodeLength, StrategyName
from dynamiclinks.exceptions import BadConfigurationError
from dynamiclinks.types import RedisConfiguration
from dynamiclinks.utils.helpers import require_environment


logger = logging.getLogger(__name__)

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off', ''})


def app_env() -> str:
    """Deployment environment from APP_ENV, lowercased ('local' when unset)"""
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Default Redis key namespace, e.g. 'dynamiclinks:prod'. None without APP_NAME, so keys stay unprefixed."""
    name = app_name()
    return None if name is None else f'{name}:{app_env()}'


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise BadConfigurationError(f"'{name}' must be an integer (given value: {value!r}).")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f"'{name}' must be an integer (given value: {value!r}).") from e


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUTHY | _FALSY:
        return value.strip().lower() in _TRUTHY
    raise BadConfigurationError(f"'{name}' must be a boolean (given value: {value!r}).")


@dataclass(frozen=True)
class Configuration:
    """Settings consumed by the strategy factory and the shortener.

    Attributes:
        shortening_strategy (str):
            Strategy identifier resolved by StrategyFactory (see StrategyName).
        min_length (int):
            Default requested shortcode length.
        max_length (int):
            Ceiling enforced on generated shortcodes.
        async_processing (bool):
            If True, `shorten_url()` goes through the locked async path.
        lock_ttl (int):
            Seconds after which an async shortening lock expires on its own.
        counter_salt (str):
            Salt scrambling the Redis counter strategy output.
        redis (dict):
            Keyword arguments for redis.Redis (host, port, db, username, password).
        prefix (str | None):
            Namespace prefix for all Redis keys.
    """

    shortening_strategy: str = StrategyName.MD5.value
    min_length: int = CodeLength.MIN
    max_length: int = CodeLength.MAX
    async_processing: bool = False
    lock_ttl: int = TTL.LOCK
    counter_salt: str = 'dynamic_links'
    # Dicts are unhashable; equal configurations still compare their redis settings
    redis: RedisConfiguration = field(default_factory=dict, hash=False)
    prefix: str | None = field(default_factory=app_prefix)

    def __post_init__(self):
        if not isinstance(self.shortening_strategy, str) or not self.shortening_strategy:
            raise BadConfigurationError(f'Shortening strategy must be a non-empty string (given value: {self.shortening_strategy!r}).')
        if self.min_length < 1:
            raise BadConfigurationError(f'Minimum length must be positive (given value: {self.min_length}).')
        if self.max_length < CodeLength.MIN:
            raise BadConfigurationError(f'Maximum length must be at least {CodeLength.MIN} (given value: {self.max_length}).')
        if self.min_length > self.max_length:
            raise BadConfigurationError(f'Minimum length ({self.min_length}) exceeds maximum length ({self.max_length}).')
        if self.lock_ttl < 1:
            raise BadConfigurationError(f'Lock TTL must be positive (given value: {self.lock_ttl}).')
        if not self.counter_salt:
            raise BadConfigurationError('Counter salt must be a non-empty string.')

    @property
    def redis_kwargs(self) -> dict[str, Any]:
        """Redis settings as RedisClientMixin keyword arguments (redis_<name>)"""
        return {f'redis_{k}': v for k, v in self.redis.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Configuration':
        """Build a Configuration from a plain dictionary (e.g. an AppConfig section)

        Unknown keys are ignored. Missing keys keep their defaults.

        Raises:
            BadConfigurationError:
                If a value has the wrong type or violates a bound.
        """
        kwargs: dict[str, Any] = {}
        if 'shortening_strategy' in data:
            kwargs['shortening_strategy'] = str(data['shortening_strategy'])
        for name in ('min_length', 'max_length', 'lock_ttl'):
            if name in data:
                kwargs[name] = _as_int(name, data[name])
        if 'async_processing' in data:
            kwargs['async_processing'] = _as_bool('async_processing', data['async_processing'])
        if 'counter_salt' in data:
            kwargs['counter_salt'] = str(data['counter_salt'])
        if 'redis' in data:
            if not isinstance(data['redis'], dict):
                raise BadConfigurationError(f"'redis' must be a mapping (given type: {type(data['redis'])}).")
            kwargs['redis'] = dict(data['redis'])
        if 'prefix' in data:
            kwargs['prefix'] = data['prefix']
        return cls(**kwargs)

    @classmethod
    def from_environment(cls) -> 'Configuration':
        """Build a Configuration from DYNAMIC_LINKS_* and REDIS_* environment variables"""
        data: dict[str, Any] = {}
        # fmt: off
        mapping = {
            'shortening_strategy': ENV.DynamicLinks.SHORTENING_STRATEGY,
            'min_length':          ENV.DynamicLinks.MIN_LENGTH,
            'max_length':          ENV.DynamicLinks.MAX_LENGTH,
            'async_processing':    ENV.DynamicLinks.ASYNC_PROCESSING,
            'lock_ttl':            ENV.DynamicLinks.LOCK_TTL,
            'counter_salt':        ENV.DynamicLinks.COUNTER_SALT,
        }
        # fmt: on
        for key, env_name in mapping.items():
            if os.environ.get(env_name):
                data[key] = os.environ[env_name]

        redis_config = {}
        for env_name in ENV.Redis:
            if os.environ.get(env_name):
                redis_config[env_name.removeprefix('REDIS_').lower()] = os.environ[env_name]
        if redis_config:
            data['redis'] = redis_config

        return cls.from_dict(data)


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(section: str = APPCONFIG_SECTION) -> dict:
    """Load a configuration section from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        section (str):
            Name of the section under "configs" (default: "dynamic_links").

    Returns:
        dict: The section as a Python dictionary.

    Raises:
        MissingEnvironmentVariableError:
            If any AppConfig identifier is not set.
        BadConfigurationError:
            If the document has no such section.
        botocore.exceptions.ClientError:
            On AppConfig API failures.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'section': section})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    try:
        data = document['configs'][section]
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no '{section}' section.") from e

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'section': section, 'build': document.get('build')})
    return data


def get_configuration() -> Configuration:
    """Build the active Configuration

    Prefers AWS AppConfig when all `APPCONFIG_*` identifiers are set,
    otherwise reads environment variables.
    """
    if all(os.environ.get(name) for name in ENV.AppConfig):
        return Configuration.from_dict(load_config())
    return Configuration.from_environment()
