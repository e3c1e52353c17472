import string
from enum import StrEnum


# SMS-safe Base62 alphabet: digits, uppercase, lowercase (no '_', '-' or other symbols)
SAFE_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
BASE = len(SAFE_ALPHABET)


class CodeLength:
    """Short code length bounds."""

    MIN = 5  # Floor below which collision probability is unacceptable
    MAX = 12  # Default ceiling enforced on generated codes


class TTL:
    """TTL durations in seconds."""

    # Async shortening lock (safety net against crashed job workers)
    LOCK = 60


class StrategyName(StrEnum):
    NANO_ID = 'nano_id'
    MD5 = 'md5'
    SHA256 = 'sha256'
    CRC32 = 'crc32'
    REDIS_COUNTER = 'redis_counter'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        LOG_LEVEL = 'LOG_LEVEL'

    class DynamicLinks(StrEnum):
        SHORTENING_STRATEGY = 'DYNAMIC_LINKS_SHORTENING_STRATEGY'
        MIN_LENGTH = 'DYNAMIC_LINKS_MIN_LENGTH'
        MAX_LENGTH = 'DYNAMIC_LINKS_MAX_LENGTH'
        ASYNC_PROCESSING = 'DYNAMIC_LINKS_ASYNC_PROCESSING'
        LOCK_TTL = 'DYNAMIC_LINKS_LOCK_TTL'
        COUNTER_SALT = 'DYNAMIC_LINKS_COUNTER_SALT'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


# AppConfig document section holding this library's settings
APPCONFIG_SECTION = 'dynamic_links'

# Redis list backing the deferred shortening queue
SHORTEN_URL_QUEUE = 'jobs:shorten_url'
