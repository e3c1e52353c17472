class DynamicLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:dynamic_links_error'


class GenerationError(DynamicLinksError):
    """Raised when a shortening strategy cannot produce a valid short code."""

    error_code = 'strategy:generation_error'


class UnsupportedStrategyError(DynamicLinksError):
    """Raised when the configured shortening strategy identifier is unknown."""

    error_code = 'strategy:unsupported_strategy_error'


class ExpirationParseError(DynamicLinksError):
    """Raised when an expiration value cannot be parsed.

    NOTE: recovered by the shortener (logged, treated as "no expiration").
    """

    error_code = 'shortener:expiration_parse_error'


class EnqueueError(DynamicLinksError):
    """Raised when a deferred shortening job cannot be queued."""

    error_code = 'jobs:enqueue_error'


class ConfigurationError(DynamicLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class MissingAsyncWorkerError(ConfigurationError):
    """Raised when asynchronous shortening is requested from a shortener built without an async worker."""

    error_code = 'config:missing_async_worker_error'
