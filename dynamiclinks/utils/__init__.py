from dynamiclinks.utils.config import Configuration, app_env, app_name, app_prefix, load_config, get_configuration
from dynamiclinks.utils.helpers import build_short_url, parse_expires_at, require_environment
from dynamiclinks.utils.logging import initialize_logging


__all__ = [
    'Configuration',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'get_configuration',
    'build_short_url',
    'parse_expires_at',
    'require_environment',
    'initialize_logging',
]
