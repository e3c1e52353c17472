"""Structured JSON logging for processes embedding the shortener

The library only ever calls `logging.getLogger(__name__)` and attaches
camelCase context through `extra={...}`. Processes using it (web apps,
job workers) call `initialize_logging()` once at startup to get one JSON
object per line on stdout:

    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "ERROR", "logger": "dynamiclinks.shortener",
     "message": "Error shortening URL.", "clientId": "42", "strategy": "md5", "errorType": "DataStoreError"}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any

from dynamiclinks.constants import ENV


# Attributes every LogRecord carries; anything else came in through `extra`
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}

# Chatty third-party loggers kept at WARNING regardless of LOG_LEVEL
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render records as JSON: timestamp, level, logger, message, extras, then exception/stack if any"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        log: dict[str, Any] = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in vars(record).items() if key not in RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # Extras such as datetimes fall back to str()
        return json.dumps(log, default=str)


def logging_settings(level: str) -> dict[str, Any]:
    # fmt: off
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {'json': {'()': JsonFormatter}},
        'handlers': {
            'stdout': {
                'class': 'logging.StreamHandler',
                'formatter': 'json',
                'stream': 'ext://sys.stdout',
            },
        },
        'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
        'root': {'level': level, 'handlers': ['stdout']},
    }
    # fmt: on


def initialize_logging(level: str | None = None) -> None:
    """Route all logging through JsonFormatter on stdout

    Args:
        level (str | None):
            Root level, e.g. 'DEBUG'. Defaults to LOG_LEVEL, then 'INFO'.
    """
    level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(logging_settings(level))
