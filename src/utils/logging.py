"""Structured JSON logging.

Every record becomes one JSON line. Context passed through ``extra=``
(``userId``, ``providerUid``, ``provider``...) is emitted as top-level keys,
so sign-ins can be traced by user or provider uid in the log store.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

# Attributes every LogRecord carries; anything else came from extra=
_RECORD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ('pymongo', 'uvicorn.access')


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not callable(value)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_structured_logging(level: str | None = None):
    """Route all logging through one JSON handler on stderr.

    Level comes from the argument, else LOG_LEVEL, else INFO.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())

    for name in QUIET_LOGGERS:
        quiet = logging.getLogger(name)
        quiet.setLevel(logging.WARNING)
        quiet.handlers = [handler]
        quiet.propagate = False
