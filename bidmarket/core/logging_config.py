"""JSON-lines logging for the marketplace services."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from bidmarket.core.config import get_config

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Libraries that stay at WARNING outside development.
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields (event, ids) are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True, default=str)


def configure_logging(force: bool = False) -> None:
    """Install JSON handlers on the root logger.

    Does nothing when the root logger already has handlers (for example under
    uvicorn or pytest) unless ``force`` is set.
    """
    config = get_config()
    root = logging.getLogger()
    if root.handlers and not force:
        return
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = JsonFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.LOG_FILE:
        handlers.append(logging.FileHandler(config.LOG_FILE, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(config.LOG_LEVEL)

    if config.ENV != "development":
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
