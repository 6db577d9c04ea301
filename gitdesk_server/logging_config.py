"""
Logging setup for the gitdesk server.

Every line reads: LEVEL: timestamp : location : message
    INFO: 2024-02-17 13:01:23 : server.workspaces.publish.commit_and_push.37 : Pushing to branch: main

Modules log through ``get_logger(__name__)``; the app lifespan calls
``setup_logging()`` once.
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO, Union

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")

_PACKAGE = "gitdesk_server"


def _short_module(name: str) -> str:
    if name == _PACKAGE:
        return "server"
    if name.startswith(f"{_PACKAGE}."):
        return "server." + name[len(_PACKAGE) + 1:]
    return name


class GitdeskFormatter(logging.Formatter):
    """Formats records as ``LEVEL: timestamp : location : message`` (UTC times).

    The location is ``module.function.lineno`` with gitdesk_server shortened to
    ``server``; records from foreign loggers whose name does not end in their
    file name get the file name inserted.
    """

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        return datetime.fromtimestamp(record.created, timezone.utc).strftime(
            datefmt or "%Y-%m-%d %H:%M:%S"
        )

    def location(self, record: logging.LogRecord) -> str:
        module = _short_module(record.name)
        stem = os.path.splitext(record.filename)[0]
        if not module.endswith(f".{stem}"):
            module = f"{module}.{stem}"
        return f"{module}.{record.funcName}.{record.lineno}"

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{record.levelname}: {self.formatTime(record)} : "
            f"{self.location(record)} : {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: Union[int, str, None] = None, stream: Optional[TextIO] = None
) -> logging.Handler:
    """Route all logging through one stdout handler using GitdeskFormatter.

    ``level`` may be a number or a level name; it defaults to the LOG_LEVEL
    environment variable, then INFO. Calling again replaces the handler.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(GitdeskFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger(_PACKAGE).setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass ``__name__``."""
    return logging.getLogger(name)
