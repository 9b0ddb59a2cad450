"""Structured logging for the license-plist command.

structlog renders both its own events and records from stdlib loggers
(httpx, httpcore) through one ``ProcessorFormatter`` handler.

Environment:
    LICENSEPLIST_LOG_LEVEL   level name; defaults to INFO, or DEBUG with ``-v``
    LICENSEPLIST_LOG_FORMAT  ``console`` (default) or ``json``
"""

from __future__ import annotations

import logging.config
import os
import sys
from typing import TextIO

import structlog
from structlog.types import Processor

LOG_LEVEL_ENV = "LICENSEPLIST_LOG_LEVEL"
LOG_FORMAT_ENV = "LICENSEPLIST_LOG_FORMAT"

# Chatty third-party loggers, capped at WARNING.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _pre_chain(log_format: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
    return processors


def _renderer(log_format: str, stream: TextIO) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def setup_logging(verbose: bool = False, stream: TextIO | None = None) -> None:
    """Route structlog and stdlib logging to *stream* (stderr by default)."""
    stream = stream or sys.stderr
    level = (os.environ.get(LOG_LEVEL_ENV) or ("DEBUG" if verbose else "INFO")).upper()
    log_format = os.environ.get(LOG_FORMAT_ENV, "console").lower()
    if log_format not in ("console", "json"):
        log_format = "console"

    pre_chain = _pre_chain(log_format)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "licenseplist": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format, stream),
                    ],
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "stream": stream,
                    "formatter": "licenseplist",
                },
            },
            "root": {"handlers": ["stream"], "level": level},
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        }
    )
