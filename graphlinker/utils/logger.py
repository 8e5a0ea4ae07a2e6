"""Structured logging for the gateway: structlog on top of stdlib logging.

Console output is always on. JSONL file output follows LOG_TO_FILE; when the log
directory cannot be created, file output is turned off with a warning.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import structlog

from graphlinker.config import LOG_FILE, LOG_LEVEL, LOG_TO_FILE, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Azure/MSAL/HTTP loggers log every token request and Graph call at INFO
NOISY_LOGGERS = (
    "azure",
    "azure.core",
    "msal",
    "httpx",
    "httpcore",
    "urllib3",
    "msgraph",
    "kiota_http",
)

_configured = False


def _coerce_level(level_name: str) -> int:
    if level_name.isdigit():
        return int(level_name)
    return getattr(logging, level_name.upper(), logging.INFO)


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    """JSONL handler for log_file. Raises OSError when the directory cannot be created."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def configure_logging(
    *,
    to_file: bool = LOG_TO_FILE,
    log_file: Path = LOG_FILE,
    force: bool = False,
) -> None:
    """Install the console (and file) handlers on the root logger and configure structlog."""
    global _configured
    if _configured and not force:
        return

    level = logging.DEBUG if VERBOSE_LOGGING else _coerce_level(LOG_LEVEL)
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root_logger.setLevel(level)
    root_logger.addHandler(_console_handler(level))

    file_error = None
    if to_file:
        try:
            root_logger.addHandler(_file_handler(log_file, level))
        except OSError as e:
            file_error = e
    logging.captureWarnings(True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True

    if file_error is not None:
        structlog.get_logger("graphlinker.logging").warning(
            "logging.file_output_disabled", path=str(log_file), error=str(file_error)
        )


def get_logger(name: str = "graphlinker", **bindings: Any) -> BoundLogger:
    """Return the structured logger, optionally bound with context."""
    if not _configured:
        configure_logging()
    logger = structlog.get_logger(name)
    if bindings:
        logger = logger.bind(**bindings)
    return logger


def bind_context(**context: Any) -> None:
    """Bind context variables to be included with every log entry."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def request_context(**context: Any) -> Iterator[None]:
    """Scope context variables to one request: fresh on entry, cleared on exit."""
    clear_context()
    bind_context(**context)
    try:
        yield
    finally:
        clear_context()
