"""
Logging for ConnectQ.

Log lines come from three places: request handlers in the API process,
the embedding worker thread that re-embeds companies after writes, and
the CLI. Records emitted off the main thread are tagged with the thread
name, so worker output such as ``(embedding-worker) Background upsert ...``
can be told apart from request logs in the same stream.

Output goes to stderr through Rich when attached to a terminal, and
through a plain timestamped formatter otherwise (containers, pipes).

Configuration:
    LOG_LEVEL sets the package level (DEBUG, INFO, WARNING, ERROR,
    CRITICAL; default INFO). ``connectq --verbose`` overrides it.

Usage:
    from connectq.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Embedding company %s", company_id)
"""

import logging
import os
import sys
import threading
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "connectq"

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(thread_tag)s%(message)s"
PLAIN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
RICH_FORMAT = "%(thread_tag)s%(message)s"

# SDK and storage loggers that log every request or model load at INFO.
THIRD_PARTY_LOGGERS = (
    "chromadb",
    "google_genai",
    "httpx",
    "httpcore",
    "urllib3",
    "sentence_transformers",
    "transformers",
)

_logging_configured = False


class _ThreadTagFilter(logging.Filter):
    """Set ``record.thread_tag`` to ``"(name) "`` for non-main threads."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.threadName in (None, threading.main_thread().name):
            record.thread_tag = ""
        else:
            record.thread_tag = f"({record.threadName}) "
        return True


def _get_log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _build_handler(use_rich: bool) -> logging.Handler:
    if use_rich and sys.stdout.isatty():
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(RICH_FORMAT))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT))
    handler.addFilter(_ThreadTagFilter())
    return handler


def set_level(level: int) -> None:
    """Change the level of the package logger and its handlers."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def configure_logging(
    level: Optional[int] = None,
    use_rich: bool = True,
) -> None:
    """
    Attach the package handler to the ``connectq`` logger.

    The handler is installed once. Modules call ``get_logger`` at import
    time, so by the time the CLI parses ``--verbose`` logging is usually
    configured already; a later call with an explicit ``level`` then only
    changes the level.

    Args:
        level: Logging level. If None, read from LOG_LEVEL.
        use_rich: Use Rich when stdout is a terminal.
    """
    global _logging_configured

    if _logging_configured:
        if level is not None:
            set_level(level)
        return

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(_build_handler(use_rich))
    logger.propagate = False
    set_level(level if level is not None else _get_log_level())

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a ``connectq.*`` child logger, configuring defaults on first use."""
    if not _logging_configured:
        configure_logging()

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def suppress_third_party_loggers(level: int = logging.WARNING) -> None:
    """Raise the provider SDK, HTTP and ChromaDB loggers to ``level``."""
    for logger_name in THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(level)
