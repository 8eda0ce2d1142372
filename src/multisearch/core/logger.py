"""Logging utilities for multisearch.

Every module logs through a child of the ``multisearch`` logger. Handlers are
installed on that package logger only, so an embedding application keeps
control of the root logger:

- a Rich console handler on stderr
- an optional size-rotated log file
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingConfig

LOGGER_NAMESPACE = "multisearch"

_loggers: dict[str, logging.Logger] = {}
_installed: list[logging.Handler] = []

console = Console(stderr=True)


def _package_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAMESPACE)


def _remove_installed_handlers() -> None:
    package_logger = _package_logger()
    while _installed:
        handler = _installed.pop()
        package_logger.removeHandler(handler)
        handler.close()


def _console_handler() -> logging.Handler:
    return RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )


def _file_handler(config: LoggingConfig) -> logging.Handler:
    path = Path(config.log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(logging.Formatter(config.format))
    return handler


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install console and file handlers on the ``multisearch`` logger.

    Calling it again replaces the handlers from the previous call and leaves
    handlers added by anyone else untouched.

    Args:
        config: LoggingConfig instance. If None, uses defaults.
    """
    config = config or LoggingConfig()
    package_logger = _package_logger()

    _remove_installed_handlers()
    package_logger.setLevel(config.level)
    package_logger.propagate = config.propagate

    _installed.append(_console_handler())
    if config.log_file:
        _installed.append(_file_handler(config))
    for handler in _installed:
        package_logger.addHandler(handler)

    get_logger("setup").info(
        "Logging configured: level=%s file=%s", config.level, config.log_file or "-"
    )


def get_logger(name: str) -> logging.Logger:
    """Return the ``multisearch.<name>`` logger.

    Child loggers carry no level of their own and follow the package logger.
    """
    logger = _loggers.get(name)
    if logger is None:
        logger = _loggers[name] = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
    return logger


def log_exception(logger: logging.Logger, exc: Exception, context: str = "") -> None:
    """Log an exception with its traceback.

    Args:
        logger: Logger instance
        exc: Exception to log
        context: What was being attempted
    """
    logger.exception("%s: %s", context or "Exception occurred", exc)
