"""Core configuration and logging for multisearch."""

from .config import LoggingConfig, SearchSettings
from .logger import get_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "SearchSettings",
    "get_logger",
    "setup_logging",
]
