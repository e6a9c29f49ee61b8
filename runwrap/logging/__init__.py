"""Logging utilities."""

from .utils import (
    DEFAULT_LOGGER_NAME,
    get_logger,
    redact,
    setup_console_logging,
    setup_file_logger,
)

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "get_logger",
    "redact",
    "setup_console_logging",
    "setup_file_logger",
]
