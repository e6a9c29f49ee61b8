# Copyright (c) Meta Platforms, Inc. and affiliates.
# Modifications copyright (c) 2025 Logan Martel.
# Adapted from https://github.com/meta-pytorch/KernelAgent (Apache-2.0).

"""Logging helpers (redaction, rotating logs, default diagnostic sink)."""

from __future__ import annotations

import logging
import sys

from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Mapping

DEFAULT_LOGGER_NAME = "runwrap"

_REDACT_MARKERS = ("TOKEN", "SECRET", "PASSWORD", "API_KEY", "CREDENTIAL")
_REDACTED = "<REDACTED>"


def _is_sensitive(key: str) -> bool:
    upper = key.upper()
    if upper.endswith("_KEY"):
        return True
    return any(marker in upper for marker in _REDACT_MARKERS)


def redact(env: Mapping[str, str] | None) -> Dict[str, str]:
    """Mask values of secret-looking environment keys before logging."""

    if not env:
        return {}
    return {
        key: (_REDACTED if _is_sensitive(key) else value)
        for key, value in env.items()
    }


def _lower_level(logger: logging.Logger, level: int) -> None:
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    return logging.getLogger(name)


def setup_file_logger(
    log_file: Path, name: str = DEFAULT_LOGGER_NAME
) -> logging.Logger:
    """Configure a rotating file logger (idempotent per file)."""

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    _lower_level(logger, logging.DEBUG)
    marker = str(log_file)
    if not any(
        isinstance(handler, RotatingFileHandler)
        and getattr(handler, "_runwrap_tag", None) == marker
        for handler in logger.handlers
    ):
        handler = RotatingFileHandler(
            log_file, maxBytes=2_000_000, backupCount=3
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        )
        handler._runwrap_tag = marker  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def setup_console_logging(verbosity: int = 0) -> logging.Logger:
    """Route runwrap diagnostics to stderr at a verbosity-derived level."""

    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    _lower_level(logger, level)
    # The previous stderr may be closed by now; never flush it.
    for stale in list(logger.handlers):
        if getattr(stale, "_runwrap_tag", None) == "<stderr>":
            logger.removeHandler(stale)
            stale.close()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(levelname)s %(name)s: %(message)s")
    )
    handler._runwrap_tag = "<stderr>"  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
