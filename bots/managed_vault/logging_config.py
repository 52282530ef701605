#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Structured logging configuration for the Managed Vault wrapper.

Usage:
    from .logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("deposit accepted", extra={"actor": actor, "amount": amount})
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_raw_level = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_LOG_LEVEL = _raw_level if _raw_level in VALID_LOG_LEVELS else "INFO"

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Avoids duplicate handlers when modules are re-imported
_loggers: dict[str, logging.Logger] = {}
_configured = False


def configure_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[Path] = None,
    console: bool = True,
    format_string: str = DEFAULT_LOG_FORMAT,
) -> None:
    """Configure the package logger with handlers and formatting.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        console: Whether to log to console (default: True)
        format_string: Log message format string
    """
    global _configured

    if _configured:
        return

    root = logging.getLogger("bots.managed_vault")
    log_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(log_level)

    formatter = logging.Formatter(format_string, datefmt=TIMESTAMP_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            print(f"Warning: Failed to create log file {log_file}: {e}", file=sys.stderr)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get or create a logger with the given name.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    if not _configured:
        log_path_str = os.getenv("LOG_PATH")
        log_path = Path(log_path_str) if log_path_str else None
        configure_logging(log_file=log_path)

    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    _loggers[name] = logger
    return logger


def set_log_level(level: str) -> None:
    """Change the log level for the package logger and its handlers.

    Args:
        level: New log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        print(f"Warning: Invalid log level '{level}'", file=sys.stderr)
        return
    root = logging.getLogger("bots.managed_vault")
    root.setLevel(log_level)
    for handler in root.handlers:
        handler.setLevel(log_level)
