"""Logging helpers shared by the library and the CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the root logger with the pipe-delimited format and return it."""
    numeric_level = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    formatter = logging.Formatter(LOG_FORMAT)
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
        return root_logger

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return a named logger."""
    if not name.strip():
        raise ValueError("Logger name cannot be empty.")
    return logging.getLogger(name)


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: object) -> None:
    """Log ``event`` as ``"Event | key=value ..."`` with lazily formatted values."""
    if not logger.isEnabledFor(level):
        return
    if not fields:
        logger.log(level, "%s", event)
        return
    template = " ".join(f"{key}=%s" for key in fields)
    logger.log(level, f"%s | {template}", event, *fields.values())
