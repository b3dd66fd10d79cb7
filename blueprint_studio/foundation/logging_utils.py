"""Logging helpers that avoid heavy dependencies."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(value: str | int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    normalized = str(value or "").strip().lower()
    if normalized not in _LEVELS:
        allowed = ", ".join(_LEVELS)
        raise ValueError(f"Invalid log level {value!r} (expected one of: {allowed})")
    return _LEVELS[normalized]


def setup_logger(
    name: str = "blueprint_studio",
    *,
    level: str | int = "info",
    log_path: str | None = None,
) -> logging.Logger:
    """Configure `name` with a stderr handler and, when `log_path` is set, a UTF-8 file handler.

    The file handler always records DEBUG; the stream handler uses `level`.
    Calling this again replaces the handlers instead of stacking them.
    """

    stream_level = parse_log_level(level)

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if log_path else stream_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(stream_level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_path:
        directory = os.path.dirname(os.path.abspath(log_path))
        os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug("Logging initialized (logger=%s level=%s)", name, logging.getLevelName(stream_level))
    return logger
