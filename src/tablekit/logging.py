"""
Logging helpers.

tablekit is a library: it never configures the root logger. Everything logs
under the ``tablekit`` namespace, which carries a NullHandler so nothing is
printed unless the application (or ``configure_logging``) opts in.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "tablekit"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_root = logging.getLogger(ROOT_LOGGER_NAME)
_root.addHandler(logging.NullHandler())

_stream_handler: Optional[logging.Handler] = None


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the ``tablekit`` namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: Union[int, str, None] = None) -> logging.Logger:
    """
    Attach a stream handler to the ``tablekit`` logger.

    Args:
        level: Logging level (name or number). Defaults to the ``log_level``
            of the active settings.

    Calling this more than once only updates the level.
    """
    global _stream_handler

    if level is None:
        from tablekit.config.settings import get_settings

        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    if _stream_handler is None:
        _stream_handler = logging.StreamHandler()
        _stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _root.addHandler(_stream_handler)

    _root.setLevel(level)
    _stream_handler.setLevel(level)
    return _root


def log_exception(logger: logging.Logger, message: str, exc: BaseException) -> None:
    """Record an exception at DEBUG level, with traceback, without handling it."""
    logger.debug("%s: %s", message, exc, exc_info=exc)
