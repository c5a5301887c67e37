"""Logging configuration for the command line."""

import logging
import os
import sys
from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LEVEL = "WARNING"


def _parse_level(level: str) -> int:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def _set_logger_levels(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def configure_logging(level_name: str | None = None) -> None:
    """Configure application-wide logging to stderr only.

    Stdout is reserved for command output.

    :param level_name: Level to use. Falls back to the LOG_LEVEL env var,
        then WARNING.
    :raises ValueError: If the level name is not a logging level.
    """
    level_name = level_name or os.environ.get("LOG_LEVEL", DEFAULT_LEVEL)
    level = _parse_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Hard reset: ensure exactly one stderr handler with our formatter.
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    _set_logger_levels(("urllib3",), level=max(level, logging.INFO))

    logging.getLogger(__name__).debug(f"Logging configured: level={level_name.upper()}")
