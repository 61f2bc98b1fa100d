"""
Logging utility for the Arlo coaching backend.

Every component asks for a named logger here so output shares one format.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
ROOT_NAME = "arlo"


def setup_logger(
    name: str = ROOT_NAME,
    level: int = logging.INFO,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger writing to stdout.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        format_string: Custom format string (optional)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    """
    Get or create a logger under the "arlo" namespace.

    Args:
        name: Component name (e.g. "module.workout", "retriever")

    Returns:
        Logger instance
    """
    if name != ROOT_NAME and not name.startswith(ROOT_NAME + "."):
        name = f"{ROOT_NAME}.{name}"
    return setup_logger(name)


def set_level(level: str) -> None:
    """Apply a level name such as "DEBUG" to every arlo logger already created."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    for logger_name in list(logging.Logger.manager.loggerDict):
        if logger_name == ROOT_NAME or logger_name.startswith(ROOT_NAME + "."):
            logger = logging.getLogger(logger_name)
            logger.setLevel(numeric)
            for handler in logger.handlers:
                handler.setLevel(numeric)
