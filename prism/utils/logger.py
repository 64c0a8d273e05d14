"""
Logging utilities for Prism.
Uses Rich for colored console output.
"""

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Custom level between INFO and WARNING
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

# Custom theme for logging
CUSTOM_THEME = Theme({
    "logging.level.success": "green",
    "logging.level.debug": "dim cyan",
})

console = Console(theme=CUSTOM_THEME)

_level = logging.INFO
_loggers: Dict[str, logging.Logger] = {}


class CustomLogger(logging.Logger):
    """Logger with an extra success() method."""

    def success(self, message: str, *args, **kwargs) -> None:
        """Log a message with the SUCCESS level."""
        if self.isEnabledFor(SUCCESS):
            self._log(SUCCESS, message, args, **kwargs)


def setup_logging(name: str, level: Optional[int] = None) -> CustomLogger:
    """
    Set up a logger with RichHandler.

    Args:
        name: Logger name
        level: Logging level (default: current global level)

    Returns:
        Configured logger instance
    """
    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(CustomLogger)
    try:
        logger = logging.getLogger(f"prism.{name}")
    finally:
        logging.setLoggerClass(previous_class)

    if level is None:
        level = _level

    logger.setLevel(level)
    logger.propagate = False

    # Remove existing handlers
    logger.handlers = []

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="[%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    ))

    logger.addHandler(handler)
    _loggers[name] = logger

    return logger


def set_log_level(level: int) -> None:
    """Change the level of every logger created so far and of future ones."""
    global _level
    _level = level

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


class LoggerMixin:
    """Mixin class that provides logger functionality."""

    def __init__(self, name: str):
        self._logger = get_logger(name)

    @property
    def logger(self) -> CustomLogger:
        """Get the logger instance."""
        return self._logger


def get_logger(name: str) -> CustomLogger:
    """Get a logger instance, reusing it if it was already set up."""
    logger = _loggers.get(name)
    if logger is not None:
        return logger
    return setup_logging(name)
