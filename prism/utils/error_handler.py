"""
Error Handler
Logs, classifies and counts errors raised while the bot runs
"""

import asyncio
import traceback
from collections import Counter
from typing import Any, Dict, Optional

import discord

from prism.utils.errors import DatabaseError, PrismError
from prism.utils.logger import get_logger

# Error categories reported on /health
CATEGORY_DATABASE = "database"
CATEGORY_DISCORD = "discord"
CATEGORY_COMMAND = "command"
CATEGORY_INTERNAL = "internal"


class ErrorHandler:
    """Global error handler for the bot."""

    def __init__(self):
        self.logger = get_logger("ErrorHandler")
        self.error_counts: Counter = Counter()
        self.category_counts: Counter = Counter()

    def initialize(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Route exceptions escaping tasks and callbacks through this handler."""
        loop = loop or asyncio.get_running_loop()
        loop.set_exception_handler(self._async_exception_handler)
        self.logger.info("Error handlers initialized")

    def _async_exception_handler(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get("exception")
        if exception is None:
            self.logger.error(f"Async error: {context.get('message', 'Unknown async error')}")
            return
        self.handle_exception(exception, "async")

    @staticmethod
    def classify(error: BaseException) -> str:
        """Sort an error into a reporting category."""
        if isinstance(error, DatabaseError):
            return CATEGORY_DATABASE
        if isinstance(error, discord.DiscordException):
            return CATEGORY_DISCORD
        if isinstance(error, PrismError):
            return CATEGORY_COMMAND
        return CATEGORY_INTERNAL

    def handle_exception(self, error: BaseException, context: str = "") -> int:
        """
        Handle an exception.

        Args:
            error: The exception that occurred
            context: Where it happened, e.g. "command:quote"

        Returns:
            How many times this error type was seen in this context
        """
        category = self.classify(error)
        where = f"[{context}] " if context else ""
        self.logger.error(f"{where}{category} error: {type(error).__name__}: {error}")

        # Tracebacks for internal errors only
        if category == CATEGORY_INTERNAL:
            trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
            self.logger.debug(f"Traceback:\n{trace}")

        key = f"{context}:{type(error).__name__}"
        self.error_counts[key] += 1
        self.category_counts[category] += 1
        return self.error_counts[key]

    def summary(self) -> Dict[str, int]:
        """Error totals per category."""
        return dict(self.category_counts)


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def setup_error_handler(loop: Optional[asyncio.AbstractEventLoop] = None) -> ErrorHandler:
    """Set up the global error handler."""
    handler = get_error_handler()
    handler.initialize(loop)
    return handler
