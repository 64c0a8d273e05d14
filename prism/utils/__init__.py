"""
Utility modules for Prism.
"""

from .logger import CustomLogger, LoggerMixin, get_logger, set_log_level, setup_logging
from .discord import DiscordUtils
from .validation import ValidationUtils, ValidationResult
from .monitoring import Monitoring
from .error_handler import ErrorHandler, get_error_handler, setup_error_handler
from .errors import (
    CommandCollisionError,
    CommandNotFoundError,
    DatabaseError,
    DuplicateEntryError,
    PrismError,
)

__all__ = [
    "CustomLogger",
    "LoggerMixin",
    "get_logger",
    "set_log_level",
    "setup_logging",
    "DiscordUtils",
    "ValidationUtils",
    "ValidationResult",
    "Monitoring",
    "ErrorHandler",
    "get_error_handler",
    "setup_error_handler",
    "PrismError",
    "DatabaseError",
    "DuplicateEntryError",
    "CommandNotFoundError",
    "CommandCollisionError",
]
