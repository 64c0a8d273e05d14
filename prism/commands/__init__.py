"""
Command system for Prism.
"""

from .command import Argument, Command, CommandAction, Invocation
from .base_module import BaseModule, ModuleContext
from .command_registry import ModuleRegistry
from .command_handler import CommandHandler
from .ignored_users import IgnoredUsers

__all__ = [
    "Argument",
    "Command",
    "CommandAction",
    "Invocation",
    "BaseModule",
    "ModuleContext",
    "ModuleRegistry",
    "CommandHandler",
    "IgnoredUsers",
]
