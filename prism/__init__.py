"""
Prism: a Discord bot that saves and recites quotes.
"""

__version__ = "1.0.0"
__description__ = "Discord quote bot with a module-based command system"

from .bot.client import PrismBot, create_bot, run_bot

__all__ = ["PrismBot", "create_bot", "run_bot", "__version__"]
