"""
Entry point for Prism.
"""

import asyncio
import sys

import discord

from prism import __version__
from prism.bot.client import run_bot
from prism.bot.config import config
from prism.utils.errors import DatabaseError
from prism.utils.logger import get_logger

logger = get_logger("Main")

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_CONFIG = 2


def main() -> None:
    """Validate configuration and run the bot until it is stopped."""
    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(EXIT_BAD_CONFIG)

    logger.info(f"Starting Prism {__version__} ({config.DATABASE_BACKEND} backend)...")

    try:
        asyncio.run(run_bot(config))
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
        sys.exit(EXIT_OK)
    except discord.LoginFailure:
        logger.error("Discord rejected DISCORD_TOKEN")
        sys.exit(EXIT_FAILURE)
    except DatabaseError as e:
        logger.error(f"Database unavailable: {e}")
        sys.exit(EXIT_FAILURE)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(EXIT_FAILURE)

    logger.info("Prism stopped")


if __name__ == "__main__":
    main()
