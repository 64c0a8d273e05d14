"""
Discord client setup for Prism.
"""

import asyncio
import logging
import signal
import sys
import threading
from typing import Optional

import discord

from prism.bot.config import Config, config
from prism.bot.database import DatabaseContext, close_database, init_database
from prism.bot.keep_alive import run_server, set_monitoring, update_bot_status
from prism.commands import CommandHandler, IgnoredUsers, ModuleContext, ModuleRegistry
from prism.modules import create_modules
from prism.repositories import IgnoredUserRepository
from prism.utils.error_handler import setup_error_handler
from prism.utils.logger import get_logger, set_log_level
from prism.utils.monitoring import Monitoring

logger = get_logger("Client")

# Console line that shuts the bot down
QUIT_COMMAND = "quit"


class PrismBot(discord.Client):
    """Prism Discord client."""

    def __init__(self, settings: Config = config):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        super().__init__(intents=intents)

        self.settings = settings
        self.start_time: Optional[float] = None
        self.monitoring = Monitoring(self)

        # Set up in setup_hook
        self.db: Optional[DatabaseContext] = None
        self.ignored_users: Optional[IgnoredUsers] = None
        self.registry: Optional[ModuleRegistry] = None
        self.command_handler: Optional[CommandHandler] = None

    async def setup_hook(self) -> None:
        """Called after login, before connecting to the gateway."""
        logger.info("Setting up bot...")
        setup_error_handler()

        self.db = await init_database(self.settings)

        logger.info("Caching ignored users...")
        self.ignored_users = IgnoredUsers(IgnoredUserRepository(self.db))
        await self.ignored_users.load()

        logger.info("Registering modules...")
        context = ModuleContext.create(
            self.db,
            self.ignored_users,
            commander_role=self.settings.COMMANDER_ROLE,
            bot_user_id=self.user.id if self.user else None,
            monitoring=self.monitoring,
            strict=self.settings.DEBUG,
        )
        # Raises CommandCollisionError on an ambiguous command set
        self.registry = ModuleRegistry(create_modules(context))
        self.command_handler = CommandHandler(self, self.registry, self.ignored_users, self.monitoring)

        self.start_console_listener()
        logger.success(f"Bot setup complete ({len(self.registry)} modules)")

    async def on_ready(self) -> None:
        """Called when bot is ready."""
        self.start_time = asyncio.get_running_loop().time()
        update_bot_status(status="ready", discord_connected=True)

        logger.success(f"Logged in as: {self.user}")
        logger.info(f"Type '{QUIT_COMMAND}' in the console to stop the bot")

    async def on_disconnect(self) -> None:
        update_bot_status(discord_connected=False)
        logger.warning("Disconnected from Discord")

    async def on_message(self, message: discord.Message) -> None:
        """Handle incoming messages."""
        if self.command_handler:
            await self.command_handler.handle(message)

    def start_console_listener(self) -> None:
        """Watch stdin for the quit command on a daemon thread."""
        loop = asyncio.get_running_loop()

        def read_console() -> None:
            for line in sys.stdin:
                if line.strip().lower() == QUIT_COMMAND:
                    logger.info("Quit requested from console")
                    asyncio.run_coroutine_threadsafe(self.close(), loop)
                    return

        threading.Thread(target=read_console, name="prism-console", daemon=True).start()

    async def close(self) -> None:
        """Clean shutdown: Discord connection first, then the database."""
        logger.info("Shutting down bot...")
        logger.info(self.monitoring.format_health_status())

        await super().close()
        await close_database()

        update_bot_status(status="offline", discord_connected=False)


# Global bot instance
bot: Optional[PrismBot] = None


def create_bot(settings: Config = config) -> PrismBot:
    """Create and return bot instance."""
    global bot
    bot = PrismBot(settings)
    return bot


async def run_bot(settings: Config = config) -> None:
    """Run the bot."""
    settings.validate()
    set_log_level(logging.DEBUG if settings.DEBUG else logging.INFO)

    prism_bot = create_bot(settings)

    # Graceful shutdown on SIGINT / SIGTERM
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, lambda s=sig: _request_shutdown(prism_bot, s))
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    if settings.KEEP_ALIVE:
        set_monitoring(prism_bot.monitoring)
        run_server(settings)

    try:
        async with prism_bot:
            await prism_bot.start(settings.DISCORD_TOKEN)
    except Exception as e:
        logger.error(f"Bot error: {e}")
        raise


def _request_shutdown(prism_bot: PrismBot, sig: signal.Signals) -> None:
    logger.info(f"Received {sig.name}, shutting down...")
    asyncio.create_task(prism_bot.close())
