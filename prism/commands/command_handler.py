"""
Command Handler
Turns incoming messages into validated, authorized command calls
"""

import re
from typing import Any, List, Optional, Tuple

from prism.commands.command import Invocation
from prism.commands.command_registry import RESERVED_NAMES, ModuleRegistry
from prism.commands.ignored_users import IgnoredUsers
from prism.utils.discord import DiscordUtils
from prism.utils.error_handler import get_error_handler
from prism.utils.logger import get_logger
from prism.utils.monitoring import Monitoring

# Command prefix
PREFIX = "!"

# !name, optionally followed by a comma-separated argument list
COMMAND_REGEX = re.compile(r"!(\w+)(?:\s+([\w\s#,]*))?")

INVALID_CALL_MESSAGE = "Incorrect argument count or insufficient privilege."
UNKNOWN_HELP_MESSAGE = "Unknown command or insufficient privilege."
GUILD_ONLY_MESSAGE = "This command must be used in a server."


class CommandHandler:
    """Handles command parsing and dispatch."""

    def __init__(
        self,
        client: Any,
        registry: ModuleRegistry,
        ignored_users: IgnoredUsers,
        monitoring: Optional[Monitoring] = None,
    ):
        self.logger = get_logger("Command")
        self.client = client
        self.registry = registry
        self.ignored_users = ignored_users
        self.monitoring = monitoring

    async def handle(self, message: Any) -> None:
        """
        Handle incoming message. Never raises.

        Args:
            message: Discord message object
        """
        try:
            await self._dispatch(message)
        except Exception as error:
            get_error_handler().handle_exception(error, "handler")
            if self.monitoring:
                self.monitoring.record_error()

    async def _dispatch(self, message: Any) -> None:
        author = message.author

        if author.id in self.ignored_users:
            return

        if self.monitoring:
            self.monitoring.record_message()

        content = message.content or ""
        if not content.startswith(PREFIX) or self.is_own_message(author):
            return

        parsed = self.parse_command(content)
        if parsed is None:
            return

        command_name, args = parsed
        invocation = Invocation.from_message(message)

        if command_name in RESERVED_NAMES:
            await self.handle_help(invocation, args)
            return

        module = self.registry.find_module(command_name)
        if module is None:
            return

        if not module.is_valid_call(command_name, args, invocation.sender_id, invocation.guild):
            await DiscordUtils.safe_send(invocation.channel, INVALID_CALL_MESSAGE)
            return

        command = module.get_command(command_name)
        if command.guild_only and invocation.guild is None:
            await DiscordUtils.safe_send(invocation.channel, GUILD_ONLY_MESSAGE)
            return

        self.logger.debug(f"{invocation.sender_id} -> {command.name} {args}")
        await module.run(command_name, invocation, args)

    def is_own_message(self, author: Any) -> bool:
        """Check if a message author is the bot itself."""
        user = getattr(self.client, "user", None)
        return user is not None and author.id == user.id

    @staticmethod
    def parse_command(content: str) -> Optional[Tuple[str, List[str]]]:
        """
        Parse command name and arguments from message.

        Args:
            content: Message content

        Returns:
            Tuple of (command_name, args), or None if the message is not a
            well-formed command
        """
        match = COMMAND_REGEX.fullmatch(content.rstrip())
        if not match:
            return None

        command_name, blob = match.group(1), match.group(2)
        if not blob or not blob.strip():
            return command_name, []

        return command_name, [token.strip() for token in blob.split(",")]

    async def handle_help(self, invocation: Invocation, args: List[str]) -> None:
        """
        Handle !help, with or without a command name.

        Args:
            invocation: The help invocation
            args: Parsed arguments; the first one names a command
        """
        target = args[0] if args else ""
        sender_id, guild = invocation.sender_id, invocation.guild

        if not target:
            names: List[str] = []
            for module in self.registry.modules:
                names.extend(module.list_command_names(sender_id=sender_id, guild=guild))
            await DiscordUtils.safe_send(
                invocation.channel,
                f"Available commands: {', '.join(names)}",
            )
            return

        module = self.registry.find_module(target)
        if module is None or not module.can_user_perform(target, sender_id, guild):
            await DiscordUtils.safe_send(invocation.channel, UNKNOWN_HELP_MESSAGE)
            return

        await DiscordUtils.safe_send(invocation.channel, module.get_help(target))
