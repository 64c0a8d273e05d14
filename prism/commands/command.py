"""
Command
A named, aliasable unit of bot behaviour
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple

from prism.utils.discord import DiscordUtils
from prism.utils.error_handler import get_error_handler
from prism.utils.logger import get_logger

if TYPE_CHECKING:
    from prism.commands.base_module import ModuleContext

# Sent when a command action fails unexpectedly
COMMAND_FAILED_MESSAGE = "Something went wrong while running that command."

logger = get_logger("Command")


@dataclass(frozen=True)
class Argument:
    """One named command parameter."""

    name: str
    required: bool = False


@dataclass(frozen=True)
class Invocation:
    """A single incoming command message, alive only while it is dispatched."""

    message: Any
    text: str
    sender_id: str
    guild: Any
    channel: Any

    @classmethod
    def from_message(cls, message: Any) -> "Invocation":
        """Build an invocation from a discord.Message."""
        return cls(
            message=message,
            text=message.content or "",
            sender_id=str(message.author.id),
            guild=getattr(message, "guild", None),
            channel=message.channel,
        )


# Command action type alias
CommandAction = Callable[[Invocation, List[str], "ModuleContext"], Awaitable[Any]]


class Command:
    """Registered command with its names, arguments, roles and action."""

    def __init__(
        self,
        names: Sequence[str],
        arguments: Optional[Iterable[Argument]] = None,
        required_roles: Optional[Iterable[str]] = None,
        help_text: str = "",
        action: Optional[CommandAction] = None,
        guild_only: bool = False,
    ):
        """
        Args:
            names: Canonical name followed by aliases
            arguments: Argument definitions, in positional order
            required_roles: Role names the sender must all hold (empty = anyone)
            help_text: Description shown by the help command
            action: Async function (invocation, args, context)
            guild_only: Whether the command needs a guild
        """
        names = tuple(names)
        if not names:
            raise ValueError("A command needs at least one name")
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate names in command: {', '.join(names)}")
        if action is None:
            raise ValueError(f"Command '{names[0]}' has no action")

        self.names: Tuple[str, ...] = names
        self.arguments: Tuple[Argument, ...] = tuple(arguments or ())
        self.required_roles = frozenset(required_roles or ())
        self.help_text = help_text
        self.action = action
        self.guild_only = guild_only

    def __repr__(self) -> str:
        return f"<Command {self.name} aliases={list(self.aliases)}>"

    @property
    def name(self) -> str:
        """Canonical name."""
        return self.names[0]

    @property
    def aliases(self) -> Tuple[str, ...]:
        return self.names[1:]

    def matches_name(self, candidate: str) -> bool:
        """True if candidate is the canonical name or an alias (case-sensitive)."""
        return candidate in self.names

    def is_authorized(self, sender_id: Any, guild: Any) -> bool:
        """
        Check if the sender may run this command in the guild.

        Args:
            sender_id: Discord user id of the sender
            guild: Guild the command was sent in (None for DMs)

        Returns:
            True if no roles are required or the sender holds all of them
        """
        if not self.required_roles:
            return True

        if guild is None:
            return False

        try:
            member = guild.get_member(int(sender_id))
        except (TypeError, ValueError):
            return False

        if member is None:
            return False

        role_names = {role.name for role in getattr(member, "roles", None) or []}
        return self.required_roles <= role_names

    def validate_argument_count(self, args: Sequence[str]) -> bool:
        """
        Check that every required argument is present and non-empty.

        Extra trailing arguments are tolerated.
        """
        for position, argument in enumerate(self.arguments):
            if not argument.required:
                continue
            if position >= len(args) or not args[position]:
                return False
        return True

    async def execute(self, invocation: Invocation, args: List[str], context: "ModuleContext") -> bool:
        """
        Run the action. Errors are logged and reported, never raised.

        Returns:
            True if the action completed without raising
        """
        monitoring = context.monitoring
        try:
            logger.debug(f"Executing: {self.name} {args}")
            if monitoring:
                monitoring.record_command(self.name)
            await self.action(invocation, args, context)
            return True
        except Exception as error:
            get_error_handler().handle_exception(error, f"command:{self.name}")
            if monitoring:
                monitoring.record_error()
            await DiscordUtils.safe_send(invocation.channel, COMMAND_FAILED_MESSAGE)
            return False

    def render_help(self) -> str:
        """
        Render the one-line help of this command.

        Example:
            ``!quote [author] - quote will attempt to say a random quote.``
        """
        parts = ["!", self.name]

        required = [a.name for a in self.arguments if a.required]
        optional = [a.name for a in self.arguments if not a.required]

        if required:
            parts.extend([" ", ", ".join(required)])
        if optional:
            parts.extend([" [", ", ".join(optional), "]"])

        parts.extend([" - ", self.help_text])
        return "".join(parts)
