"""
Base Module
A named collection of related commands
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from prism.bot.database import DatabaseContext
from prism.commands.command import Command, Invocation
from prism.commands.ignored_users import IgnoredUsers
from prism.repositories.quote_repository import QuoteRepository
from prism.repositories.topic_repository import TopicRepository
from prism.utils.errors import CommandCollisionError, CommandNotFoundError
from prism.utils.logger import LoggerMixin
from prism.utils.monitoring import Monitoring


@dataclass
class ModuleContext:
    """Collaborators handed to every command action."""

    db: DatabaseContext
    ignored_users: IgnoredUsers
    quotes: QuoteRepository
    topics: TopicRepository
    commander_role: str = "Prism Commander"
    bot_user_id: Optional[int] = None
    monitoring: Optional[Monitoring] = None
    # Raise on contract violations instead of logging them
    strict: bool = False

    @classmethod
    def create(cls, db: DatabaseContext, ignored_users: IgnoredUsers, **kwargs: Any) -> "ModuleContext":
        """Build a context with repositories bound to db."""
        return cls(
            db=db,
            ignored_users=ignored_users,
            quotes=QuoteRepository(db),
            topics=TopicRepository(db),
            **kwargs,
        )


class BaseModule(LoggerMixin, ABC):
    """
    Base class for command modules.

    Subclasses declare their commands in setup_commands(); the list is built
    once here and never changes afterwards.
    """

    def __init__(self, context: ModuleContext):
        super().__init__(self.__class__.__name__)
        self.context = context

        self._commands: Tuple[Command, ...] = tuple(self.setup_commands())
        self._index: Dict[str, Command] = {}

        for command in self._commands:
            for name in command.names:
                owner = self._index.get(name)
                if owner is not None:
                    raise CommandCollisionError(name, self.name, f"{self.name}.{owner.name}")
                self._index[name] = command

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    def commands(self) -> Tuple[Command, ...]:
        return self._commands

    @abstractmethod
    def setup_commands(self) -> List[Command]:
        """Declare the commands of this module."""

    def get_command(self, name: str) -> Optional[Command]:
        """Get a command by canonical name or alias."""
        return self._index.get(name)

    def supports_command(self, name: str) -> bool:
        """Check if this module owns a command with this name or alias."""
        return name in self._index

    def can_user_perform(self, name: str, sender_id: Any, guild: Any) -> bool:
        """Check only the role requirement of a command."""
        command = self.get_command(name)
        return command is not None and command.is_authorized(sender_id, guild)

    def is_valid_call(self, name: str, args: Sequence[str], sender_id: Any, guild: Any) -> bool:
        """
        Check argument count and authorization for a call.

        Args:
            name: Command name or alias
            args: Parsed arguments
            sender_id: Discord user id of the sender
            guild: Guild of the message

        Returns:
            True if the command exists, has its required arguments and the
            sender holds its roles
        """
        command = self.get_command(name)
        if command is None:
            return False
        return command.validate_argument_count(args) and command.is_authorized(sender_id, guild)

    async def run(self, name: str, invocation: Invocation, args: List[str]) -> bool:
        """
        Run a command by name or alias.

        Callers check supports_command() first; an unknown name raises
        CommandNotFoundError in strict mode and is logged otherwise.
        """
        command = self.get_command(name)
        if command is None:
            if self.context.strict:
                raise CommandNotFoundError(name)
            self.logger.error(f"{self.name} asked to run unknown command: {name}")
            return False

        return await command.execute(invocation, args, self.context)

    def list_command_names(
        self,
        include_aliases: bool = False,
        sender_id: Any = None,
        guild: Any = None,
    ) -> List[str]:
        """
        List command names in declaration order.

        Args:
            include_aliases: Also list aliases
            sender_id: When given, only commands this user may run
            guild: Guild used for the role check

        Returns:
            List of names
        """
        names: List[str] = []
        for command in self._commands:
            if sender_id is not None and not command.is_authorized(sender_id, guild):
                continue
            names.extend(command.names if include_aliases else (command.name,))
        return names

    def get_help(self, name: str) -> str:
        """Get the rendered help of a command."""
        command = self.get_command(name)
        if command is None:
            raise CommandNotFoundError(name)
        return command.render_help()
