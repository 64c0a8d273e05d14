"""
Module Registry
Fixed, ordered set of command modules with a name index
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from prism.commands.base_module import BaseModule
from prism.utils.errors import CommandCollisionError
from prism.utils.logger import get_logger

# Names handled by the command handler itself
RESERVED_NAMES = ("help", "h")


class ModuleRegistry:
    """
    Registry of the bot's modules.

    Modules are accepted in declaration order. A module declaring a name that
    an earlier module (or the command handler) already owns aborts the whole
    registry, so every name maps to exactly one module.
    """

    def __init__(self, modules: Iterable[BaseModule] = ()):
        self.logger = get_logger("ModuleRegistry")
        self._modules: List[BaseModule] = []
        self._index: Dict[str, BaseModule] = {}

        for module in modules:
            self.register(module)

    def register(self, module: BaseModule) -> "ModuleRegistry":
        """
        Register a module.

        Args:
            module: Module to add after the existing ones

        Returns:
            Self for chaining

        Raises:
            CommandCollisionError: If any of its names is already taken
        """
        names = module.list_command_names(include_aliases=True)

        for name in names:
            if name in RESERVED_NAMES:
                raise CommandCollisionError(name, module.name, "the command handler")
            owner = self._index.get(name)
            if owner is not None:
                raise CommandCollisionError(name, module.name, owner.name)

        for name in names:
            self._index[name] = module
        self._modules.append(module)

        self.logger.debug(f"Registered module {module.name}: {', '.join(names)}")
        return self

    @property
    def modules(self) -> Tuple[BaseModule, ...]:
        return tuple(self._modules)

    def find_module(self, name: str) -> Optional[BaseModule]:
        """
        Get the module owning a command name or alias.

        Args:
            name: Command name or alias (case-sensitive)

        Returns:
            Owning module or None
        """
        return self._index.get(name)

    def all_command_names(self) -> List[str]:
        """Every registered name, aliases included, in registration order."""
        return list(self._index)

    def __iter__(self) -> Iterator[BaseModule]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)
