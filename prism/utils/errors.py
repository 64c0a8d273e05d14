"""
Exception types shared across Prism.
"""


class PrismError(Exception):
    """Base class for Prism errors."""


class DatabaseError(PrismError):
    """A persistence operation failed."""


class DuplicateEntryError(DatabaseError):
    """A unique constraint rejected an insert."""


class CommandNotFoundError(PrismError):
    """No command matches the given name."""

    def __init__(self, name: str):
        super().__init__(f"Command not found: {name}")
        self.name = name


class CommandCollisionError(PrismError):
    """Two modules (or one module twice) declare the same command name."""

    def __init__(self, name: str, module: str, owner: str):
        super().__init__(
            f"Command name '{name}' in {module} is already registered by {owner}"
        )
        self.name = name
        self.module = module
        self.owner = owner
