"""
Ignored Users
Process-wide set of user ids whose messages are dropped before parsing
"""

from typing import Any, FrozenSet

from prism.repositories.ignored_user_repository import IgnoredUserRepository
from prism.utils.errors import DuplicateEntryError
from prism.utils.logger import get_logger


class IgnoredUsers:
    """
    In-memory mirror of the ignored_user table.

    Loaded once at startup. Every mutation writes to storage first and then
    swaps in a new frozenset, so a failed write leaves the cache untouched
    and readers never see a half-updated set.
    """

    def __init__(self, repository: IgnoredUserRepository):
        self.logger = get_logger("IgnoredUsers")
        self.repository = repository
        self._users: FrozenSet[str] = frozenset()

    async def load(self) -> None:
        """Load every stored user id into memory."""
        user_ids = await self.repository.list_user_ids()
        self._users = frozenset(user_ids)
        self.logger.info(f"Loaded {len(self._users)} ignored users")

    @property
    def users(self) -> FrozenSet[str]:
        return self._users

    def __contains__(self, user_id: Any) -> bool:
        return str(user_id) in self._users

    def __len__(self) -> int:
        return len(self._users)

    def contains(self, user_id: Any) -> bool:
        """Check if a user is ignored."""
        return user_id in self

    async def add(self, user_id: Any) -> bool:
        """
        Ignore a user.

        Args:
            user_id: Discord user id

        Returns:
            False if the user was already ignored

        Raises:
            DatabaseError: If the write fails (cache unchanged)
        """
        user_id = str(user_id)
        if user_id in self._users:
            return False

        try:
            await self.repository.add(user_id)
        except DuplicateEntryError:
            # Row already stored; bring the cache in line with it
            self.logger.warning(f"User {user_id} was already stored as ignored")

        self._users = self._users | {user_id}
        self.logger.info(f"Ignoring user {user_id}")
        return True

    async def remove(self, user_id: Any) -> bool:
        """
        Stop ignoring a user.

        Returns:
            False if the user was not ignored

        Raises:
            DatabaseError: If the write fails (cache unchanged)
        """
        user_id = str(user_id)
        if user_id not in self._users:
            return False

        await self.repository.remove(user_id)

        self._users = self._users - {user_id}
        self.logger.info(f"No longer ignoring user {user_id}")
        return True
