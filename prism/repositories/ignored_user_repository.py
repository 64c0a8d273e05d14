"""
Ignored User Repository
Persists the users whose messages the bot ignores
"""

from typing import List

from prism.bot.database import DatabaseContext
from prism.repositories.base_repository import BaseRepository


class IgnoredUserRepository(BaseRepository):
    """Repository for the ignored_user table."""

    def __init__(self, db: DatabaseContext):
        super().__init__(db, "ignored_user", "id")

    async def list_user_ids(self) -> List[str]:
        """Get every ignored user id."""
        rows = await self.find_where(columns=("user_id",), order_by="id")
        return [str(row["user_id"]) for row in rows]

    async def add(self, user_id: str) -> int:
        """Add a user id. Raises DuplicateEntryError if present."""
        return await self.create({"userId": str(user_id)})

    async def remove(self, user_id: str) -> int:
        """Remove a user id. Returns the number of deleted rows."""
        return await self.delete_where({"userId": str(user_id)})
