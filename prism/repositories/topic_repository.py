"""
Topic Repository
Handles topic categories, topics and their roles
"""

from typing import Any, Dict, List

from prism.bot.database import DatabaseContext
from prism.repositories.base_repository import BaseRepository


class TopicRepository(BaseRepository):
    """Repository for the topic table and its companion tables."""

    def __init__(self, db: DatabaseContext):
        super().__init__(db, "topic", "id")

    async def category_exists(self, category_id: str) -> bool:
        """Check if a Discord category is registered as a topic category."""
        row = await self.db.query_one(
            "SELECT id FROM topic_category WHERE category_id = ?",
            [str(category_id)],
        )
        return row is not None

    async def add_category(self, guild_id: str, category_id: str, primary_channel_id: str) -> int:
        """
        Register a topic category.

        Raises:
            DuplicateEntryError: If the category is already registered
        """
        return await self.db.execute(
            "INSERT INTO topic_category (guild_id, category_id, primary_channel_id) VALUES (?, ?, ?)",
            [str(guild_id), str(category_id), str(primary_channel_id)],
        )

    async def list_categories(self, guild_id: str) -> List[Dict[str, Any]]:
        """Get the topic categories of a guild in registration order."""
        return await self.db.query_all(
            "SELECT category_id, primary_channel_id FROM topic_category WHERE guild_id = ? ORDER BY id",
            [str(guild_id)],
        )

    async def topic_exists(self, guild_id: str, name: str) -> bool:
        """Check if a topic name is taken in a guild."""
        return await self.exists({"guildId": str(guild_id), "name": name})

    async def add_topic(self, guild_id: str, name: str, category_id: str) -> int:
        """Store a topic and return its id."""
        return await self.create({
            "guildId": str(guild_id),
            "name": name,
            "topicCategoryId": str(category_id),
        })

    async def add_topic_role(self, role_id: str, topic_id: int) -> int:
        """Link a Discord role to a topic."""
        return await self.db.execute(
            "INSERT INTO topic_role (role_id, topic_id) VALUES (?, ?)",
            [str(role_id), topic_id],
        )

    async def remove_topic(self, topic_id: int) -> int:
        """Delete a topic and any roles linked to it."""
        await self.db.execute("DELETE FROM topic_role WHERE topic_id = ?", [topic_id])
        return await self.delete_where({"id": topic_id})
