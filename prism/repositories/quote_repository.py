"""
Quote Repository
Stores references to quoted Discord messages
"""

from typing import Any, Dict, List, Optional

from prism.bot.database import DatabaseContext
from prism.repositories.base_repository import BaseRepository


class QuoteRepository(BaseRepository):
    """Repository for the quote table."""

    def __init__(self, db: DatabaseContext):
        super().__init__(db, "quote", "id")

    async def list_for_guild(
        self,
        guild_id: str,
        author_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get the quotes of a guild, optionally by a single author.

        Args:
            guild_id: Guild the quotes were saved in
            author_id: Only quotes of this author

        Returns:
            Rows with channel_id and message_id
        """
        conditions = {"guildId": str(guild_id)}
        if author_id:
            conditions["authorId"] = str(author_id)

        return await self.find_where(conditions, columns=("channel_id", "message_id"), order_by="id")

    async def is_quoted(self, message_id: str) -> bool:
        """Check if a message was already saved as a quote."""
        return await self.exists({"messageId": str(message_id)})

    async def add(self, guild_id: str, author_id: str, channel_id: str, message_id: str) -> int:
        """
        Save a quote.

        Returns:
            Id of the new row

        Raises:
            DuplicateEntryError: If the message is already quoted
        """
        quote_id = await self.create({
            "guildId": str(guild_id),
            "authorId": str(author_id),
            "channelId": str(channel_id),
            "messageId": str(message_id),
        })
        self.logger.debug(f"Saved quote {quote_id} for message {message_id}")
        return quote_id
