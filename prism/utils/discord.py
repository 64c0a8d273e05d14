"""
Discord Utilities
Helper functions for Discord interactions
"""

from typing import Any, Iterable, Optional

import discord

from prism.utils.logger import get_logger

logger = get_logger("DiscordUtils")

# Colour of quote embeds
QUOTE_COLOUR = discord.Colour.from_rgb(0, 255, 0)


class DiscordUtils:
    """Utility class for Discord-related helper functions."""

    @staticmethod
    async def safe_send(
        channel: Any,
        content: Optional[str] = None,
        embed: Optional[discord.Embed] = None,
    ) -> Optional[Any]:
        """
        Safely send a message to a channel (suppress errors).

        Args:
            channel: Discord channel
            content: Message content
            embed: Optional rich embed

        Returns:
            Sent message or None if failed
        """
        if not channel or not hasattr(channel, "send"):
            return None
        try:
            if embed is not None:
                return await channel.send(content, embed=embed)
            return await channel.send(content)
        except Exception as e:
            logger.warning(f"Send failed: {e}")
            return None

    @staticmethod
    def find_member(guild: Any, query: str) -> Optional[Any]:
        """
        Find a guild member by display name, user name or tag.

        Args:
            guild: Discord guild
            query: Name to look for (case-insensitive)

        Returns:
            Matching member or None
        """
        if guild is None or not query:
            return None

        needle = query.strip().lower()
        members: Iterable[Any] = getattr(guild, "members", None) or []

        for member in members:
            candidates = (
                getattr(member, "display_name", None),
                getattr(member, "name", None),
                getattr(member, "global_name", None),
                str(member),
            )
            if any(c and c.lower() == needle for c in candidates):
                return member

        return None

    @staticmethod
    def build_quote_embed(message: Any) -> discord.Embed:
        """
        Build the rich embed used to recite a quoted message.

        Args:
            message: The quoted Discord message

        Returns:
            Embed with the message content, author and timestamp
        """
        embed = discord.Embed(
            description=message.content,
            colour=QUOTE_COLOUR,
            timestamp=message.created_at,
        )

        author = message.author
        avatar = getattr(author, "display_avatar", None)
        embed.set_author(
            name=getattr(author, "display_name", None) or str(author),
            icon_url=avatar.url if avatar else None,
        )

        # An embed holds a single image; the last attachment wins
        for attachment in message.attachments or []:
            embed.set_image(url=attachment.url)

        return embed
