"""
Tests for the Quotes module.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from prism.modules.quotes import (
    INVALID_MESSAGE_ID_MESSAGE,
    INVALID_QUOTE_MESSAGE,
    MISSING_SOURCE_MESSAGE,
    NO_QUOTE_MESSAGE,
    NO_QUOTES_MESSAGE,
    QUOTE_ADDED_MESSAGE,
)
from prism.repositories import QuoteRepository
from prism.utils.discord import QUOTE_COLOUR

from conftest import CHANNEL_ID, GUILD_ID, make_member, make_message


def remember(channel, message):
    """Make a message fetchable from its channel."""
    channel.messages[message.id] = message
    return message


class TestSaveQuote:
    """!savequote / !sq"""

    @pytest.mark.asyncio
    async def test_saves_previous_message(self, handler, db, user, commander, channel, guild):
        previous = make_message("I am the senate", user, channel, guild)
        channel.previous = [previous]

        await handler.handle(make_message("!savequote", commander, channel, guild))

        assert channel.last.content == QUOTE_ADDED_MESSAGE
        rows = await db.query_all("SELECT * FROM quote")
        assert len(rows) == 1
        assert rows[0]["guild_id"] == str(GUILD_ID)
        assert rows[0]["author_id"] == str(user.id)
        assert rows[0]["channel_id"] == str(CHANNEL_ID)
        assert rows[0]["message_id"] == str(previous.id)

    @pytest.mark.asyncio
    async def test_saves_message_by_id(self, handler, db, user, channel, guild):
        target = remember(channel, make_message("quotable", user, channel, guild))

        await handler.handle(make_message(f"!sq {target.id}", user, channel, guild))

        assert channel.last.content == QUOTE_ADDED_MESSAGE
        assert await QuoteRepository(db).is_quoted(target.id)

    @pytest.mark.asyncio
    async def test_rejects_bot_message(self, handler, db, bot_user, user, channel, guild):
        channel.previous = [make_message("beep", bot_user, channel, guild)]

        await handler.handle(make_message("!savequote", user, channel, guild))

        assert channel.last.content == INVALID_QUOTE_MESSAGE
        assert await db.query_all("SELECT * FROM quote") == []

    @pytest.mark.asyncio
    async def test_rejects_duplicate(self, handler, db, user, commander, channel, guild):
        channel.previous = [make_message("once", user, channel, guild)]

        await handler.handle(make_message("!savequote", commander, channel, guild))
        await handler.handle(make_message("!savequote", commander, channel, guild))

        assert [sent.content for sent in channel.sent] == [QUOTE_ADDED_MESSAGE, INVALID_QUOTE_MESSAGE]
        assert len(await db.query_all("SELECT * FROM quote")) == 1

    @pytest.mark.asyncio
    async def test_concurrent_save_reported(self, handler, db, context, monkeypatch, user, commander, channel, guild):
        target = make_message("once", user, channel, guild)
        channel.previous = [target]
        await context.quotes.add(GUILD_ID, user.id, CHANNEL_ID, target.id)
        monkeypatch.setattr(context.quotes, "is_quoted", AsyncMock(return_value=False))

        await handler.handle(make_message("!savequote", commander, channel, guild))

        assert channel.last.content == INVALID_QUOTE_MESSAGE
        assert len(await db.query_all("SELECT * FROM quote")) == 1

    @pytest.mark.asyncio
    async def test_nothing_to_quote(self, handler, user, channel, guild):
        await handler.handle(make_message("!savequote", user, channel, guild))

        assert channel.last.content == NO_QUOTE_MESSAGE

    @pytest.mark.asyncio
    async def test_invalid_message_id(self, handler, user, channel, guild):
        await handler.handle(make_message("!savequote yesterday", user, channel, guild))

        assert channel.last.content == INVALID_MESSAGE_ID_MESSAGE

    @pytest.mark.asyncio
    async def test_unknown_message_id(self, handler, user, channel, guild):
        await handler.handle(make_message("!savequote 123456789012345678", user, channel, guild))

        assert channel.last.content == NO_QUOTE_MESSAGE


class TestRecite:
    """!quote and !random"""

    @pytest.mark.asyncio
    async def test_random_without_quotes(self, handler, user, channel, guild):
        await handler.handle(make_message("!random", user, channel, guild))

        assert channel.last.content == NO_QUOTES_MESSAGE

    @pytest.mark.asyncio
    async def test_quote_without_quotes(self, handler, user, channel, guild):
        await handler.handle(make_message("!quote", user, channel, guild))

        assert channel.last.content == NO_QUOTES_MESSAGE

    @pytest.mark.asyncio
    async def test_random_recites_embed(self, handler, context, user, channel, guild):
        quoted = remember(channel, make_message("I am the senate", user, channel, guild))
        await context.quotes.add(guild.id, user.id, channel.id, quoted.id)

        await handler.handle(make_message("!r", user, channel, guild))

        embed = channel.last.embed
        assert embed.description == "I am the senate"
        assert embed.colour == QUOTE_COLOUR
        assert embed.author.name == "Alice"
        assert embed.timestamp == quoted.created_at

    @pytest.mark.asyncio
    async def test_quotes_are_per_guild(self, handler, context, user, channel, guild):
        quoted = remember(channel, make_message("elsewhere", user, channel, guild))
        await context.quotes.add(guild.id + 1, user.id, channel.id, quoted.id)

        await handler.handle(make_message("!random", user, channel, guild))

        assert channel.last.content == NO_QUOTES_MESSAGE

    @pytest.mark.asyncio
    async def test_quote_by_author(self, handler, context, user, commander, channel, guild):
        mine = remember(channel, make_message("from alice", user, channel, guild))
        theirs = remember(channel, make_message("from boss", commander, channel, guild))
        await context.quotes.add(guild.id, user.id, channel.id, mine.id)
        await context.quotes.add(guild.id, commander.id, channel.id, theirs.id)

        for _ in range(5):
            await handler.handle(make_message("!quote boss", user, channel, guild))
            assert channel.last.embed.description == "from boss"

    @pytest.mark.asyncio
    async def test_quote_by_nickname(self, handler, context, user, channel, guild):
        quoted = remember(channel, make_message("hi", user, channel, guild))
        await context.quotes.add(guild.id, user.id, channel.id, quoted.id)

        await handler.handle(make_message("!getquote alice", user, channel, guild))

        assert channel.last.embed.description == "hi"

    @pytest.mark.asyncio
    async def test_quote_unknown_author(self, handler, user, channel, guild):
        await handler.handle(make_message("!quote Nobody", user, channel, guild))

        assert channel.last.content == NO_QUOTE_MESSAGE

    @pytest.mark.asyncio
    async def test_author_without_quotes(self, handler, user, channel, guild):
        guild.members.append(make_member(111111111111111111, "quiet"))

        await handler.handle(make_message("!q quiet", user, channel, guild))

        assert channel.last.content == NO_QUOTES_MESSAGE

    @pytest.mark.asyncio
    async def test_deleted_source_message(self, handler, context, user, channel, guild):
        await context.quotes.add(guild.id, user.id, channel.id, 123456789012345678)

        await handler.handle(make_message("!random", user, channel, guild))

        assert channel.last.content == MISSING_SOURCE_MESSAGE

    @pytest.mark.asyncio
    async def test_attachment_becomes_image(self, handler, context, user, channel, guild):
        quoted = make_message("look", user, channel, guild)
        quoted.attachments = [SimpleNamespace(url="https://cdn.example/cat.png")]
        remember(channel, quoted)
        await context.quotes.add(guild.id, user.id, channel.id, quoted.id)

        await handler.handle(make_message("!random", user, channel, guild))

        assert channel.last.embed.image.url == "https://cdn.example/cat.png"
