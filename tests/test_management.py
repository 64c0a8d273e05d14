"""
Tests for the Management module.
"""

from unittest.mock import AsyncMock

import pytest

from prism.modules.management import INVALID_USER_ID_MESSAGE, STORAGE_FAILED_MESSAGE
from prism.modules.silly import POWER_GIF_URL
from prism.repositories import IgnoredUserRepository
from prism.utils.errors import DatabaseError

from conftest import USER_ID, make_message


class TestIgnoredUserCommands:
    """!addignoreduser / !removeignoreduser"""

    @pytest.mark.asyncio
    async def test_ignore_round_trip(self, handler, db, user, commander, channel, guild):
        await handler.handle(make_message(f"!aiu {USER_ID}", commander, channel, guild))
        assert channel.last.content == "User added to ignore list."
        assert await IgnoredUserRepository(db).list_user_ids() == [str(USER_ID)]

        sent = len(channel.sent)
        await handler.handle(make_message("!power", user, channel, guild))
        assert len(channel.sent) == sent

        await handler.handle(make_message(f"!removeignoreduser {USER_ID}", commander, channel, guild))
        assert channel.last.content == "User removed from ignore list."
        assert await IgnoredUserRepository(db).list_user_ids() == []

        await handler.handle(make_message("!power", user, channel, guild))
        assert channel.last.content == POWER_GIF_URL

    @pytest.mark.asyncio
    async def test_already_ignored(self, handler, commander, channel, guild):
        await handler.handle(make_message(f"!aiu {USER_ID}", commander, channel, guild))
        await handler.handle(make_message(f"!addignoreduser {USER_ID}", commander, channel, guild))

        assert channel.last.content == "User is already on the ignored list."

    @pytest.mark.asyncio
    async def test_remove_not_ignored(self, handler, commander, channel, guild):
        await handler.handle(make_message(f"!riu {USER_ID}", commander, channel, guild))

        assert channel.last.content == "User is not on the ignored list."

    @pytest.mark.asyncio
    async def test_invalid_user_id(self, handler, ignored_users, commander, channel, guild):
        await handler.handle(make_message("!aiu alice", commander, channel, guild))

        assert channel.last.content == INVALID_USER_ID_MESSAGE
        assert len(ignored_users) == 0

    @pytest.mark.asyncio
    async def test_storage_failure(self, handler, ignored_users, commander, channel, guild):
        ignored_users.repository.add = AsyncMock(side_effect=DatabaseError("disk full"))

        await handler.handle(make_message(f"!aiu {USER_ID}", commander, channel, guild))

        assert channel.last.content == STORAGE_FAILED_MESSAGE
        assert USER_ID not in ignored_users

    @pytest.mark.asyncio
    async def test_requires_commander_role(self, handler, ignored_users, user, channel, guild):
        await handler.handle(make_message(f"!aiu {USER_ID}", user, channel, guild))

        assert channel.last.content == "Incorrect argument count or insufficient privilege."
        assert USER_ID not in ignored_users
