"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Optional
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from prism.bot.database import SqliteDbContext
from prism.commands import CommandHandler, IgnoredUsers, ModuleContext, ModuleRegistry
from prism.modules import create_modules
from prism.repositories import IgnoredUserRepository
from prism.utils.monitoring import Monitoring

BOT_ID = 380777013369241600
GUILD_ID = 309451824488906752
CHANNEL_ID = 412345678901234567
USER_ID = 223344556677889900
COMMANDER_ID = 998877665544332211
COMMANDER_ROLE = "Prism Commander"


class FakeChannel:
    """Text channel recording everything sent to it."""

    def __init__(self, channel_id: int = CHANNEL_ID, name: str = "general"):
        self.id = channel_id
        self.name = name
        self.sent: List[SimpleNamespace] = []
        self.previous: List[Any] = []
        self.messages: Dict[int, Any] = {}

    async def send(self, content: Optional[str] = None, *, embed: Any = None):
        sent = SimpleNamespace(content=content, embed=embed)
        self.sent.append(sent)
        return sent

    def history(self, limit: int = 100, before: Any = None):
        async def iterate():
            for message in self.previous[:limit]:
                yield message
        return iterate()

    async def fetch_message(self, message_id: int):
        try:
            return self.messages[int(message_id)]
        except KeyError:
            raise discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Message")

    @property
    def last(self) -> Optional[SimpleNamespace]:
        return self.sent[-1] if self.sent else None


class FakeGuild:
    """Guild with members, channels and categories held in memory."""

    def __init__(self, guild_id: int = GUILD_ID, members: Iterable[Any] = (), channels: Iterable[Any] = ()):
        self.id = guild_id
        self.members = list(members)
        self.channels = {c.id: c for c in channels}
        self.categories: List[Any] = []
        self.default_role = MagicMock(name="@everyone")
        self.created_roles: List[Any] = []
        self.created_channels: List[Dict[str, Any]] = []

    def get_member(self, member_id: int):
        return next((m for m in self.members if m.id == member_id), None)

    def get_channel(self, channel_id: int):
        return self.channels.get(channel_id)

    async def create_role(self, *, name: str, colour: Any = None):
        role = MagicMock()
        role.id = 700000000000000000 + len(self.created_roles)
        role.name = name
        role.delete = AsyncMock()
        self.created_roles.append(role)
        return role

    async def create_text_channel(self, name: str, *, category: Any = None, overwrites: Any = None):
        channel = FakeChannel(600000000000000000 + len(self.created_channels), name)
        self.created_channels.append({"channel": channel, "category": category, "overwrites": overwrites})
        return channel


def make_member(member_id: int, name: str, display_name: Optional[str] = None, roles: Iterable[str] = ()):
    return SimpleNamespace(
        id=member_id,
        name=name,
        display_name=display_name or name,
        global_name=None,
        roles=[SimpleNamespace(name=role) for role in roles],
        bot=False,
    )


_message_ids = iter(range(500000000000000000, 600000000000000000))


def make_message(
    content: str,
    author: Any,
    channel: FakeChannel,
    guild: Optional[FakeGuild] = None,
    message_id: Optional[int] = None,
):
    return SimpleNamespace(
        id=message_id if message_id is not None else next(_message_ids),
        content=content,
        author=author,
        channel=channel,
        guild=guild,
        created_at=datetime(2018, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        attachments=[],
    )


@pytest.fixture
async def db():
    """Connected in-memory SQLite database."""
    database = SqliteDbContext(":memory:")
    await database.connect()
    yield database
    await database.close()


@pytest.fixture
async def ignored_users(db):
    users = IgnoredUsers(IgnoredUserRepository(db))
    await users.load()
    return users


@pytest.fixture
def monitoring():
    return Monitoring()


@pytest.fixture
def context(db, ignored_users, monitoring):
    return ModuleContext.create(
        db,
        ignored_users,
        commander_role=COMMANDER_ROLE,
        bot_user_id=BOT_ID,
        monitoring=monitoring,
    )


@pytest.fixture
def registry(context):
    return ModuleRegistry(create_modules(context))


@pytest.fixture
def client():
    return SimpleNamespace(user=SimpleNamespace(id=BOT_ID))


@pytest.fixture
def handler(client, registry, ignored_users, monitoring):
    return CommandHandler(client, registry, ignored_users, monitoring)


@pytest.fixture
def bot_user():
    return make_member(BOT_ID, "Prism")


@pytest.fixture
def user():
    return make_member(USER_ID, "alice", display_name="Alice")


@pytest.fixture
def commander():
    return make_member(COMMANDER_ID, "boss", roles=[COMMANDER_ROLE])


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def guild(user, commander, bot_user, channel):
    return FakeGuild(members=[user, commander, bot_user], channels=[channel])
