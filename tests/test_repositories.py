"""
Tests for the repositories.
"""

import pytest

from prism.repositories import (
    BaseRepository,
    IgnoredUserRepository,
    QuoteRepository,
    TopicRepository,
)
from prism.utils.errors import DuplicateEntryError


class TestBaseRepository:
    def test_cannot_instantiate_directly(self, db):
        with pytest.raises(TypeError):
            BaseRepository(db, "quote")

    @pytest.mark.parametrize("name,expected", [
        ("guildId", "guild_id"),
        ("topicCategoryId", "topic_category_id"),
        ("name", "name"),
    ])
    def test_to_snake_case(self, name, expected):
        assert BaseRepository.to_snake_case(name) == expected

    @pytest.mark.asyncio
    async def test_exists(self, db):
        quotes = QuoteRepository(db)
        await quotes.add("1", "2", "3", "4")

        assert await quotes.exists({"guildId": "1", "authorId": "2"})
        assert not await quotes.exists({"guildId": "9"})

    @pytest.mark.asyncio
    async def test_find_where_options(self, db):
        quotes = QuoteRepository(db)
        for n in range(3):
            await quotes.add("g1", "a", "c", f"m{n}")

        rows = await quotes.find_where({"guildId": "g1"}, columns=("message_id",), order_by="id", descending=True, limit=2)

        assert rows == [{"message_id": "m2"}, {"message_id": "m1"}]

    @pytest.mark.asyncio
    async def test_delete_needs_conditions(self, db):
        with pytest.raises(ValueError):
            await QuoteRepository(db).delete_where({})


class TestQuoteRepository:
    """Quote storage."""

    @pytest.mark.asyncio
    async def test_list_for_guild(self, db):
        quotes = QuoteRepository(db)
        await quotes.add("g1", "alice", "c1", "m1")
        await quotes.add("g1", "bob", "c1", "m2")
        await quotes.add("g2", "alice", "c2", "m3")

        rows = await quotes.list_for_guild("g1")

        assert rows == [
            {"channel_id": "c1", "message_id": "m1"},
            {"channel_id": "c1", "message_id": "m2"},
        ]

    @pytest.mark.asyncio
    async def test_list_for_author(self, db):
        quotes = QuoteRepository(db)
        await quotes.add("g1", "alice", "c1", "m1")
        await quotes.add("g1", "bob", "c1", "m2")

        rows = await quotes.list_for_guild("g1", "bob")

        assert [row["message_id"] for row in rows] == ["m2"]

    @pytest.mark.asyncio
    async def test_ids_stored_as_strings(self, db):
        quotes = QuoteRepository(db)
        await quotes.add(309451824488906752, 1, 2, 412345678901234567)

        assert await quotes.is_quoted("412345678901234567")
        assert await quotes.is_quoted(412345678901234567)

    @pytest.mark.asyncio
    async def test_message_quoted_once(self, db):
        quotes = QuoteRepository(db)
        await quotes.add("g1", "alice", "c1", "m1")

        with pytest.raises(DuplicateEntryError):
            await quotes.add("g1", "alice", "c1", "m1")


class TestIgnoredUserRepository:
    """Ignored user storage."""

    @pytest.mark.asyncio
    async def test_add_list_remove(self, db):
        repository = IgnoredUserRepository(db)
        await repository.add("111")
        await repository.add(222)

        assert sorted(await repository.list_user_ids()) == ["111", "222"]
        assert await repository.remove("111") == 1
        assert await repository.list_user_ids() == ["222"]

    @pytest.mark.asyncio
    async def test_duplicate(self, db):
        repository = IgnoredUserRepository(db)
        await repository.add("111")

        with pytest.raises(DuplicateEntryError):
            await repository.add("111")


class TestTopicRepository:
    """Topic categories, topics and topic roles."""

    @pytest.mark.asyncio
    async def test_categories(self, db):
        topics = TopicRepository(db)
        await topics.add_category("g1", "cat1", "chan1")
        await topics.add_category("g1", "cat2", "chan2")
        await topics.add_category("g2", "cat3", "chan3")

        assert await topics.category_exists("cat1")
        assert not await topics.category_exists("cat9")
        assert await topics.list_categories("g1") == [
            {"category_id": "cat1", "primary_channel_id": "chan1"},
            {"category_id": "cat2", "primary_channel_id": "chan2"},
        ]

    @pytest.mark.asyncio
    async def test_category_registered_once(self, db):
        topics = TopicRepository(db)
        await topics.add_category("g1", "cat1", "chan1")

        with pytest.raises(DuplicateEntryError):
            await topics.add_category("g1", "cat1", "chan2")

    @pytest.mark.asyncio
    async def test_topic_names_unique_per_guild(self, db):
        topics = TopicRepository(db)
        await topics.add_topic("g1", "news", "cat1")

        assert await topics.topic_exists("g1", "news")
        assert not await topics.topic_exists("g2", "news")
        await topics.add_topic("g2", "news", "cat2")
        with pytest.raises(DuplicateEntryError):
            await topics.add_topic("g1", "news", "cat1")

    @pytest.mark.asyncio
    async def test_topic_role(self, db):
        topics = TopicRepository(db)
        topic_id = await topics.add_topic("g1", "news", "cat1")

        await topics.add_topic_role("role1", topic_id)

        row = await db.query_one("SELECT topic_id FROM topic_role WHERE role_id = ?", ["role1"])
        assert row["topic_id"] == topic_id

    @pytest.mark.asyncio
    async def test_remove_topic(self, db):
        topics = TopicRepository(db)
        topic_id = await topics.add_topic("g1", "news", "cat1")
        await topics.add_topic_role("role1", topic_id)

        assert await topics.remove_topic(topic_id) == 1
        assert not await topics.topic_exists("g1", "news")
        assert await db.query_all("SELECT id FROM topic_role") == []
