"""
Topics Module

Commands for adding topic categories and topics. A topic is an opt-in text
channel: it is hidden from @everyone and visible to holders of the topic's
role.
"""

from typing import Any, List, Optional

import discord

from prism.commands.base_module import BaseModule, ModuleContext
from prism.commands.command import Argument, Command, Invocation
from prism.utils.discord import DiscordUtils
from prism.utils.errors import DuplicateEntryError
from prism.utils.validation import ValidationUtils

TOPIC_CATEGORY_COLOUR = discord.Colour.from_rgb(0, 0, 255)
TOPIC_ROLE_COLOUR = discord.Colour.from_rgb(255, 255, 255)


def _find_category(guild: Any, name: str) -> Optional[Any]:
    needle = name.lower()
    return next((c for c in guild.categories if c.name.lower() == needle), None)


async def add_topic_category(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !addtopiccategory categoryName, primaryChannelName."""
    category_check = ValidationUtils.validate_name(args[0], "Category name")
    channel_check = ValidationUtils.validate_name(args[1], "Primary channel name")
    for check in (category_check, channel_check):
        if not check:
            await DiscordUtils.safe_send(invocation.channel, f"{check.error}.")
            return

    category_name = category_check.sanitized
    primary_channel_name = channel_check.sanitized
    guild = invocation.guild

    category = _find_category(guild, category_name)
    if category is None:
        await DiscordUtils.safe_send(invocation.channel, "Cannot find specified category.")
        return

    primary_channel = next(
        (c for c in category.channels if c.name.lower() == primary_channel_name.lower()),
        None,
    )
    if primary_channel is None:
        await DiscordUtils.safe_send(
            invocation.channel,
            f"Cannot find '{primary_channel_name}' in category '{category_name}'.",
        )
        return

    if await context.topics.category_exists(category.id):
        await DiscordUtils.safe_send(invocation.channel, "Topic category already exists.")
        return

    try:
        await context.topics.add_category(guild.id, category.id, primary_channel.id)
    except DuplicateEntryError:
        await DiscordUtils.safe_send(invocation.channel, "Topic category already exists.")
        return

    await DiscordUtils.safe_send(invocation.channel, "Topic category added.")


async def see_topic_categories(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !seetopiccategories."""
    guild = invocation.guild
    rows = await context.topics.list_categories(guild.id)

    if not rows:
        await DiscordUtils.safe_send(invocation.channel, "No topic categories have been added yet.")
        return

    embed = discord.Embed(title="Supported Topic Categories", colour=TOPIC_CATEGORY_COLOUR)
    for row in rows:
        category = guild.get_channel(int(row["category_id"]))
        primary = guild.get_channel(int(row["primary_channel_id"]))

        embed.add_field(
            name=category.name if category else f"Unknown category ({row['category_id']})",
            value=f"Primary channel: #{primary.name}." if primary else "Primary channel: missing.",
            inline=False,
        )

    await DiscordUtils.safe_send(invocation.channel, embed=embed)


async def add_topic(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !addtopic topicName, categoryName."""
    topic_check = ValidationUtils.validate_name(args[0], "Topic name")
    if not topic_check:
        await DiscordUtils.safe_send(invocation.channel, f"{topic_check.error}.")
        return

    topic_name = topic_check.sanitized
    normalized = topic_name.lower()
    category_name = ValidationUtils.sanitize_input(args[1])
    guild = invocation.guild

    category = _find_category(guild, category_name)
    if category is None:
        await DiscordUtils.safe_send(
            invocation.channel,
            f"'{category_name}' does not correspond to a Discord channel category.",
        )
        return

    if not await context.topics.category_exists(category.id):
        await DiscordUtils.safe_send(
            invocation.channel,
            f"'{category_name}' is not a recognized topic category. "
            "Please add it with the !addtopiccategory command.",
        )
        return

    if await context.topics.topic_exists(guild.id, normalized):
        await DiscordUtils.safe_send(invocation.channel, f"'{topic_name}' already exists as a topic.")
        return

    try:
        topic_id = await context.topics.add_topic(guild.id, normalized, category.id)
    except DuplicateEntryError:
        await DiscordUtils.safe_send(invocation.channel, f"'{topic_name}' already exists as a topic.")
        return

    role = None
    try:
        role = await guild.create_role(name=topic_name, colour=TOPIC_ROLE_COLOUR)
        overwrites = {
            guild.default_role: discord.PermissionOverwrite(view_channel=False, send_messages=False),
            role: discord.PermissionOverwrite(view_channel=True, send_messages=True),
        }
        await guild.create_text_channel(topic_name, category=category, overwrites=overwrites)
    except discord.HTTPException:
        # Roll back the reserved topic row
        await context.topics.remove_topic(topic_id)
        if role is not None:
            await role.delete(reason=f"Creating topic '{topic_name}' failed")
        raise

    await context.topics.add_topic_role(role.id, topic_id)

    await DiscordUtils.safe_send(invocation.channel, "Topic added.")


class TopicsModule(BaseModule):
    """Module for topic management."""

    def setup_commands(self) -> List[Command]:
        roles = [self.context.commander_role]
        return [
            Command(
                ["addtopiccategory", "addtopiccat"],
                [Argument("categoryName", True), Argument("primaryChannelName", True)],
                roles,
                "Add a topic category. primaryChannelName has to be a channel in the category. "
                "Topic categories house the text channels of topics.",
                add_topic_category,
                guild_only=True,
            ),
            Command(
                ["seetopiccategories", "seetopiccats"],
                [],
                roles,
                "See all supported topic categories.",
                see_topic_categories,
                guild_only=True,
            ),
            Command(
                ["addtopic"],
                [Argument("topicName", True), Argument("categoryName", True)],
                roles,
                "Add a topic. topicName is the desired channel/role name and categoryName "
                "is the topic category it will belong to.",
                add_topic,
                guild_only=True,
            ),
        ]
