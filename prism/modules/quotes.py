"""
Quotes Module
Save messages as quotes and recite them later
"""

import random
from typing import Any, List, Optional

import discord

from prism.commands.base_module import BaseModule, ModuleContext
from prism.commands.command import Argument, Command, Invocation
from prism.utils.discord import DiscordUtils
from prism.utils.errors import DuplicateEntryError
from prism.utils.validation import ValidationUtils

NO_QUOTE_MESSAGE = "No quote found!"
NO_QUOTES_MESSAGE = "No quotes found for this server!"
INVALID_QUOTE_MESSAGE = "Invalid message to quote. It's either from this bot or a duplicate quote."
INVALID_MESSAGE_ID_MESSAGE = "Invalid message id."
QUOTE_ADDED_MESSAGE = "Quote added!"
MISSING_SOURCE_MESSAGE = "That quote's message no longer exists."


async def save_quote(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !savequote [messageId]."""
    message_id = args[0] if args else ""

    if not message_id:
        target = await _previous_message(invocation)
    else:
        validation = ValidationUtils.validate_message_id(message_id)
        if not validation:
            await DiscordUtils.safe_send(invocation.channel, INVALID_MESSAGE_ID_MESSAGE)
            return
        try:
            target = await invocation.channel.fetch_message(validation.value)
        except discord.NotFound:
            target = None

    if target is None:
        await DiscordUtils.safe_send(invocation.channel, NO_QUOTE_MESSAGE)
        return

    if not await _is_quotable(target, context):
        await DiscordUtils.safe_send(invocation.channel, INVALID_QUOTE_MESSAGE)
        return

    try:
        await context.quotes.add(
            guild_id=invocation.guild.id,
            author_id=target.author.id,
            channel_id=target.channel.id,
            message_id=target.id,
        )
    except DuplicateEntryError:
        # Lost the race against a concurrent save of the same message
        await DiscordUtils.safe_send(invocation.channel, INVALID_QUOTE_MESSAGE)
        return

    await DiscordUtils.safe_send(invocation.channel, QUOTE_ADDED_MESSAGE)


async def get_quote(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !quote [author]."""
    author = args[0] if args else ""

    if not author:
        await say_random(invocation, [], context)
        return

    member = DiscordUtils.find_member(invocation.guild, author)
    if member is None:
        await DiscordUtils.safe_send(invocation.channel, NO_QUOTE_MESSAGE)
        return

    await _recite_random(invocation, context, author_id=member.id)


async def say_random(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !random."""
    await _recite_random(invocation, context)


async def _previous_message(invocation: Invocation) -> Optional[Any]:
    """Get the message sent right before the command, if any."""
    async for message in invocation.channel.history(limit=1, before=invocation.message):
        return message
    return None


async def _is_quotable(message: Any, context: ModuleContext) -> bool:
    """Messages of the bot itself and already quoted messages are rejected."""
    if context.bot_user_id is not None and message.author.id == context.bot_user_id:
        return False
    return not await context.quotes.is_quoted(message.id)


async def _recite_random(
    invocation: Invocation,
    context: ModuleContext,
    author_id: Optional[Any] = None,
) -> None:
    rows = await context.quotes.list_for_guild(invocation.guild.id, author_id)
    if not rows:
        await DiscordUtils.safe_send(invocation.channel, NO_QUOTES_MESSAGE)
        return

    row = random.choice(rows)

    channel = invocation.guild.get_channel(int(row["channel_id"])) or invocation.channel
    try:
        message = await channel.fetch_message(int(row["message_id"]))
    except discord.NotFound:
        await DiscordUtils.safe_send(invocation.channel, MISSING_SOURCE_MESSAGE)
        return

    await DiscordUtils.safe_send(invocation.channel, embed=DiscordUtils.build_quote_embed(message))


class QuotesModule(BaseModule):
    """Module for quote management."""

    def setup_commands(self) -> List[Command]:
        return [
            Command(
                ["savequote", "sq"],
                [Argument("messageId")],
                help_text=(
                    "savequote will save the preceding message as a quote. "
                    "You can specify an optional message id."
                ),
                action=save_quote,
                guild_only=True,
            ),
            Command(
                ["quote", "getquote", "q"],
                [Argument("author")],
                help_text=(
                    "quote will attempt to say a random quote. You can specify an optional author. "
                    "The provided author string can be either a nickname or a username."
                ),
                action=get_quote,
                guild_only=True,
            ),
            Command(
                ["random", "r"],
                help_text="random will ... say a random quote. Come on.",
                action=say_random,
                guild_only=True,
            ),
        ]
