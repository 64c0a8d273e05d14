"""
Management Module
Commands for managing the ignored user list
"""

from typing import List

from prism.commands.base_module import BaseModule, ModuleContext
from prism.commands.command import Argument, Command, Invocation
from prism.utils.discord import DiscordUtils
from prism.utils.errors import DatabaseError
from prism.utils.error_handler import get_error_handler
from prism.utils.validation import ValidationUtils

INVALID_USER_ID_MESSAGE = "Invalid user id."
STORAGE_FAILED_MESSAGE = "Unable to update the ignored user list."


async def add_ignored_user(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !addignoreduser userId."""
    validation = ValidationUtils.validate_user_id(args[0])
    if not validation:
        await DiscordUtils.safe_send(invocation.channel, INVALID_USER_ID_MESSAGE)
        return

    user_id = validation.sanitized
    if user_id in context.ignored_users:
        await DiscordUtils.safe_send(invocation.channel, "User is already on the ignored list.")
        return

    try:
        await context.ignored_users.add(user_id)
    except DatabaseError as error:
        get_error_handler().handle_exception(error, "addignoreduser")
        await DiscordUtils.safe_send(invocation.channel, STORAGE_FAILED_MESSAGE)
        return

    await DiscordUtils.safe_send(invocation.channel, "User added to ignore list.")


async def remove_ignored_user(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    """Handle !removeignoreduser userId."""
    validation = ValidationUtils.validate_user_id(args[0])
    if not validation:
        await DiscordUtils.safe_send(invocation.channel, INVALID_USER_ID_MESSAGE)
        return

    user_id = validation.sanitized
    if user_id not in context.ignored_users:
        await DiscordUtils.safe_send(invocation.channel, "User is not on the ignored list.")
        return

    try:
        await context.ignored_users.remove(user_id)
    except DatabaseError as error:
        get_error_handler().handle_exception(error, "removeignoreduser")
        await DiscordUtils.safe_send(invocation.channel, STORAGE_FAILED_MESSAGE)
        return

    await DiscordUtils.safe_send(invocation.channel, "User removed from ignore list.")


class ManagementModule(BaseModule):
    """Module for management commands."""

    def setup_commands(self) -> List[Command]:
        roles = [self.context.commander_role]
        return [
            Command(
                ["addignoreduser", "aiu"],
                [Argument("userId", True)],
                roles,
                "Add a user to the ignored user list by id.",
                add_ignored_user,
            ),
            Command(
                ["removeignoreduser", "riu"],
                [Argument("userId", True)],
                roles,
                "Remove a user from the ignored user list by id.",
                remove_ignored_user,
            ),
        ]
