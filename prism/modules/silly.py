"""
Silly Module
"""

from typing import List

from prism.commands.base_module import BaseModule, ModuleContext
from prism.commands.command import Command, Invocation
from prism.utils.discord import DiscordUtils

POWER_GIF_URL = "https://giphy.com/gifs/power-highqualitygifs-unlimited-hokMyu1PAKfJK"


async def unlimited_power(invocation: Invocation, args: List[str], context: ModuleContext) -> None:
    await DiscordUtils.safe_send(invocation.channel, POWER_GIF_URL)


class SillyModule(BaseModule):
    """Module for silly commands."""

    def setup_commands(self) -> List[Command]:
        return [
            Command(["power", "p"], help_text="U N L I M I T E D P O W E R", action=unlimited_power),
        ]
