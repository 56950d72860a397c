"""Discord bot client setup."""

import discord
from discord.ext import commands


def create_bot() -> commands.Bot:
    """Create and configure Discord bot."""
    # Players answer by typing in the channel, so message content is required
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True

    # command_prefix is required even though only slash commands are registered
    return commands.Bot(
        command_prefix='!',
        intents=intents,
        activity=discord.Game(name="/challenge_games"),
        description="Timed challenge games and arithmetic tournaments",
    )
