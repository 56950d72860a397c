"""Discord bot event handlers."""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from game.errors import InvalidTransition

logger = logging.getLogger(__name__)


def setup_events(bot: commands.Bot):
    """Set up event handlers for the bot."""
    
    @bot.event
    async def on_ready():
        """Called when bot is ready."""
        print(f"{bot.user} has connected to Discord!")
        print(f"Bot is in {len(bot.guilds)} guilds")
        
        # Sync to each guild for instant availability
        for guild in bot.guilds:
            try:
                bot.tree.copy_global_to(guild=guild)
                synced = await bot.tree.sync(guild=guild)
                print(f"Synced {len(synced)} command(s) to guild: {guild.name}")
            except discord.HTTPException as e:
                logger.warning(f"Failed to sync commands to {guild.name}: {e}")
        
        # Also sync globally (can take up to 1 hour)
        try:
            synced = await bot.tree.sync()
            print(f"Synced {len(synced)} command(s) globally to Discord")
        except discord.HTTPException as e:
            logger.warning(f"Failed to sync commands globally: {e}")
        
        print("Bot is ready!")
    
    @bot.event
    async def on_error(event, *args, **kwargs):
        """Handle errors."""
        logger.exception(f"Error in {event}")
    
    @bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Handle application command errors."""
        original = getattr(error, 'original', error)
        if isinstance(original, InvalidTransition):
            message = f"❌ Can't {original.operation} right now (game is {original.state})."
        elif isinstance(error, app_commands.CheckFailure):
            message = "You don't have permission to use this command."
        elif isinstance(error, app_commands.CommandOnCooldown):
            message = f"This command is on cooldown. Try again in {error.retry_after:.1f} seconds."
        else:
            logger.error("Unhandled app command error", exc_info=error)
            message = "An error occurred while executing this command."
        
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)
