"""Game commands for solo timed challenges."""

import logging

import discord
from discord import app_commands
from discord.ext import commands, tasks

from bot.notifications import attach_notifications
from game.catalogue import get_game
from game.challenges import Verdict
from game.session import Phase
from game.session_manager import session_manager
from utils.embeds import (
    create_challenge_embed,
    create_game_list_embed,
    create_session_ended_embed,
    create_status_embed,
)
import config

logger = logging.getLogger(__name__)

GAME_CHOICES = [
    app_commands.Choice(name="Speed Clicker", value="speed_clicker"),
    app_commands.Choice(name="Memory Chain", value="memory_chain"),
    app_commands.Choice(name="Word Blitz", value="word_blitz"),
    app_commands.Choice(name="Number Ninja", value="number_ninja"),
]


def _keys(interaction: discord.Interaction):
    return str(interaction.user.id), str(interaction.channel_id)


class GameCommands(commands.Cog):
    """Game commands for timed challenges."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.ticker.change_interval(seconds=config.TICK_SECONDS)

    async def cog_load(self):
        self.ticker.start()

    async def cog_unload(self):
        self.ticker.cancel()

    @tasks.loop(seconds=1.0)
    async def ticker(self):
        """Clock source: one tick for every live session."""
        for managed in session_manager.tick_all():
            logger.info(f"Session {managed.session_id} finished for {managed.player_name}")

    @ticker.before_loop
    async def before_ticker(self):
        await self.bot.wait_until_ready()

    @app_commands.command(name="challenge_games", description="List the available games")
    async def games(self, interaction: discord.Interaction):
        """List the available games."""
        await interaction.response.send_message(embed=create_game_list_embed())

    @app_commands.command(name="challenge_start", description="Start a timed challenge")
    @app_commands.describe(game="Which game to play")
    @app_commands.choices(game=GAME_CHOICES)
    async def start(self, interaction: discord.Interaction, game: str):
        """Start a timed challenge in this channel."""
        player_id, channel_id = _keys(interaction)

        managed = session_manager.get_session(player_id, channel_id)
        if managed and not managed.is_over and managed.engine.phase != Phase.IDLE:
            await interaction.response.send_message(
                "❌ You already have a challenge running here! Use `/challenge_reset` first.",
                ephemeral=True
            )
            return

        if managed is None or managed.is_over or managed.game_name != get_game(game).name:
            if managed:
                session_manager.end_session(player_id, channel_id)
            managed = session_manager.create_session(
                channel_id=channel_id,
                server_id=str(interaction.guild_id) if interaction.guild_id else "DM",
                player_id=player_id,
                player_name=interaction.user.display_name,
                game_name=game,
            )
            attach_notifications(managed, interaction.channel)

        await interaction.response.send_message(
            f"🎮 **{managed.engine.game.name.replace('_', ' ').title()}** - "
            f"{managed.engine.game.description}\nAnswer by typing in this channel!"
        )
        managed.runner.start()

    @app_commands.command(name="challenge_answer", description="Answer the current challenge")
    @app_commands.describe(value="Your answer")
    async def answer(self, interaction: discord.Interaction, value: str):
        """Answer the current challenge."""
        managed = session_manager.get_session(*_keys(interaction))
        if not managed:
            await interaction.response.send_message("❌ You don't have a challenge running!", ephemeral=True)
            return

        verdict = managed.runner.submit_input(value)
        if verdict is None:
            await interaction.response.send_message("⏳ Not accepting answers right now.", ephemeral=True)
        else:
            await interaction.response.send_message(f"Answer: **{verdict.value}**", ephemeral=True)

    @app_commands.command(name="challenge_skip", description="Skip the current challenge (breaks your streak)")
    async def skip(self, interaction: discord.Interaction):
        """Skip the current challenge."""
        managed = session_manager.get_session(*_keys(interaction))
        if not managed or managed.runner.skip() is None:
            await interaction.response.send_message("❌ Nothing to skip right now.", ephemeral=True)
            return
        await interaction.response.send_message("⏭️ Skipped. Streak reset!", ephemeral=True)

    @app_commands.command(name="challenge_reset", description="Abandon the current round and go back to the lobby")
    async def reset(self, interaction: discord.Interaction):
        """Reset the current session to idle."""
        managed = session_manager.get_session(*_keys(interaction))
        if not managed:
            await interaction.response.send_message("❌ You don't have a session here!", ephemeral=True)
            return
        managed.runner.reset()
        await interaction.response.send_message("🔄 Reset. Use `/challenge_start` to play again.", ephemeral=True)

    @app_commands.command(name="challenge_status", description="Show your current challenge")
    async def status(self, interaction: discord.Interaction):
        """Show the live session."""
        managed = session_manager.get_session(*_keys(interaction))
        if not managed:
            await interaction.response.send_message("❌ You don't have a session here!", ephemeral=True)
            return

        session = managed.engine.session
        if session.phase == Phase.AWAITING_INPUT:
            embed = create_challenge_embed(managed.engine.game, session)
        else:
            embed = create_status_embed(managed.engine.game, session)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="challenge_leave", description="End your session in this channel")
    async def leave(self, interaction: discord.Interaction):
        """End the session and show its stats."""
        player_id, channel_id = _keys(interaction)
        managed = session_manager.get_session(player_id, channel_id)
        if not managed:
            await interaction.response.send_message("❌ You don't have a session here!", ephemeral=True)
            return

        # Snapshot before ending; ending resets the engine
        session = managed.engine.session
        levels = managed.engine.levels_completed
        session_manager.end_session(player_id, channel_id)

        embed = create_session_ended_embed(
            session.score,
            session.correct_count,
            session.challenges_completed,
            session.best_streak,
            levels
        )
        await interaction.response.send_message(embed=embed)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        """Treat plain chat messages as answers while a challenge is waiting."""
        if message.author.bot or not message.content:
            return

        managed = session_manager.get_session(str(message.author.id), str(message.channel.id))
        if not managed or managed.engine.phase != Phase.AWAITING_INPUT:
            return

        verdict = managed.runner.submit_input(message.content)
        if verdict == Verdict.PARTIAL:
            await message.add_reaction("➡️")


async def setup(bot: commands.Bot):
    """Load the cog."""
    await bot.add_cog(GameCommands(bot))
