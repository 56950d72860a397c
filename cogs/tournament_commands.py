"""Tournament commands: arithmetic sprint against synthetic opponents."""

import discord
from discord import app_commands
from discord.ext import commands

from bot.notifications import attach_notifications
from game.session_manager import session_manager
from utils.embeds import create_leaderboard_embed


class TournamentCommands(commands.Cog):
    """Competitive play commands."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="tournament_join", description="Join a Number Ninja tournament")
    async def join(self, interaction: discord.Interaction):
        """Join a tournament; it starts after a short countdown."""
        player_id = str(interaction.user.id)
        channel_id = str(interaction.channel_id)

        managed = session_manager.get_session(player_id, channel_id)
        if managed and not managed.is_over:
            await interaction.response.send_message(
                "❌ Finish or leave your current game first (`/challenge_leave`).",
                ephemeral=True
            )
            return
        if managed:
            session_manager.end_session(player_id, channel_id)

        managed = session_manager.create_session(
            channel_id=channel_id,
            server_id=str(interaction.guild_id) if interaction.guild_id else "DM",
            player_id=player_id,
            player_name=interaction.user.display_name,
            game_name='number_ninja',
            mode='tournament',
        )
        attach_notifications(managed, interaction.channel)

        tournament = managed.runner.tournament
        embed = create_leaderboard_embed(
            f"{tournament.name} - joining",
            tournament.ranked_roster(),
            tournament.time_left_ticks
        )
        embed.add_field(
            name="How to play",
            value="Type the answer to each problem in this channel. Fast answers and streaks score more!",
            inline=False
        )
        await interaction.response.send_message(embed=embed)
        managed.runner.start()

    @app_commands.command(name="tournament_leaderboard", description="Show the live tournament leaderboard")
    async def leaderboard(self, interaction: discord.Interaction):
        """Show the live ranked roster."""
        managed = session_manager.get_session(str(interaction.user.id), str(interaction.channel_id))
        if not managed or managed.mode != 'tournament':
            await interaction.response.send_message("❌ You're not in a tournament here!", ephemeral=True)
            return

        tournament = managed.runner.tournament
        embed = create_leaderboard_embed(
            f"{tournament.name} - {tournament.status.value}",
            tournament.ranked_roster(),
            tournament.time_left_ticks,
            tournament.prizes
        )
        await interaction.response.send_message(embed=embed)

    @app_commands.command(name="tournament_leave", description="Leave the tournament")
    async def leave(self, interaction: discord.Interaction):
        """Forfeit the tournament."""
        player_id = str(interaction.user.id)
        channel_id = str(interaction.channel_id)
        managed = session_manager.get_session(player_id, channel_id)
        if not managed or managed.mode != 'tournament':
            await interaction.response.send_message("❌ You're not in a tournament here!", ephemeral=True)
            return

        session_manager.end_session(player_id, channel_id)
        await interaction.response.send_message("👋 You left the tournament.", ephemeral=True)


async def setup(bot: commands.Bot):
    """Load the cog."""
    await bot.add_cog(TournamentCommands(bot))
