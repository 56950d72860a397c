"""Discord embed builders for bot responses."""

import discord
from typing import Dict, List, Optional

import config
from game.catalogue import GameConfig, GAMES
from game.challenges import ChallengeKind
from game.session import Phase, Session
from game.tournament import Participant
from utils.formatters import format_lives, format_rank, format_score, format_ticks


def create_game_list_embed() -> discord.Embed:
    """Create embed listing the available games."""
    embed = discord.Embed(
        title="🎮 Challenge Sprint Games",
        color=discord.Color.blue()
    )
    for game in GAMES.values():
        embed.add_field(
            name=game.name.replace('_', ' ').title(),
            value=(
                f"{game.description}\n"
                f"Time: {format_ticks(game.duration_ticks, config.TICK_SECONDS)} | "
                f"Lives: {format_lives(game.initial_lives)}"
            ),
            inline=False
        )
    embed.set_footer(text="Use /challenge_start <game> to play!")
    return embed


def create_challenge_embed(game: GameConfig, session: Session) -> discord.Embed:
    """Create embed for the challenge currently awaiting an answer."""
    challenge = session.active_challenge
    embed = discord.Embed(
        title=f"⚡ {game.name.replace('_', ' ').title()}",
        color=discord.Color.orange()
    )
    if challenge is None:
        return embed

    if challenge.kind == ChallengeKind.RECALL:
        value = "Type the colours in order, e.g. `red blue green`"
    elif challenge.kind == ChallengeKind.REFLEX:
        value = "Send anything to click! Every message counts."
    else:
        value = f"**{challenge.prompt}**"
    embed.add_field(name="Your challenge", value=value, inline=False)

    if session.per_step_deadline is not None:
        embed.add_field(
            name="Time for this one",
            value=format_ticks(session.step_ticks_left, config.TICK_SECONDS),
            inline=True
        )
    embed.add_field(name="Score", value=format_score(session.score), inline=True)
    embed.add_field(name="Streak", value=f"{session.streak} ({session.multiplier}x)", inline=True)
    if session.lives is not None:
        embed.add_field(name="Lives", value=format_lives(session.lives), inline=True)
    return embed


def create_status_embed(game: GameConfig, session: Session) -> discord.Embed:
    """Create embed summarising a live session."""
    embed = discord.Embed(
        title=f"📊 {game.name.replace('_', ' ').title()} - {session.phase.value.replace('_', ' ')}",
        color=discord.Color.blue()
    )
    embed.add_field(name="Score", value=format_score(session.score), inline=True)
    embed.add_field(name="Level", value=str(session.level), inline=True)
    embed.add_field(name="Lives", value=format_lives(session.lives), inline=True)
    embed.add_field(
        name="Streak",
        value=f"{session.streak} (best {session.best_streak}, {session.multiplier}x)",
        inline=True
    )
    if session.phase == Phase.COUNTDOWN:
        embed.add_field(name="Starting in", value=format_ticks(session.countdown_left, config.TICK_SECONDS), inline=True)
    else:
        embed.add_field(name="Time Left", value=format_ticks(session.time_left_ticks, config.TICK_SECONDS), inline=True)
    return embed


def create_session_ended_embed(
    final_score: int,
    correct: int,
    attempted: int,
    best_streak: int,
    levels_completed: int,
    final_rank: Optional[int] = None,
    prize: Optional[str] = None
) -> discord.Embed:
    """Create embed for session ended message."""
    embed = discord.Embed(
        title="🏁 Session Over",
        color=discord.Color.green()
    )

    accuracy = (correct / attempted * 100) if attempted > 0 else 0

    embed.add_field(
        name="Session Stats",
        value=(
            f"**Answered:** {attempted}\n"
            f"**Accuracy:** {accuracy:.1f}% ({correct}/{attempted})\n"
            f"**Best Streak:** {best_streak}\n"
            f"**Levels:** {levels_completed}\n"
            f"**Final Score:** {format_score(final_score)} points"
        ),
        inline=False
    )

    if final_rank is not None:
        embed.add_field(name="Final Rank", value=format_rank(final_rank), inline=True)
    if prize:
        embed.add_field(name="Prize", value=prize, inline=True)

    embed.set_footer(text="Play again? Use /challenge_start!")
    return embed


def create_leaderboard_embed(
    title: str,
    roster: List[Participant],
    time_left_ticks: Optional[int] = None,
    prizes: Optional[Dict[int, str]] = None
) -> discord.Embed:
    """Create embed for a live tournament leaderboard."""
    embed = discord.Embed(
        title=f"🏆 {title}",
        color=discord.Color.gold()
    )

    if not roster:
        embed.description = "No participants yet."
        return embed

    lines = []
    for participant in roster:
        name = f"**{participant.display_name}**" if participant.is_real else participant.display_name
        line = (
            f"{format_rank(participant.rank)} {name} - {format_score(participant.score)} pts "
            f"(🔥 {participant.streak})"
        )
        if prizes and participant.id in prizes:
            line += f" {prizes[participant.id]}"
        lines.append(line)
    embed.description = "\n".join(lines)

    if time_left_ticks is not None:
        embed.set_footer(text=f"Time left: {format_ticks(time_left_ticks, config.TICK_SECONDS)}")
    return embed
