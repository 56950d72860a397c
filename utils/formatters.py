"""Text formatting helpers."""

from typing import Optional


def format_ticks(ticks: Optional[int], tick_seconds: float = 1.0) -> str:
    """Format a tick count as a readable duration ("∞" for no limit)."""
    if ticks is None:
        return "∞"
    seconds = ticks * tick_seconds
    if seconds < 60:
        return f"{seconds:.0f}s"
    mins = int(seconds // 60)
    secs = seconds % 60
    return f"{mins}m {secs:02.0f}s"


def format_score(score: int) -> str:
    """Format score with commas."""
    return f"{score:,}"


def format_lives(lives: Optional[int]) -> str:
    """Format remaining lives as hearts."""
    if lives is None:
        return "∞"
    return "❤️" * lives if lives else "💀"


def format_rank(rank: int) -> str:
    """Format a leaderboard rank with medals for the podium."""
    medals = {1: "🥇", 2: "🥈", 3: "🥉"}
    return medals.get(rank, f"#{rank}")

