"""Relays engine notifications to a Discord channel."""

import asyncio
import logging
from typing import Set

import discord

import config
from data.challenge_pools import COLOR_EMOJI
from game.events import ARENA_FINISHED, PHASE_CHANGED, SESSION_FINISHED
from game.session import Phase
from game.session_manager import ManagedSession
from utils.embeds import create_challenge_embed, create_session_ended_embed

logger = logging.getLogger(__name__)

# Strong references to in-flight sends until they complete
_pending_sends: Set[asyncio.Task] = set()


def _send(channel: discord.abc.Messageable, **kwargs):
    """Fire-and-forget send from a synchronous engine callback."""
    task = asyncio.get_running_loop().create_task(channel.send(**kwargs))
    _pending_sends.add(task)
    task.add_done_callback(_on_sent)


def _on_sent(task: asyncio.Task):
    _pending_sends.discard(task)
    if not task.cancelled() and task.exception():
        logger.warning(f"Failed to deliver notification: {task.exception()}")


def attach_notifications(managed: ManagedSession, channel: discord.abc.Messageable):
    """Subscribe a channel to a session's phase and finish notifications."""
    engine = managed.engine
    mention = f"<@{managed.player_id}>"

    def on_phase_changed(previous: Phase, phase: Phase):
        session = engine.session
        if phase == Phase.COUNTDOWN:
            _send(channel, content=f"⏳ {mention} get ready... starting in {session.countdown_left}!")
        elif phase == Phase.SHOWING:
            sequence = session.active_challenge.elements
            shown_for = len(sequence) * engine.game.show_interval_ticks * config.TICK_SECONDS
            _send(
                channel,
                content=f"👀 Memorize: {' '.join(COLOR_EMOJI.get(c, c) for c in sequence)}",
                delete_after=shown_for,
            )
        elif phase == Phase.AWAITING_INPUT and (engine.game.feedback_ticks or previous == Phase.COUNTDOWN):
            # Games without feedback stay in AwaitingInput between challenges
            _send(channel, embed=create_challenge_embed(engine.game, session))
        elif phase == Phase.FEEDBACK:
            verdict = session.last_verdict.value if session.last_verdict else ''
            icon = "✅" if verdict == 'correct' else "❌"
            _send(channel, content=f"{icon} {verdict} | score {session.score:,} | streak {session.streak}")

    def on_session_finished(final_score, levels_completed, best_streak, correct, attempted, reason):
        if managed.mode == 'tournament':
            return  # reported with the final rank instead
        _send(channel, content=mention, embed=create_session_ended_embed(
            final_score, correct, attempted, best_streak, levels_completed
        ))

    def on_arena_finished(final_score, final_rank, prize):
        session = engine.session
        _send(channel, content=mention, embed=create_session_ended_embed(
            final_score, session.correct_count, session.challenges_completed,
            session.best_streak, engine.levels_completed, final_rank, prize
        ))

    managed.events.subscribe(PHASE_CHANGED, on_phase_changed)
    managed.events.subscribe(SESSION_FINISHED, on_session_finished)
    managed.events.subscribe(ARENA_FINISHED, on_arena_finished)
