"""Timed challenge session: data and state machine."""

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from game.catalogue import GameConfig
from game.challenges import Challenge, ChallengeGenerator, Verdict, create_generator
from game.errors import InvalidTransition
from game.events import EventBus, PHASE_CHANGED, SCORE_CHANGED, SESSION_FINISHED
from game.scoring import score_answer, skip_result
from game.timers import CancellationGuard, TimerQueue

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = 'idle'
    COUNTDOWN = 'countdown'
    SHOWING = 'showing'
    AWAITING_INPUT = 'awaiting_input'
    FEEDBACK = 'feedback'
    FINISHED = 'finished'


# Phases in which the overall session clock runs
PLAYING_PHASES = (Phase.SHOWING, Phase.AWAITING_INPUT, Phase.FEEDBACK)


@dataclass
class Session:
    """State of one round for one participant."""
    phase: Phase = Phase.IDLE

    # Score state
    score: int = 0
    streak: int = 0
    best_streak: int = 0
    multiplier: int = 1
    lives: Optional[int] = None  # None: unlimited
    level: int = 1

    # Current challenge
    active_challenge: Optional[Challenge] = None
    progress: Any = None
    showing_index: Optional[int] = None
    last_verdict: Optional[Verdict] = None

    # Clock (absolute ticks)
    now: int = 0
    countdown_deadline: Optional[int] = None
    per_step_deadline: Optional[int] = None
    time_left_ticks: Optional[int] = None
    generation: int = 0

    # Stats for this session
    challenges_completed: int = 0
    correct_count: int = 0

    @classmethod
    def initial(cls, game: GameConfig, generation: int = 0, now: int = 0) -> 'Session':
        return cls(
            lives=game.initial_lives,
            time_left_ticks=game.duration_ticks,
            generation=generation,
            now=now,
        )

    @property
    def step_ticks_left(self) -> Optional[int]:
        if self.per_step_deadline is None:
            return None
        return max(0, self.per_step_deadline - self.now)

    @property
    def countdown_left(self) -> Optional[int]:
        if self.phase != Phase.COUNTDOWN or self.countdown_deadline is None:
            return None
        return max(0, self.countdown_deadline - self.now)

    @property
    def showing_element(self) -> Optional[str]:
        if self.phase != Phase.SHOWING or self.active_challenge is None or self.showing_index is None:
            return None
        return self.active_challenge.elements[self.showing_index]


class SessionEngine:
    """Drives a Session from Idle to Finished.

    Only `tick()` moves time forward. Every timer is scheduled through the
    engine's TimerQueue and tagged with the current generation, so callbacks
    left over from before a `reset()` or a finish never touch the new state.
    """

    def __init__(
        self,
        game: GameConfig,
        generator: Optional[ChallengeGenerator] = None,
        rng: Optional[random.Random] = None,
        events: Optional[EventBus] = None,
    ):
        self.game = game
        self.generator = generator or create_generator(game.kind, rng)
        self.events = events or EventBus()
        self.guard = CancellationGuard()
        self.timers = TimerQueue(self.guard)
        self._state = Session.initial(game)

    @property
    def session(self) -> Session:
        """Read-only snapshot of the current state."""
        return replace(self._state, now=self.timers.now)

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def levels_completed(self) -> int:
        if self.game.level_up_every:
            return self._state.level - 1
        return self._state.correct_count

    # Public entry points

    def start(self):
        """Begin a round. Only legal from Idle."""
        if self._state.phase != Phase.IDLE:
            raise InvalidTransition('start', self._state.phase.value)

        generation = self.guard.arm()
        self._state = Session.initial(self.game, generation, self.timers.now)
        logger.info(f"Session started: game={self.game.name} generation={generation}")

        if self.game.countdown_ticks:
            self._state.countdown_deadline = self.timers.now + self.game.countdown_ticks
            self._set_phase(Phase.COUNTDOWN)
            self.timers.schedule(self.game.countdown_ticks, 'countdown', self._on_countdown_done)
        else:
            self._next_challenge()

    def submit_input(self, value: Any) -> Optional[Verdict]:
        """Evaluate an answer. Ignored (returns None) unless awaiting input.

        A correct prefix of a multi-part answer returns PARTIAL and keeps the
        session waiting for the rest.
        """
        state = self._state
        if state.phase != Phase.AWAITING_INPUT:
            logger.debug(f"Input ignored in phase {state.phase.value}")
            return None

        progress, verdict = state.active_challenge.advance(state.progress, value)
        state.progress = progress
        if verdict == Verdict.PARTIAL:
            return verdict

        self._resolve(verdict)
        return verdict

    def skip(self) -> Optional[Verdict]:
        """Give up on the current challenge: streak resets, no life is lost."""
        if self._state.phase != Phase.AWAITING_INPUT:
            return None
        self._resolve(Verdict.SKIPPED)
        return Verdict.SKIPPED

    def tick(self):
        """Advance the clock one tick.

        Due timers (countdown, sequence display, step deadline, feedback)
        fire first, then the overall session clock runs down. Input submitted
        before this call has already been applied, so it wins over a deadline
        crossed on this tick.
        """
        state = self._state
        if state.phase in (Phase.IDLE, Phase.FINISHED):
            return

        was_playing = state.phase in PLAYING_PHASES
        generation = state.generation
        self.timers.advance()

        # A timer may have finished the session
        if not self.guard.is_current(generation):
            return

        if was_playing and state.time_left_ticks is not None:
            state.time_left_ticks -= 1
            if state.time_left_ticks <= 0:
                state.time_left_ticks = 0
                self._finish('time_up')

    def reset(self):
        """Return to Idle from any phase, invalidating every pending timer."""
        previous = self._state.phase
        generation = self.guard.invalidate()
        self._state = Session.initial(self.game, generation, self.timers.now)
        logger.info(f"Session reset: game={self.game.name} generation={generation}")
        if previous != Phase.IDLE:
            self.events.emit(PHASE_CHANGED, previous=previous, phase=Phase.IDLE)

    def end(self):
        """Finish early, e.g. when the owning tournament ends."""
        if self._state.phase in (Phase.IDLE, Phase.FINISHED):
            return
        self._finish('ended')

    # Transitions

    def _set_phase(self, phase: Phase):
        previous = self._state.phase
        if previous == phase:
            return
        self._state.phase = phase
        logger.debug(f"[phase] {previous.value} -> {phase.value} tick={self.timers.now}")
        self.events.emit(PHASE_CHANGED, previous=previous, phase=phase)

    def _on_countdown_done(self):
        if self._state.phase != Phase.COUNTDOWN:
            return
        self._state.countdown_deadline = None
        self._next_challenge()

    def _next_challenge(self):
        state = self._state
        step_ticks = self.game.step_ticks_for(state.level)
        challenge = self.generator.next(state.level, state.challenges_completed, step_ticks)
        state.active_challenge = challenge
        state.progress = None

        if challenge.elements and self.game.show_interval_ticks:
            state.showing_index = 0
            self._set_phase(Phase.SHOWING)
            self.timers.schedule(self.game.show_interval_ticks, 'show', self._show_next)
        else:
            self._await_input()

    def _show_next(self):
        state = self._state
        if state.phase != Phase.SHOWING:
            return
        state.showing_index += 1
        if state.showing_index >= len(state.active_challenge.elements):
            state.showing_index = None
            self._await_input()
        else:
            self.timers.schedule(self.game.show_interval_ticks, 'show', self._show_next)

    def _await_input(self):
        state = self._state
        step_ticks = state.active_challenge.step_ticks
        if step_ticks:
            state.per_step_deadline = self.timers.now + step_ticks
            state.active_challenge = replace(state.active_challenge, expiry=state.per_step_deadline)
            self.timers.schedule(step_ticks, 'deadline', self._on_deadline)
        else:
            state.per_step_deadline = None
        self._set_phase(Phase.AWAITING_INPUT)

    def _on_deadline(self):
        if self._state.phase != Phase.AWAITING_INPUT:
            return
        self._resolve(Verdict.TIMEOUT)

    def _resolve(self, verdict: Verdict):
        """Score a final verdict and move to Feedback (or Finished)."""
        state = self._state
        challenge = state.active_challenge
        self.timers.cancel('deadline')

        if verdict == Verdict.SKIPPED:
            result = skip_result()
        else:
            remaining = 0
            if state.per_step_deadline is not None:
                remaining = max(0, state.per_step_deadline - self.timers.now)
            result = score_answer(
                self.game.scoring,
                is_correct=verdict == Verdict.CORRECT,
                is_on_time=verdict != Verdict.TIMEOUT,
                streak_before=state.streak,
                level=state.level,
                remaining_step_ticks=remaining,
                size=challenge.size,
            )

        state.score += result.points
        state.streak = result.streak
        state.best_streak = max(state.best_streak, state.streak)
        state.multiplier = result.multiplier
        if result.life_lost and state.lives is not None:
            state.lives = max(0, state.lives - 1)

        state.challenges_completed += 1
        state.last_verdict = verdict
        state.per_step_deadline = None
        if verdict == Verdict.CORRECT:
            state.correct_count += 1
            if self.game.level_up_every and state.correct_count % self.game.level_up_every == 0:
                state.level += 1

        logger.debug(
            f"[answer] {verdict.value} points={result.points} score={state.score} "
            f"streak={state.streak} lives={state.lives}"
        )
        if result.points:
            self.events.emit(
                SCORE_CHANGED,
                score=state.score,
                points=result.points,
                streak=state.streak,
                multiplier=state.multiplier,
            )

        if state.lives == 0:
            self._finish('out_of_lives')
            return

        if self.game.feedback_ticks:
            self._set_phase(Phase.FEEDBACK)
            self.timers.schedule(self.game.feedback_ticks, 'feedback', self._after_feedback)
        else:
            self._next_challenge()

    def _after_feedback(self):
        if self._state.phase != Phase.FEEDBACK:
            return
        self._next_challenge()

    def _finish(self, reason: str):
        state = self._state
        state.generation = self.guard.invalidate()
        state.per_step_deadline = None
        state.countdown_deadline = None
        state.showing_index = None
        self._set_phase(Phase.FINISHED)
        logger.info(
            f"Session finished: game={self.game.name} reason={reason} "
            f"score={state.score} best_streak={state.best_streak}"
        )
        self.events.emit(
            SESSION_FINISHED,
            final_score=state.score,
            levels_completed=self.levels_completed,
            best_streak=state.best_streak,
            correct=state.correct_count,
            attempted=state.challenges_completed,
            reason=reason,
        )
