"""Tournament roster, synthetic opponents and live ranking."""

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence

import config
from game.errors import InvalidTransition
from game.events import EventBus, RANKS_CHANGED, TOURNAMENT_FINISHED
from game.timers import CancellationGuard, TimerQueue

logger = logging.getLogger(__name__)


class TournamentStatus(str, Enum):
    WAITING = 'waiting'
    COUNTDOWN = 'countdown'
    ACTIVE = 'active'
    FINISHED = 'finished'


@dataclass
class Participant:
    """A tournament entrant, real or synthetic."""
    id: int
    display_name: str
    is_real: bool = False
    score: int = 0
    streak: int = 0
    rank: int = 0
    problems_correct: int = 0


@dataclass(frozen=True)
class SyntheticConfig:
    """Statistical shape of synthetic opponents."""
    score_probability: float = config.BOT_SCORE_PROBABILITY
    min_points: int = config.BOT_MIN_POINTS
    max_points: int = config.BOT_MAX_POINTS
    streak_keep_probability: float = config.BOT_STREAK_KEEP_PROBABILITY
    interval_ticks: int = config.BOT_INTERVAL_TICKS

    def __post_init__(self):
        if not 0.0 <= self.score_probability <= 1.0:
            raise ValueError("score_probability must be between 0 and 1")
        if not 0.0 <= self.streak_keep_probability <= 1.0:
            raise ValueError("streak_keep_probability must be between 0 and 1")
        if self.min_points < 0 or self.max_points < self.min_points:
            raise ValueError("point range must satisfy 0 <= min_points <= max_points")
        if self.interval_ticks < 1:
            raise ValueError("interval_ticks must be >= 1")


class Tournament:
    """Owns the roster of one tournament and recomputes ranks every tick."""

    def __init__(
        self,
        name: str = config.TOURNAMENT_NAME,
        duration_ticks: int = config.TOURNAMENT_DURATION_TICKS,
        prize_table: Optional[Sequence[str]] = None,
        countdown_ticks: int = config.TOURNAMENT_COUNTDOWN_TICKS,
        max_participants: int = config.TOURNAMENT_MAX_PLAYERS,
        synthetic: Optional[SyntheticConfig] = None,
        rng: Optional[random.Random] = None,
        events: Optional[EventBus] = None,
    ):
        if duration_ticks < 1:
            raise ValueError("duration_ticks must be >= 1")
        if countdown_ticks < 0 or max_participants < 1:
            raise ValueError("countdown_ticks must be >= 0 and max_participants >= 1")
        self.name = name
        self.duration_ticks = duration_ticks
        self.prize_table: List[str] = list(config.TOURNAMENT_PRIZES if prize_table is None else prize_table)
        self.countdown_ticks = countdown_ticks
        self.max_participants = max_participants
        self.synthetic = synthetic or SyntheticConfig()
        self.rng = rng or random.Random()
        self.events = events or EventBus()
        self.guard = CancellationGuard()
        self.timers = TimerQueue(self.guard)

        self.status = TournamentStatus.WAITING
        self.time_left_ticks = duration_ticks
        self.roster: List[Participant] = []
        self.prizes: Dict[int, str] = {}

    # Roster

    def join(self, participant: Participant) -> Participant:
        """Add a participant. Only legal while waiting; known ids are a no-op."""
        if self.status != TournamentStatus.WAITING:
            raise InvalidTransition('join', self.status.value)
        existing = self.get_participant(participant.id)
        if existing:
            return existing
        if len(self.roster) >= self.max_participants:
            raise InvalidTransition('join', 'full')
        self.roster.append(participant)
        logger.info(f"{participant.display_name} joined {self.name} ({len(self.roster)}/{self.max_participants})")
        return participant

    def get_participant(self, participant_id: int) -> Optional[Participant]:
        for participant in self.roster:
            if participant.id == participant_id:
                return participant
        return None

    def real_participants(self) -> List[Participant]:
        return [p for p in self.roster if p.is_real]

    # Lifecycle

    def start(self):
        """Waiting -> Countdown (or straight to Active without a countdown)."""
        if self.status != TournamentStatus.WAITING:
            raise InvalidTransition('start', self.status.value)
        self.guard.arm()
        if self.countdown_ticks:
            self.status = TournamentStatus.COUNTDOWN
            self.timers.schedule(self.countdown_ticks, 'countdown', self._activate)
        else:
            self._activate()

    def _activate(self):
        if self.status not in (TournamentStatus.WAITING, TournamentStatus.COUNTDOWN):
            return
        self.status = TournamentStatus.ACTIVE
        self.time_left_ticks = self.duration_ticks
        self.recompute_ranks()
        logger.info(f"{self.name} is live with {len(self.roster)} participants")

    def tick(self):
        """Advance one tick: timers, synthetic opponents, ranks, duration."""
        if self.status in (TournamentStatus.WAITING, TournamentStatus.FINISHED):
            return
        was_active = self.status == TournamentStatus.ACTIVE
        self.timers.advance()
        if not was_active:
            return

        if self.timers.now % self.synthetic.interval_ticks == 0:
            self.advance_synthetic(self.timers.now)
        self.recompute_ranks()

        self.time_left_ticks -= 1
        if self.time_left_ticks <= 0:
            self.time_left_ticks = 0
            self.finalize()

    def record_score(self, participant_id: int, score: int, streak: int, problems_correct: Optional[int] = None):
        """Update a real participant's numbers. Ignored unless active."""
        if self.status != TournamentStatus.ACTIVE:
            return
        participant = self.get_participant(participant_id)
        if participant is None:
            return
        participant.score = score
        participant.streak = streak
        if problems_correct is not None:
            participant.problems_correct = problems_correct

    def advance_synthetic(self, tick: int):
        """Move every synthetic participant by an independent random step."""
        if self.status != TournamentStatus.ACTIVE:
            return
        settings = self.synthetic
        for participant in self.roster:
            if participant.is_real:
                continue
            if self.rng.random() >= settings.score_probability:
                continue
            participant.score += self.rng.randint(settings.min_points, settings.max_points)
            participant.problems_correct += 1
            if self.rng.random() < settings.streak_keep_probability:
                participant.streak += 1
            else:
                participant.streak = 0
        logger.debug(f"[synthetic] tick={tick} scores={[p.score for p in self.roster]}")

    def recompute_ranks(self) -> List[Participant]:
        """Rank by score descending, ties to the lower id. Idempotent."""
        if not self.roster:
            return []
        if self.status == TournamentStatus.FINISHED:
            return self.ranked_roster()
        before = [(p.id, p.rank) for p in self.roster]
        ordered = sorted(self.roster, key=lambda p: (-p.score, p.id))
        for index, participant in enumerate(ordered):
            participant.rank = index + 1
        self.roster = ordered
        if [(p.id, p.rank) for p in self.roster] != before:
            self.events.emit(RANKS_CHANGED, roster=self.ranked_roster())
        return self.ranked_roster()

    def finalize(self) -> Dict[int, str]:
        """Active -> Finished: freeze the roster and hand out prizes by rank."""
        if self.status != TournamentStatus.ACTIVE:
            raise InvalidTransition('finalize', self.status.value)
        self.recompute_ranks()
        self.guard.invalidate()
        self.status = TournamentStatus.FINISHED
        self.prizes = {
            p.id: self.prize_table[p.rank - 1]
            for p in self.roster
            if p.rank <= len(self.prize_table)
        }
        logger.info(f"{self.name} finished; winner: {self.roster[0].display_name if self.roster else 'nobody'}")
        self.events.emit(TOURNAMENT_FINISHED, roster=self.ranked_roster(), prizes=dict(self.prizes))
        return dict(self.prizes)

    def reset(self):
        """Back to Waiting with zeroed scores; the roster is kept.

        A finished tournament is immutable; use `rematch()` to play again.
        """
        if self.status == TournamentStatus.FINISHED:
            raise InvalidTransition('reset', self.status.value)
        self.guard.invalidate()
        self.status = TournamentStatus.WAITING
        self.time_left_ticks = self.duration_ticks
        self.prizes = {}
        for participant in self.roster:
            participant.score = 0
            participant.streak = 0
            participant.problems_correct = 0
            participant.rank = 0

    def rematch(self) -> 'Tournament':
        """A new waiting tournament with the same settings and entrants."""
        fresh = Tournament(
            name=self.name,
            duration_ticks=self.duration_ticks,
            prize_table=self.prize_table,
            countdown_ticks=self.countdown_ticks,
            max_participants=self.max_participants,
            synthetic=self.synthetic,
            rng=self.rng,
            events=self.events,
        )
        for participant in sorted(self.roster, key=lambda p: p.id):
            fresh.join(Participant(participant.id, participant.display_name, participant.is_real))
        return fresh

    # Read side

    def ranked_roster(self) -> List[Participant]:
        """Copies of the roster in rank order."""
        return [replace(p) for p in sorted(self.roster, key=lambda p: (p.rank or len(self.roster) + 1, p.id))]

    def prize_for(self, participant_id: int) -> Optional[str]:
        return self.prizes.get(participant_id)
