"""Game presets: how each challenge type drives the shared session engine."""

from dataclasses import dataclass, field
from typing import Dict, Optional

import config
from game.challenges import ChallengeKind
from game.scoring import ScoringRules


@dataclass(frozen=True)
class GameConfig:
    """Timings, lives and scoring for one game. All durations are in ticks."""
    name: str
    kind: ChallengeKind
    scoring: ScoringRules = field(default_factory=ScoringRules)
    countdown_ticks: int = config.CLICKER_COUNTDOWN_TICKS
    feedback_ticks: int = config.FEEDBACK_TICKS
    show_interval_ticks: int = 1
    initial_lives: Optional[int] = None  # None: not life-limited
    duration_ticks: Optional[int] = None  # None: no overall time limit
    base_step_ticks: Optional[int] = None  # None: no per-step deadline
    min_step_ticks: int = 1
    step_decay_per_level: int = 0
    level_up_every: Optional[int] = None  # correct answers per level; None keeps level 1
    description: str = ''

    def __post_init__(self):
        if self.countdown_ticks and not (
            config.MIN_COUNTDOWN_TICKS <= self.countdown_ticks <= config.MAX_COUNTDOWN_TICKS
        ):
            raise ValueError(
                f"countdown_ticks must be 0 or between {config.MIN_COUNTDOWN_TICKS} "
                f"and {config.MAX_COUNTDOWN_TICKS}"
            )
        if self.feedback_ticks < 0:
            raise ValueError("feedback_ticks must be >= 0")
        if self.show_interval_ticks < 0:
            raise ValueError("show_interval_ticks must be >= 0")
        if self.initial_lives is not None and self.initial_lives < 1:
            raise ValueError("initial_lives must be >= 1 or None")
        if self.duration_ticks is not None and self.duration_ticks < 1:
            raise ValueError("duration_ticks must be >= 1 or None")
        if self.base_step_ticks is not None and self.base_step_ticks < 1:
            raise ValueError("base_step_ticks must be >= 1 or None")
        if self.min_step_ticks < 1 or self.step_decay_per_level < 0:
            raise ValueError("min_step_ticks must be >= 1 and step_decay_per_level >= 0")
        if self.level_up_every is not None and self.level_up_every < 1:
            raise ValueError("level_up_every must be >= 1 or None")

    def step_ticks_for(self, level: int) -> Optional[int]:
        """Per-step deadline at `level`: shrinks with level, never below the floor."""
        if self.base_step_ticks is None:
            return None
        decayed = self.base_step_ticks - self.step_decay_per_level * (max(1, level) - 1)
        return max(self.min_step_ticks, decayed)


SPEED_CLICKER = GameConfig(
    name='speed_clicker',
    kind=ChallengeKind.REFLEX,
    scoring=ScoringRules(base_points=1),
    countdown_ticks=config.CLICKER_COUNTDOWN_TICKS,
    feedback_ticks=0,
    duration_ticks=config.CLICKER_DURATION_TICKS,
    description='Click as fast as you can before time runs out!',
)

MEMORY_CHAIN = GameConfig(
    name='memory_chain',
    kind=ChallengeKind.RECALL,
    scoring=ScoringRules(base_points=50, size_bonus=10),
    countdown_ticks=2,
    feedback_ticks=config.MEMORY_FEEDBACK_TICKS,
    show_interval_ticks=1,
    initial_lives=config.MEMORY_LIVES,
    base_step_ticks=config.MEMORY_BASE_STEP_TICKS,
    min_step_ticks=config.MEMORY_MIN_STEP_TICKS,
    step_decay_per_level=1,
    level_up_every=1,
    description='Watch the colour sequence, then repeat it back in order.',
)

WORD_BLITZ = GameConfig(
    name='word_blitz',
    kind=ChallengeKind.WORD,
    scoring=ScoringRules(base_points=10, size_bonus=2, streak_bonus_rate=5, streak_bonus_cap=50),
    countdown_ticks=3,
    duration_ticks=config.WORD_DURATION_TICKS,
    base_step_ticks=config.WORD_STEP_TICKS,
    description='Type each word before its timer runs out.',
)

NUMBER_NINJA = GameConfig(
    name='number_ninja',
    kind=ChallengeKind.ARITHMETIC,
    scoring=ScoringRules(
        base_points=25,
        speed_bonus_per_tick=10,
        speed_bonus_cap=50,
        streak_bonus_rate=15,
        streak_bonus_cap=100,
        level_bonus=10,
    ),
    countdown_ticks=config.MATH_COUNTDOWN_TICKS,
    duration_ticks=config.MATH_DURATION_TICKS,
    base_step_ticks=config.MATH_STEP_TICKS,
    description='Solve as many problems as you can.',
)

GAMES: Dict[str, GameConfig] = {
    game.name: game for game in (SPEED_CLICKER, MEMORY_CHAIN, WORD_BLITZ, NUMBER_NINJA)
}


def get_game(name: str) -> GameConfig:
    """Get a preset by name. Raises KeyError for unknown games."""
    return GAMES[name.lower()]
