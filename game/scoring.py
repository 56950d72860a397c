"""Scoring calculations for challenge answers."""

from dataclasses import dataclass, field
from typing import Dict

import config


@dataclass(frozen=True)
class ScoringRules:
    """Per-game scoring constants."""
    base_points: int = 1
    speed_bonus_per_tick: int = 0
    speed_bonus_cap: int = 0
    streak_bonus_rate: int = 0
    streak_bonus_cap: int = 0
    level_bonus: int = 0
    size_bonus: int = 0  # per element / character of the answer
    # Streak threshold -> multiplier applied to base points
    multiplier_tiers: Dict[int, int] = field(default_factory=lambda: dict(config.MULTIPLIER_TIERS))

    def __post_init__(self):
        values = (
            self.base_points, self.speed_bonus_per_tick, self.speed_bonus_cap,
            self.streak_bonus_rate, self.streak_bonus_cap, self.level_bonus, self.size_bonus,
        )
        if any(v < 0 for v in values):
            raise ValueError("scoring constants must be non-negative")
        if any(threshold < 1 or mult < 1 for threshold, mult in self.multiplier_tiers.items()):
            raise ValueError("multiplier tiers must map positive streaks to multipliers >= 1")


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one answer."""
    points: int
    streak: int
    multiplier: int
    life_lost: bool


def multiplier_for(streak: int, rules: ScoringRules) -> int:
    """Return the multiplier tier reached by `streak` (1 below the first tier)."""
    multiplier = 1
    for threshold in sorted(rules.multiplier_tiers):
        if streak >= threshold:
            multiplier = rules.multiplier_tiers[threshold]
    return multiplier


def score_answer(
    rules: ScoringRules,
    is_correct: bool,
    is_on_time: bool,
    streak_before: int,
    level: int,
    remaining_step_ticks: int = 0,
    size: int = 0,
) -> ScoreResult:
    """
    Score a single answer.

    Args:
        rules: Scoring constants of the game being played
        is_correct: Whether the answer matched the challenge
        is_on_time: Whether it arrived before the step deadline
        streak_before: Streak before this answer
        level: Current session level
        remaining_step_ticks: Ticks left on the step deadline when answered
        size: Length of the answered challenge (characters, elements)

    Returns:
        ScoreResult with awarded points, new streak and new multiplier
    """
    if not (is_correct and is_on_time):
        return ScoreResult(points=0, streak=0, multiplier=1, life_lost=True)

    # Multiplier earned so far applies to this answer's base points
    base = rules.base_points * multiplier_for(streak_before, rules)
    speed_bonus = min(max(0, remaining_step_ticks) * rules.speed_bonus_per_tick, rules.speed_bonus_cap)
    streak_bonus = min(streak_before * rules.streak_bonus_rate, rules.streak_bonus_cap)
    level_bonus = level * rules.level_bonus
    size_bonus = size * rules.size_bonus

    new_streak = streak_before + 1
    return ScoreResult(
        points=base + speed_bonus + streak_bonus + level_bonus + size_bonus,
        streak=new_streak,
        multiplier=multiplier_for(new_streak, rules),
        life_lost=False,
    )


def skip_result() -> ScoreResult:
    """An explicit skip breaks the streak without costing a life."""
    return ScoreResult(points=0, streak=0, multiplier=1, life_lost=False)
