import os
import random
import sys
from dataclasses import replace

import pytest

# Ensure the project root (containing `game`, `data`, `utils`) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from game.catalogue import GameConfig
from game.challenges import Challenge, ChallengeGenerator, ChallengeKind
from game.events import EventBus
from game.scoring import ScoringRules
from game.session import SessionEngine


class ScriptedGenerator(ChallengeGenerator):
    """Always hands out the same challenge and records how it was asked."""

    def __init__(self, kind=ChallengeKind.ARITHMETIC, answer=7, elements=()):
        super().__init__(random.Random(0))
        self.kind = kind
        self.answer = answer
        self.elements = tuple(elements)
        self.calls = []

    def next(self, level, history_length, step_ticks=None):
        self.calls.append((level, history_length, step_ticks))
        return Challenge(
            kind=self.kind,
            prompt=str(self.answer),
            answer=self.answer,
            elements=self.elements,
            step_ticks=step_ticks,
        )


class EventRecorder:
    """Subscribes to every event name it is given and keeps the payloads."""

    def __init__(self, bus, *names):
        self.received = []
        for name in names:
            bus.subscribe(name, self._handler(name))

    def _handler(self, name):
        def handle(**payload):
            self.received.append((name, payload))
        return handle

    def named(self, name):
        return [payload for event, payload in self.received if event == name]


MATH_RULES = ScoringRules(
    base_points=25,
    speed_bonus_per_tick=10,
    speed_bonus_cap=50,
    streak_bonus_rate=15,
    streak_bonus_cap=100,
    level_bonus=10,
)


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def math_rules():
    return MATH_RULES


@pytest.fixture()
def math_game():
    return GameConfig(
        name='math_test',
        kind=ChallengeKind.ARITHMETIC,
        scoring=MATH_RULES,
        countdown_ticks=0,
        feedback_ticks=1,
        base_step_ticks=6,
    )


@pytest.fixture()
def recall_game():
    return GameConfig(
        name='recall_test',
        kind=ChallengeKind.RECALL,
        scoring=ScoringRules(base_points=50, size_bonus=10),
        countdown_ticks=2,
        feedback_ticks=1,
        show_interval_ticks=1,
        initial_lives=3,
        base_step_ticks=10,
        level_up_every=1,
    )


@pytest.fixture()
def make_engine(math_game):
    """Build an engine around a scripted generator; keyword args override the game."""
    def factory(game=None, generator=None, **overrides):
        game = replace(game or math_game, **overrides)
        return SessionEngine(game, generator=generator or ScriptedGenerator(), events=EventBus())
    return factory


def run_ticks(engine, count):
    for _ in range(count):
        engine.tick()
