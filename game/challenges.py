"""Challenge payloads and the generators that produce them."""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import config
from data.challenge_pools import COLORS, get_random_word, shortest_word_length
from game.errors import OutOfRangeInput
from utils.text_matching import fold_case, is_prefix, parse_integer, split_tokens

logger = logging.getLogger(__name__)


class ChallengeKind(str, Enum):
    REFLEX = 'reflex'
    RECALL = 'recall'
    WORD = 'word'
    ARITHMETIC = 'arithmetic'


class Verdict(str, Enum):
    CORRECT = 'correct'
    INCORRECT = 'incorrect'
    PARTIAL = 'partial'  # correct prefix, keep waiting
    TIMEOUT = 'timeout'
    SKIPPED = 'skipped'


def parse_answer(value: Any) -> int:
    """Parse a numeric answer, raising OutOfRangeInput for anything else."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return parse_integer(str(value))
    except ValueError as exc:
        raise OutOfRangeInput(str(exc)) from exc


@dataclass(frozen=True)
class Challenge:
    """One unit of play: shared envelope plus kind-specific content.

    `answer` is a tuple of colours (recall), a word, an int (arithmetic) or
    None (reflex). `expiry` is the absolute tick the step is forfeited at and
    is filled in when the challenge becomes answerable.
    """
    kind: ChallengeKind
    prompt: str
    answer: Any = None
    elements: Tuple[str, ...] = ()
    step_ticks: Optional[int] = None
    expiry: Optional[int] = None

    @property
    def size(self) -> int:
        """Length used for size bonuses: characters or sequence elements."""
        if self.kind in (ChallengeKind.RECALL, ChallengeKind.WORD):
            return len(self.answer)
        return 0

    def advance(self, progress: Any, value: Any) -> Tuple[Any, Verdict]:
        """Evaluate `value` against this challenge.

        Recall input accumulates on top of `progress`; typed words replace it
        (the value is the whole text typed so far, compared case-insensitively
        with punctuation kept). Returns the new progress and a verdict; PARTIAL
        means a correct prefix of the target.
        """
        if self.kind == ChallengeKind.REFLEX:
            return progress, Verdict.CORRECT

        if self.kind == ChallengeKind.ARITHMETIC:
            try:
                number = parse_answer(value)
            except OutOfRangeInput as exc:
                logger.debug(f"Malformed answer scored as incorrect: {exc}")
                return progress, Verdict.INCORRECT
            return number, Verdict.CORRECT if number == self.answer else Verdict.INCORRECT

        if self.kind == ChallengeKind.WORD:
            typed = fold_case(str(value))
            if typed == self.answer:
                return typed, Verdict.CORRECT
            if is_prefix(typed, self.answer):
                return typed, Verdict.PARTIAL
            return typed, Verdict.INCORRECT

        # Recall
        entered = tuple(progress or ()) + tuple(split_tokens(str(value)))
        if entered == tuple(self.answer):
            return entered, Verdict.CORRECT
        if is_prefix(entered, self.answer):
            return entered, Verdict.PARTIAL
        return entered, Verdict.INCORRECT


class ChallengeGenerator(ABC):
    """Base class: produces the next challenge for a level."""

    kind: ChallengeKind

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @abstractmethod
    def next(self, level: int, history_length: int, step_ticks: Optional[int] = None) -> Challenge:
        """Build the challenge for `level` after `history_length` completed ones."""


class ReflexGenerator(ChallengeGenerator):
    """Every challenge is "accept the next click"."""

    kind = ChallengeKind.REFLEX

    def next(self, level: int, history_length: int, step_ticks: Optional[int] = None) -> Challenge:
        return Challenge(kind=self.kind, prompt='Click!', step_ticks=step_ticks)


class RecallGenerator(ChallengeGenerator):
    """Colour sequences that grow by one element per level."""

    kind = ChallengeKind.RECALL

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        start_length: int = config.MEMORY_START_LENGTH,
        max_length: int = config.MEMORY_MAX_LENGTH,
        elements_per_tick: int = config.MEMORY_ELEMENTS_PER_TICK,
    ):
        super().__init__(rng)
        self.start_length = start_length
        self.max_length = max_length
        self.elements_per_tick = elements_per_tick

    def sequence_length(self, level: int, step_ticks: Optional[int] = None) -> int:
        """Length for `level`, capped so it can be entered before the deadline."""
        length = min(self.start_length + level - 1, self.max_length)
        if step_ticks:
            length = min(length, max(1, step_ticks * self.elements_per_tick))
        return length

    def next(self, level: int, history_length: int, step_ticks: Optional[int] = None) -> Challenge:
        length = self.sequence_length(level, step_ticks)
        sequence = tuple(self.rng.choice(COLORS) for _ in range(length))
        return Challenge(
            kind=self.kind,
            prompt=f"Repeat the {length} colours",
            answer=sequence,
            elements=sequence,
            step_ticks=step_ticks,
        )


class WordGenerator(ChallengeGenerator):
    """Words whose tier depends on how many words were already played."""

    kind = ChallengeKind.WORD

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        chars_per_tick: int = config.WORD_CHARS_PER_TICK,
        tier_thresholds: Optional[Dict[str, int]] = None,
    ):
        super().__init__(rng)
        # A one-tick deadline must still leave room for some word
        if chars_per_tick < shortest_word_length():
            raise ValueError(f"chars_per_tick must be >= {shortest_word_length()}")
        self.chars_per_tick = chars_per_tick
        self.tier_thresholds = tier_thresholds or dict(config.WORD_TIER_THRESHOLDS)

    def tier_for(self, history_length: int) -> str:
        tier = None
        for name, threshold in sorted(self.tier_thresholds.items(), key=lambda item: item[1]):
            if history_length >= threshold:
                tier = name
        return tier or min(self.tier_thresholds, key=self.tier_thresholds.get)

    def next(self, level: int, history_length: int, step_ticks: Optional[int] = None) -> Challenge:
        max_length = step_ticks * self.chars_per_tick if step_ticks else None
        word = get_random_word(self.tier_for(history_length), self.rng, max_length)
        return Challenge(kind=self.kind, prompt=word, answer=word, step_ticks=step_ticks)


class ArithmeticGenerator(ChallengeGenerator):
    """Arithmetic problems; operand ranges grow with the level."""

    kind = ChallengeKind.ARITHMETIC

    def _add_or_subtract(self, low1: int, high1: int, low2: int, high2: int) -> Tuple[str, int]:
        a = self.rng.randint(low1, high1)
        b = self.rng.randint(low2, high2)
        operation = self.rng.choice(['+', '-'])
        if operation == '-' and b > a:
            a, b = b, a
        answer = a + b if operation == '+' else a - b
        return f"{a} {operation} {b}", answer

    def _multiply(self, low: int, high: int) -> Tuple[str, int]:
        a = self.rng.randint(low, high)
        b = self.rng.randint(low, high)
        return f"{a} × {b}", a * b

    def next(self, level: int, history_length: int, step_ticks: Optional[int] = None) -> Challenge:
        if level <= 1:
            equation, answer = self._add_or_subtract(1, 20, 1, 20)
        elif level == 2:
            if self.rng.random() > 0.4:
                equation, answer = self._multiply(2, 13)
            else:
                equation, answer = self._add_or_subtract(10, 59, 5, 34)
        elif self.rng.choice(['+', '-', '×']) == '×':
            equation, answer = self._multiply(3, 17)
        else:
            equation, answer = self._add_or_subtract(20, 119, 10, 59)
        return Challenge(kind=self.kind, prompt=equation, answer=answer, step_ticks=step_ticks)


GENERATORS = {
    ChallengeKind.REFLEX: ReflexGenerator,
    ChallengeKind.RECALL: RecallGenerator,
    ChallengeKind.WORD: WordGenerator,
    ChallengeKind.ARITHMETIC: ArithmeticGenerator,
}


def create_generator(kind: ChallengeKind, rng: Optional[random.Random] = None) -> ChallengeGenerator:
    """Build the default generator for a challenge kind."""
    return GENERATORS[ChallengeKind(kind)](rng=rng)
