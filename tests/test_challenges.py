import random

import pytest

from data.challenge_pools import COLORS, WORD_TIERS, get_random_word, shortest_word_length
from game.challenges import (
    ArithmeticGenerator,
    ChallengeGenerator,
    Challenge,
    ChallengeKind,
    RecallGenerator,
    ReflexGenerator,
    Verdict,
    WordGenerator,
    create_generator,
    parse_answer,
)
from game.errors import OutOfRangeInput


def _evaluate(prompt):
    a, operation, b = prompt.split(' ')
    a, b = int(a), int(b)
    if operation == '+':
        return a + b
    if operation == '-':
        return a - b
    return a * b


class TestArithmetic:
    def test_correct_and_incorrect(self):
        challenge = Challenge(ChallengeKind.ARITHMETIC, '3 + 4', answer=7)
        assert challenge.advance(None, '7')[1] == Verdict.CORRECT
        assert challenge.advance(None, ' 7 ')[1] == Verdict.CORRECT
        assert challenge.advance(None, 7)[1] == Verdict.CORRECT
        assert challenge.advance(None, '8')[1] == Verdict.INCORRECT

    @pytest.mark.parametrize('value', ['seven', '', '7.5', None, '--7'])
    def test_malformed_input_is_incorrect(self, value):
        challenge = Challenge(ChallengeKind.ARITHMETIC, '3 + 4', answer=7)
        assert challenge.advance(None, value)[1] == Verdict.INCORRECT

    def test_parse_answer_raises_out_of_range(self):
        assert parse_answer('-12') == -12
        with pytest.raises(OutOfRangeInput):
            parse_answer('twelve')

    @pytest.mark.parametrize('level', [1, 2, 3, 7])
    def test_generated_problems_are_consistent(self, level):
        generator = ArithmeticGenerator(random.Random(level))
        for history in range(50):
            challenge = generator.next(level, history, step_ticks=6)
            assert challenge.answer == _evaluate(challenge.prompt.replace('×', '*'))
            assert challenge.answer >= 0
            assert challenge.step_ticks == 6

    def test_level_one_stays_small(self):
        generator = ArithmeticGenerator(random.Random(3))
        for history in range(50):
            a, operation, b = generator.next(1, history).prompt.split(' ')
            assert operation in ('+', '-')
            assert 1 <= int(a) <= 20 and 1 <= int(b) <= 20


class TestWord:
    def test_prefix_is_partial(self):
        challenge = Challenge(ChallengeKind.WORD, 'hello', answer='hello')
        assert challenge.advance(None, 'he') == ('he', Verdict.PARTIAL)
        assert challenge.advance('he', ' HELLO ')[1] == Verdict.CORRECT
        assert challenge.advance('he', 'hello!')[1] == Verdict.INCORRECT
        assert challenge.advance(None, 'hex')[1] == Verdict.INCORRECT
        assert challenge.advance(None, 'helloo')[1] == Verdict.INCORRECT

    @pytest.mark.parametrize('history,tier', [
        (0, 'common'), (9, 'common'), (10, 'medium'), (24, 'medium'), (25, 'hard'), (40, 'tech'), (400, 'tech'),
    ])
    def test_tier_follows_history_length(self, history, tier):
        assert WordGenerator(random.Random(0)).tier_for(history) == tier

    def test_words_fit_the_step_deadline(self):
        generator = WordGenerator(random.Random(5), chars_per_tick=4)
        for history in range(10):
            challenge = generator.next(1, history, step_ticks=1)
            assert challenge.answer in WORD_TIERS['common']
            assert len(challenge.answer) <= 4
            assert challenge.size == len(challenge.answer)

    @pytest.mark.parametrize('typed', ['ab?', 'a.b', 'a.b.o.u.t', 'ab out', 'about.'])
    def test_punctuation_breaks_the_prefix(self, typed):
        challenge = Challenge(ChallengeKind.WORD, 'about', answer='about')
        assert challenge.advance(None, typed)[1] == Verdict.INCORRECT

    def test_easier_tier_when_nothing_fits(self):
        word = get_random_word('hard', random.Random(1), max_length=4)
        assert len(word) <= 4
        assert word in WORD_TIERS['medium'] + WORD_TIERS['common']

    def test_no_word_short_enough(self):
        with pytest.raises(ValueError):
            get_random_word('tech', random.Random(1), max_length=2)

    def test_chars_per_tick_must_fit_the_shortest_word(self):
        with pytest.raises(ValueError):
            WordGenerator(random.Random(0), chars_per_tick=shortest_word_length() - 1)

    def test_every_word_fits_the_deadline(self):
        generator = WordGenerator(random.Random(2), chars_per_tick=shortest_word_length())
        for history in (0, 10, 25, 40, 80):
            assert len(generator.next(1, history, step_ticks=1).answer) <= shortest_word_length()


class TestRecall:
    def test_tokens_accumulate(self):
        challenge = Challenge(ChallengeKind.RECALL, 'x', answer=('red', 'blue', 'green'))
        progress, verdict = challenge.advance(None, 'Red')
        assert (progress, verdict) == (('red',), Verdict.PARTIAL)
        assert challenge.advance(progress, 'blue, green')[1] == Verdict.CORRECT
        assert challenge.advance(progress, 'green')[1] == Verdict.INCORRECT
        assert challenge.advance(None, 'red blue green red')[1] == Verdict.INCORRECT

    @pytest.mark.parametrize('level,expected', [(1, 3), (2, 4), (5, 7), (13, 15), (40, 15)])
    def test_length_grows_with_level(self, level, expected):
        assert RecallGenerator(random.Random(0)).sequence_length(level) == expected

    def test_length_capped_by_step_deadline(self):
        generator = RecallGenerator(random.Random(0), elements_per_tick=2)
        assert generator.sequence_length(10, step_ticks=2) == 4
        assert generator.sequence_length(1, step_ticks=10) == 3

    def test_sequence_uses_known_colours(self):
        challenge = RecallGenerator(random.Random(9)).next(3, 0, step_ticks=17)
        assert len(challenge.elements) == 5
        assert challenge.answer == challenge.elements
        assert set(challenge.elements) <= set(COLORS)
        assert challenge.size == 5


def test_reflex_is_always_correct():
    challenge = ReflexGenerator(random.Random(0)).next(1, 0)
    assert challenge.advance(None, 'anything')[1] == Verdict.CORRECT
    assert challenge.size == 0


@pytest.mark.parametrize('kind,cls', [
    (ChallengeKind.REFLEX, ReflexGenerator),
    (ChallengeKind.RECALL, RecallGenerator),
    (ChallengeKind.WORD, WordGenerator),
    ('arithmetic', ArithmeticGenerator),
])
def test_create_generator(kind, cls):
    assert isinstance(create_generator(kind, random.Random(0)), cls)


def test_generator_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        ChallengeGenerator(random.Random(0))
