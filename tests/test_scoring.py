import pytest

from game.scoring import ScoringRules, multiplier_for, score_answer, skip_result


def test_correct_answer_adds_every_bonus(math_rules):
    result = score_answer(math_rules, True, True, streak_before=2, level=3, remaining_step_ticks=2)
    # 25 base + 20 speed + 30 streak + 30 level
    assert result.points == 105
    assert result.streak == 3
    assert result.multiplier == 1
    assert result.life_lost is False


def test_five_correct_answers_score_475(math_rules):
    total = 0
    streak = 0
    for _ in range(5):
        result = score_answer(math_rules, True, True, streak_before=streak, level=1, remaining_step_ticks=3)
        total += result.points
        streak = result.streak
    assert total == 65 + 80 + 95 + 110 + 125 == 475
    assert streak == 5


@pytest.mark.parametrize('is_correct,is_on_time', [(False, True), (True, False), (False, False)])
def test_wrong_or_late_answer_costs_streak_and_life(math_rules, is_correct, is_on_time):
    result = score_answer(math_rules, is_correct, is_on_time, streak_before=12, level=4, remaining_step_ticks=5)
    assert result.points == 0
    assert result.streak == 0
    assert result.multiplier == 1
    assert result.life_lost is True


def test_bonuses_are_capped(math_rules):
    result = score_answer(math_rules, True, True, streak_before=40, level=1, remaining_step_ticks=99)
    # 25 * 4 (tier 30) + 50 speed cap + 100 streak cap + 10 level
    assert result.points == 260


@pytest.mark.parametrize('streak,expected', [
    (0, 1), (9, 1), (10, 2), (19, 2), (20, 3), (30, 4), (49, 4), (50, 5), (500, 5),
])
def test_multiplier_tiers(streak, expected):
    assert multiplier_for(streak, ScoringRules()) == expected


def test_multiplier_applies_from_the_streak_before_the_answer():
    rules = ScoringRules(base_points=1)
    tenth = score_answer(rules, True, True, streak_before=9, level=1)
    eleventh = score_answer(rules, True, True, streak_before=10, level=1)
    assert tenth.points == 1
    assert tenth.multiplier == 2
    assert eleventh.points == 2


def test_size_bonus():
    rules = ScoringRules(base_points=50, size_bonus=10)
    assert score_answer(rules, True, True, streak_before=0, level=1, size=4).points == 90


def test_scoring_is_deterministic(math_rules):
    args = dict(is_correct=True, is_on_time=True, streak_before=7, level=2, remaining_step_ticks=1)
    assert score_answer(math_rules, **args) == score_answer(math_rules, **args)


def test_skip_keeps_lives():
    result = skip_result()
    assert result.points == 0
    assert result.streak == 0
    assert result.life_lost is False


def test_negative_constants_are_rejected():
    with pytest.raises(ValueError):
        ScoringRules(base_points=-1)
    with pytest.raises(ValueError):
        ScoringRules(multiplier_tiers={0: 2})
