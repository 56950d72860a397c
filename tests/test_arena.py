import random

import config
from conftest import EventRecorder, ScriptedGenerator, run_ticks
from game.arena import TournamentRun
from game.challenges import Verdict
from game.events import ARENA_FINISHED, EventBus
from game.session import Phase
from game.tournament import SyntheticConfig, Tournament, TournamentStatus


def _run():
    events = EventBus()
    tournament = Tournament(
        duration_ticks=10,
        countdown_ticks=2,
        synthetic=SyntheticConfig(score_probability=0.0),
        rng=random.Random(3),
        events=events,
    )
    run = TournamentRun('Ada', tournament=tournament, rng=random.Random(3), events=events)
    run.engine.generator = ScriptedGenerator()
    return run


def test_roster_has_the_player_and_every_bot():
    run = _run()
    roster = run.tournament.roster
    assert len(roster) == 1 + len(config.BOT_ROSTER)
    assert [p.id for p in roster if p.is_real] == [run.player_id]
    assert sorted(p.display_name for p in roster if not p.is_real) == sorted(config.BOT_ROSTER)


def test_session_has_no_clock_of_its_own():
    run = _run()
    assert run.engine.game.duration_ticks is None
    assert run.engine.game.countdown_ticks == 2


def test_countdowns_run_together():
    run = _run()
    run.start()
    assert run.engine.phase == Phase.COUNTDOWN
    assert run.tournament.status == TournamentStatus.COUNTDOWN
    run_ticks(run, 2)
    assert run.engine.phase == Phase.AWAITING_INPUT
    assert run.tournament.status == TournamentStatus.ACTIVE


def test_answers_are_published_to_the_leaderboard():
    run = _run()
    run.start()
    run_ticks(run, 2)
    assert run.submit_input('7') == Verdict.CORRECT
    # 25 base + 50 speed cap + 10 level
    assert run.player.score == 85
    assert run.player.streak == 1
    assert run.player.problems_correct == 1

    run.tick()
    assert run.skip() == Verdict.SKIPPED
    assert run.player.streak == 0
    assert run.player.score == 85


def test_tournament_end_finishes_the_session():
    run = _run()
    recorder = EventRecorder(run.events, ARENA_FINISHED)
    run.start()
    run_ticks(run, 2)
    run.submit_input('7')

    run_ticks(run, 9)
    assert run.tournament.status == TournamentStatus.ACTIVE
    run.tick()
    assert run.tournament.status == TournamentStatus.FINISHED
    assert run.engine.phase == Phase.FINISHED
    assert recorder.named(ARENA_FINISHED) == [
        {'final_score': 85, 'final_rank': 1, 'prize': config.TOURNAMENT_PRIZES[0]}
    ]

    run.tick()
    assert len(recorder.received) == 1


def test_reset_returns_both_to_the_start():
    run = _run()
    run.start()
    run_ticks(run, 2)
    run.submit_input('7')
    run.reset()
    assert run.engine.phase == Phase.IDLE
    assert run.tournament.status == TournamentStatus.WAITING
    assert run.player.score == 0


def test_reset_after_the_end_keeps_the_finished_tournament():
    run = _run()
    run.start()
    run_ticks(run, 2)
    run.submit_input('7')
    run_ticks(run, 10)
    finished = run.tournament
    assert finished.status == TournamentStatus.FINISHED

    run.reset()
    assert finished.status == TournamentStatus.FINISHED
    assert finished.get_participant(run.player_id).score == 85
    assert finished.prize_for(run.player_id) == config.TOURNAMENT_PRIZES[0]

    assert run.tournament is not finished
    assert run.tournament.status == TournamentStatus.WAITING
    assert run.player.score == 0
    assert len(run.tournament.roster) == len(finished.roster)

    run.start()
    run_ticks(run, 2)
    assert run.tournament.status == TournamentStatus.ACTIVE
    assert run.engine.phase == Phase.AWAITING_INPUT
