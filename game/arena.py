"""A real participant's session played inside a tournament."""

import logging
import random
from dataclasses import replace
from typing import Any, Iterable, Optional

import config
from game.catalogue import GameConfig, NUMBER_NINJA
from game.challenges import Verdict
from game.events import ARENA_FINISHED, EventBus
from game.session import SessionEngine
from game.tournament import Participant, Tournament, TournamentStatus

logger = logging.getLogger(__name__)


class TournamentRun:
    """Couples one SessionEngine with a Tournament of synthetic opponents.

    The tournament owns the clock for the whole run: the session has no
    duration of its own and is ended when the tournament finalizes.
    """

    def __init__(
        self,
        player_name: str,
        player_id: int = 1,
        game: GameConfig = NUMBER_NINJA,
        bot_names: Iterable[str] = config.BOT_ROSTER,
        tournament: Optional[Tournament] = None,
        rng: Optional[random.Random] = None,
        events: Optional[EventBus] = None,
    ):
        self.events = events or (tournament.events if tournament else EventBus())
        self.rng = rng or random.Random()
        self.tournament = tournament or Tournament(
            duration_ticks=game.duration_ticks or config.TOURNAMENT_DURATION_TICKS,
            countdown_ticks=game.countdown_ticks,
            rng=self.rng,
            events=self.events,
        )
        self.engine = SessionEngine(
            replace(game, duration_ticks=None, countdown_ticks=self.tournament.countdown_ticks),
            rng=self.rng,
            events=self.events,
        )
        self.player_id = player_id

        self.tournament.join(Participant(id=player_id, display_name=player_name, is_real=True))
        for offset, name in enumerate(bot_names, start=1):
            self.tournament.join(Participant(id=player_id + offset, display_name=name))

    @property
    def player(self) -> Participant:
        return self.tournament.get_participant(self.player_id)

    def start(self):
        self.tournament.start()
        self.engine.start()

    def submit_input(self, value: Any) -> Optional[Verdict]:
        verdict = self.engine.submit_input(value)
        self._sync()
        return verdict

    def skip(self) -> Optional[Verdict]:
        verdict = self.engine.skip()
        self._sync()
        return verdict

    def tick(self):
        """Tick the session, publish its score, then tick the tournament."""
        was_finished = self.tournament.status == TournamentStatus.FINISHED
        self.engine.tick()
        self._sync()
        self.tournament.tick()

        if not was_finished and self.tournament.status == TournamentStatus.FINISHED:
            self.engine.end()
            player = self.player
            prize = self.tournament.prize_for(self.player_id)
            logger.info(f"Tournament run over: {player.display_name} rank={player.rank} score={player.score}")
            self.events.emit(
                ARENA_FINISHED,
                final_score=player.score,
                final_rank=player.rank,
                prize=prize,
            )

    def reset(self):
        """Back to the lobby. A finished tournament is kept as is and replaced."""
        self.engine.reset()
        if self.tournament.status == TournamentStatus.FINISHED:
            self.tournament = self.tournament.rematch()
        else:
            self.tournament.reset()

    def _sync(self):
        state = self.engine.session
        self.tournament.record_score(self.player_id, state.score, state.streak, state.correct_count)
