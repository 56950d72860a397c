"""Manages live challenge sessions."""

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union
import uuid

from game.arena import TournamentRun
from game.catalogue import get_game
from game.events import EventBus
from game.session import Phase, SessionEngine


@dataclass
class ManagedSession:
    """A live session and who it belongs to."""
    session_id: str
    channel_id: str
    server_id: str
    player_id: str
    player_name: str
    game_name: str
    mode: str  # 'solo' or 'tournament'
    runner: Union[SessionEngine, TournamentRun]
    active: bool = True
    started_at: datetime = field(default_factory=datetime.utcnow)
    ended_at: Optional[datetime] = None

    @property
    def engine(self) -> SessionEngine:
        if isinstance(self.runner, TournamentRun):
            return self.runner.engine
        return self.runner

    @property
    def events(self) -> EventBus:
        return self.runner.events

    @property
    def is_over(self) -> bool:
        return self.engine.phase == Phase.FINISHED


class SessionManager:
    """Manages live sessions, one per (player, channel)."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng
        # Dictionary mapping (user_id, channel_id) to session
        self._sessions: Dict[tuple, ManagedSession] = {}
        # Dictionary mapping session_id to session
        self._sessions_by_id: Dict[str, ManagedSession] = {}

    def create_session(
        self,
        channel_id: str,
        server_id: str,
        player_id: str,
        player_name: str,
        game_name: str,
        mode: str = 'solo',
    ) -> ManagedSession:
        """Create a session (not yet started). Replaces an ended one for the same key."""
        game = get_game(game_name)
        if mode == 'tournament':
            runner = TournamentRun(player_name, game=game, rng=self.rng)
        else:
            runner = SessionEngine(game, rng=self.rng)

        managed = ManagedSession(
            session_id=str(uuid.uuid4()),
            channel_id=channel_id,
            server_id=server_id,
            player_id=player_id,
            player_name=player_name,
            game_name=game.name,
            mode=mode,
            runner=runner,
        )

        key = (player_id, channel_id)
        self._sessions[key] = managed
        self._sessions_by_id[managed.session_id] = managed
        return managed

    def get_session(self, user_id: str, channel_id: str) -> Optional[ManagedSession]:
        """Get an active session for a user in a channel."""
        managed = self._sessions.get((user_id, channel_id))
        if managed and managed.active:
            return managed
        return None

    def get_session_by_id(self, session_id: str) -> Optional[ManagedSession]:
        """Get a session by its ID."""
        return self._sessions_by_id.get(session_id)

    def end_session(self, user_id: str, channel_id: str) -> Optional[ManagedSession]:
        """End a session and cancel its timers."""
        managed = self._sessions.pop((user_id, channel_id), None)
        if managed:
            managed.active = False
            managed.ended_at = datetime.utcnow()
            managed.runner.reset()
            # Keep in _sessions_by_id for reference
        return managed

    def is_active(self, user_id: str, channel_id: str) -> bool:
        """Check if a user has an active session."""
        return self.get_session(user_id, channel_id) is not None

    def get_all_sessions(self) -> List[ManagedSession]:
        """Get all active sessions."""
        return [s for s in self._sessions.values() if s.active]

    def tick_all(self) -> List[ManagedSession]:
        """Tick every active session; returns those that are now finished."""
        finished = []
        for managed in self.get_all_sessions():
            was_over = managed.is_over
            managed.runner.tick()
            if managed.is_over and not was_over:
                finished.append(managed)
        return finished


# Global session manager instance
session_manager = SessionManager()
