"""Notifications emitted by sessions and tournaments."""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

SCORE_CHANGED = 'score_changed'
PHASE_CHANGED = 'phase_changed'
SESSION_FINISHED = 'session_finished'
RANKS_CHANGED = 'ranks_changed'
TOURNAMENT_FINISHED = 'tournament_finished'
ARENA_FINISHED = 'arena_finished'

Handler = Callable[..., Any]


class EventBus:
    """Synchronous publish/subscribe for the presentation layer."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler):
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: Handler):
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    def emit(self, event: str, **payload):
        logger.debug(f"[event] {event} {payload}")
        for handler in list(self._handlers.get(event, [])):
            handler(**payload)
