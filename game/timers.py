"""Tick-driven timers and the generation guard that invalidates them."""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from game.errors import StaleCallback

logger = logging.getLogger(__name__)


class CancellationGuard:
    """Owns the generation counter and the active flag of one controller.

    Callbacks bound through the guard remember the generation they were
    created in and do nothing once that generation is gone.
    """

    def __init__(self):
        self.generation = 0
        self.active = False
        self._on_invalidate: List[Callable[[], None]] = []

    def arm(self) -> int:
        """Start a new generation and mark the owner active."""
        self.generation += 1
        self.active = True
        return self.generation

    def invalidate(self) -> int:
        """Bump the generation, deactivate, and run cleanup hooks once."""
        self.generation += 1
        self.active = False
        for hook in self._on_invalidate:
            hook()
        return self.generation

    def on_invalidate(self, hook: Callable[[], None]):
        self._on_invalidate.append(hook)

    def is_current(self, generation: int) -> bool:
        return self.active and generation == self.generation

    def check(self, name: str, generation: int):
        """Raise StaleCallback if `generation` no longer owns the state."""
        if not self.is_current(generation):
            raise StaleCallback(name, generation, self.generation)

    def bind(self, name: str, callback: Callable[[], None]) -> Callable[[], bool]:
        """Wrap `callback` so it only runs while the current generation lasts.

        The wrapper returns True if the callback ran.
        """
        captured = self.generation

        def guarded() -> bool:
            try:
                self.check(name, captured)
            except StaleCallback as exc:
                logger.debug(f"[timer-stale] {exc}")
                return False
            callback()
            return True

        return guarded


@dataclass(order=True)
class ScheduledTimer:
    """A callback due at an absolute tick."""
    due: int
    seq: int
    name: str = field(compare=False)
    generation: int = field(compare=False)
    callback: Callable[[], bool] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)


class TimerQueue:
    """Timers keyed to a tick counter and tagged with the guard's generation."""

    def __init__(self, guard: CancellationGuard):
        self.guard = guard
        self.now = 0
        self._seq = 0
        self._timers: List[ScheduledTimer] = []
        guard.on_invalidate(self.clear)

    def schedule(self, delay: int, name: str, callback: Callable[[], None]) -> ScheduledTimer:
        """Run `callback` `delay` ticks from now (at least one tick)."""
        self._seq += 1
        timer = ScheduledTimer(
            due=self.now + max(1, delay),
            seq=self._seq,
            name=name,
            generation=self.guard.generation,
            callback=self.guard.bind(name, callback),
        )
        self._timers.append(timer)
        logger.debug(f"[timer-set] {name} due={timer.due} generation={timer.generation}")
        return timer

    def cancel(self, name: str) -> int:
        """Cancel every pending timer called `name`."""
        cancelled = 0
        for timer in self._timers:
            if timer.name == name and not timer.cancelled:
                timer.cancelled = True
                cancelled += 1
        self._timers = [t for t in self._timers if not t.cancelled]
        return cancelled

    def clear(self):
        """Drop all pending timers."""
        if self._timers:
            logger.debug(f"[timer-clear] dropped {len(self._timers)} pending timer(s)")
        for timer in self._timers:
            timer.cancelled = True
        self._timers = []

    def pending(self, name: Optional[str] = None) -> List[ScheduledTimer]:
        return sorted(t for t in self._timers if name is None or t.name == name)

    def advance(self) -> int:
        """Move the clock forward one tick and fire every timer now due.

        Timers fire in (due, scheduling order). Timers scheduled by a callback
        are always due on a later tick.
        """
        self.now += 1
        due = sorted(t for t in self._timers if t.due <= self.now)
        fired = 0
        for timer in due:
            # An earlier callback may have cancelled or cleared this one.
            if timer.cancelled:
                continue
            self._timers.remove(timer)
            logger.debug(f"[timer-fire] {timer.name} tick={self.now} generation={timer.generation}")
            if timer.callback():
                fired += 1
        return fired
