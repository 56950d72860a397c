import pytest

from game.errors import StaleCallback
from game.timers import CancellationGuard, TimerQueue


@pytest.fixture()
def queue():
    guard = CancellationGuard()
    guard.arm()
    return TimerQueue(guard)


def test_timer_fires_on_its_due_tick(queue):
    fired = []
    queue.schedule(3, 'a', lambda: fired.append(queue.now))
    queue.advance()
    queue.advance()
    assert fired == []
    queue.advance()
    assert fired == [3]
    assert queue.pending() == []


def test_same_tick_timers_fire_in_scheduling_order(queue):
    fired = []
    queue.schedule(2, 'second', lambda: fired.append('second'))
    queue.schedule(1, 'first', lambda: fired.append('first'))
    queue.schedule(2, 'third', lambda: fired.append('third'))
    queue.advance()
    queue.advance()
    assert fired == ['first', 'second', 'third']


def test_zero_delay_waits_one_tick(queue):
    timer = queue.schedule(0, 'soon', lambda: None)
    assert timer.due == 1


def test_cancel_by_name(queue):
    fired = []
    queue.schedule(1, 'deadline', lambda: fired.append('deadline'))
    queue.schedule(1, 'show', lambda: fired.append('show'))
    assert queue.cancel('deadline') == 1
    queue.advance()
    assert fired == ['show']


def test_callback_can_cancel_a_timer_due_on_the_same_tick(queue):
    fired = []
    queue.schedule(1, 'answer', lambda: queue.cancel('deadline'))
    queue.schedule(1, 'deadline', lambda: fired.append('deadline'))
    queue.advance()
    assert fired == []


def test_invalidate_clears_pending_timers(queue):
    fired = []
    queue.schedule(1, 'a', lambda: fired.append('a'))
    queue.guard.invalidate()
    queue.advance()
    assert fired == []
    assert queue.pending() == []


def test_stale_callback_is_a_no_op_when_forced(queue):
    fired = []
    timer = queue.schedule(1, 'deadline', lambda: fired.append('deadline'))
    queue.guard.invalidate()
    queue.guard.arm()
    assert timer.callback() is False
    assert fired == []


def test_current_callback_runs_when_forced(queue):
    fired = []
    timer = queue.schedule(5, 'deadline', lambda: fired.append('deadline'))
    assert timer.callback() is True
    assert fired == ['deadline']


class TestGuard:
    def test_generations_only_increase(self):
        guard = CancellationGuard()
        seen = [guard.generation, guard.arm(), guard.invalidate(), guard.arm(), guard.invalidate()]
        assert seen == sorted(set(seen))

    def test_is_current_needs_active_and_matching_generation(self):
        guard = CancellationGuard()
        generation = guard.arm()
        assert guard.is_current(generation)
        assert not guard.is_current(generation - 1)
        guard.invalidate()
        assert not guard.is_current(guard.generation)

    def test_check_raises_stale_callback(self):
        guard = CancellationGuard()
        generation = guard.arm()
        guard.invalidate()
        with pytest.raises(StaleCallback) as excinfo:
            guard.check('feedback', generation)
        assert excinfo.value.captured == generation
        assert excinfo.value.current == guard.generation

    def test_invalidate_runs_hooks(self):
        guard = CancellationGuard()
        calls = []
        guard.on_invalidate(lambda: calls.append(guard.generation))
        guard.arm()
        guard.invalidate()
        assert calls == [2]
