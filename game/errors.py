"""Errors raised by the challenge engine."""


class ChallengeError(Exception):
    """Base class for engine errors."""


class InvalidTransition(ChallengeError):
    """An operation was called in a phase or status that does not allow it."""

    def __init__(self, operation: str, state: str):
        self.operation = operation
        self.state = state
        super().__init__(f"cannot {operation} while {state}")


class OutOfRangeInput(ChallengeError, ValueError):
    """Malformed answer. Always scored as an incorrect answer, never reported."""


class StaleCallback(ChallengeError):
    """A timer fired for a generation that is no longer current."""

    def __init__(self, name: str, captured: int, current: int):
        self.name = name
        self.captured = captured
        self.current = current
        super().__init__(f"timer {name!r} from generation {captured} (current {current})")
