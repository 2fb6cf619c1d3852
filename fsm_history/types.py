"""Shared type aliases and errors for fsm-history."""

from __future__ import annotations

from typing import Callable

StateId = str
EventId = str

# on_transition(old_state, new_state)
TransitionCallback = Callable[[StateId, StateId], None]


class FSMError(Exception):
    """Base class for errors raised by fsm-history."""


class ConfigError(FSMError, ValueError):
    """Raised when a machine configuration is missing or malformed."""


class UnknownStateError(FSMError, KeyError):
    """Raised when a state is not present in the state table."""

    def __init__(self, state: StateId, message: str) -> None:
        self.state = state
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class NoSuchTransitionError(FSMError, KeyError):
    """Raised when an event has no transition from the current state."""

    def __init__(self, event: EventId, state: StateId, message: str) -> None:
        self.event = event
        self.state = state
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])
