"""fsm-history - Finite state machine with undo/redo history."""
from __future__ import annotations

from fsm_history.config import MachineConfig, StateDef
from fsm_history.history import History, HistoryEntry
from fsm_history.machine import StateMachine
from fsm_history.types import (
    ConfigError,
    EventId,
    FSMError,
    NoSuchTransitionError,
    StateId,
    TransitionCallback,
    UnknownStateError,
)

__all__ = [
    "StateMachine",
    "MachineConfig",
    "StateDef",
    "History",
    "HistoryEntry",
    "StateId",
    "EventId",
    "TransitionCallback",
    "FSMError",
    "ConfigError",
    "UnknownStateError",
    "NoSuchTransitionError",
]
