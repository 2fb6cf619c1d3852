"""StateMachine - event-driven state tracking with undo/redo history."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fsm_history.config import MachineConfig
from fsm_history.history import History, HistoryEntry
from fsm_history.types import (
    ConfigError,
    EventId,
    NoSuchTransitionError,
    StateId,
    TransitionCallback,
    UnknownStateError,
)

logger = logging.getLogger(__name__)


class StateMachine:
    """Finite state machine over a declarative state table.

    ``config`` is a ``MachineConfig`` or the equivalent plain mapping
    ``{"initial": ..., "states": {name: {"transitions": {event: target}}}}``.

    With ``strict=True`` (the default) the configuration is validated up
    front and a missing initial state or unknown destination raises
    ``ConfigError``. With ``strict=False`` such problems only surface as
    ``UnknownStateError`` once the machine tries to use the missing state.

    ``on_transition(old, new)`` fires after every change of the current
    state, including ``undo`` and ``redo``. Inside the callback
    ``get_state()`` already returns ``new``.
    """

    def __init__(
        self,
        config: MachineConfig | Mapping[str, Any] | None,
        *,
        strict: bool = True,
        on_transition: TransitionCallback | None = None,
    ) -> None:
        if config is None:
            raise ConfigError("Empty config")
        if not isinstance(config, MachineConfig):
            config = MachineConfig.from_dict(config)
        if strict:
            config.validate()

        self._config = config
        self._state: StateId = config.initial
        self._available = self._transitions_for(self._state, lazy=not strict)
        self._transitions = config.flatten()
        self._history = History(config.initial)
        self._listeners: list[TransitionCallback] = []
        if on_transition is not None:
            self._listeners.append(on_transition)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(state={self._state!r}, "
            f"history={len(self._history)})"
        )

    # --- Introspection ---

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def state(self) -> StateId:
        return self._state

    @property
    def available_transitions(self) -> Mapping[EventId, StateId]:
        """Event -> destination table of the current state.

        Raises ``UnknownStateError`` if the current state is missing from
        the table (only possible with ``strict=False``).
        """
        if self._available is None:
            self._available = self._transitions_for(self._state)
        return self._available

    @property
    def transitions(self) -> Mapping[EventId, StateId]:
        """Every state's transitions merged in table order, later states winning."""
        return MappingProxyType(self._transitions)

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return self._history.entries

    @property
    def current_id(self) -> int:
        return self._history.current_id

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def get_state(self) -> StateId:
        """Return the current state."""
        return self._state

    def get_states(self, event: EventId | None = None) -> list[StateId]:
        """Return all states, or only those with a transition for *event*.

        Order follows the state table.
        """
        if event is None:
            return list(self._config.states)
        return self._config.states_with(event)

    # --- Listeners ---

    def add_listener(self, callback: TransitionCallback) -> None:
        """Register ``callback(old, new)`` to run after each state change."""
        self._listeners.append(callback)

    def remove_listener(self, callback: TransitionCallback) -> None:
        """Unregister a listener. Unknown callbacks are ignored."""
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    # --- Transitions ---

    def change_state(self, target: StateId) -> None:
        """Move to *target*, appending it to the history.

        Raises ``UnknownStateError`` if *target* is not in the state table;
        nothing is changed in that case. Any pending redo is invalidated.
        """
        if target not in self._config.states:
            logger.debug("Rejected change to unknown state '%s'", target)
            raise UnknownStateError(target, f"State '{target}' does not exist")
        old = self._state
        self._state = target
        self._available = self._transitions_for(target)
        entry = self._history.push(target)
        logger.debug("State '%s' -> '%s' (history id %d)", old, target, entry.id)
        self._notify(old, target)

    def trigger(self, event: EventId) -> StateId:
        """Fire *event* from the current state and return the new state.

        Raises ``NoSuchTransitionError`` if the current state has no
        transition for *event*.
        """
        available = self.available_transitions
        if event not in available:
            logger.debug("No transition '%s' from state '%s'", event, self._state)
            raise NoSuchTransitionError(
                event,
                self._state,
                f"No transition '{event}' from state '{self._state}'",
            )
        self.change_state(available[event])
        return self._state

    def reset(self) -> None:
        """Go back to the initial state. Adds a history entry like any other change."""
        self.change_state(self._config.initial)

    def undo(self) -> bool:
        """Step back to the previous history entry.

        Returns False, changing nothing, when the history holds a single entry.
        """
        previous = self._history.undo()
        if previous is None:
            logger.debug("Nothing to undo")
            return False
        self._move_to(previous.state)
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone entry.

        Returns False, changing nothing, when the undo stack is empty or a
        change since the last ``undo`` has made it stale.
        """
        restored = self._history.redo()
        if restored is None:
            logger.debug("Nothing to redo")
            return False
        self._move_to(restored.state)
        return True

    def clear_history(self) -> None:
        """Restart the history at the initial state; the current state is kept."""
        self._history.clear()
        logger.debug("History cleared (current state '%s')", self._state)

    # --- Internals ---

    def _transitions_for(
        self, state: StateId, lazy: bool = False
    ) -> Mapping[EventId, StateId] | None:
        state_def = self._config.states.get(state)
        if state_def is None:
            if lazy:
                return None
            raise UnknownStateError(state, f"State '{state}' does not exist")
        return state_def.transitions

    def _move_to(self, state: StateId) -> None:
        # Undo/redo path: history has already been updated, so a missing
        # state is left for available_transitions to report.
        old = self._state
        self._state = state
        self._available = self._transitions_for(state, lazy=True)
        logger.debug(
            "State '%s' -> '%s' (history id %d)", old, state, self._history.current_id
        )
        self._notify(old, state)

    def _notify(self, old: StateId, new: StateId) -> None:
        for callback in list(self._listeners):
            callback(old, new)
