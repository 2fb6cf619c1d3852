"""Machine configuration: initial state plus the per-state transition table."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from fsm_history.types import ConfigError, EventId, StateId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateDef:
    """A state descriptor. ``transitions`` maps event -> destination state."""

    transitions: Mapping[EventId, StateId] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.transitions, Mapping):
            raise ConfigError(
                f"transitions must be a mapping, got {type(self.transitions).__name__}"
            )
        object.__setattr__(
            self, "transitions", MappingProxyType(dict(self.transitions))
        )


@dataclass(frozen=True)
class MachineConfig:
    """Immutable machine configuration.

    Attributes:
        initial: State the machine starts in and returns to on ``reset``.
        states: State table, state id -> ``StateDef``. Iteration order is
            the order states were declared in and is preserved by every
            query that lists states.
    """

    initial: StateId
    states: Mapping[StateId, StateDef]

    def __post_init__(self) -> None:
        if not isinstance(self.states, Mapping):
            raise ConfigError(
                f"states must be a mapping, got {type(self.states).__name__}"
            )
        table: dict[StateId, StateDef] = {}
        for name, state_def in self.states.items():
            if not isinstance(state_def, StateDef):
                raise ConfigError(
                    f"State '{name}' must be a StateDef, got {type(state_def).__name__}"
                )
            table[name] = state_def
        object.__setattr__(self, "states", MappingProxyType(table))

    @classmethod
    def from_dict(cls, raw: Any) -> MachineConfig:
        """Build a config from ``{"initial": ..., "states": {name: {"transitions": {...}}}}``.

        A state descriptor without ``transitions`` has no outgoing transitions.
        """
        if raw is None:
            raise ConfigError("Empty config")
        if not isinstance(raw, Mapping):
            raise ConfigError(f"Config must be a mapping, got {type(raw).__name__}")
        try:
            initial = raw["initial"]
            raw_states = raw["states"]
        except KeyError as exc:
            raise ConfigError(f"Config is missing required key {exc}") from exc
        if not isinstance(raw_states, Mapping):
            raise ConfigError(
                f"states must be a mapping, got {type(raw_states).__name__}"
            )

        states: dict[StateId, StateDef] = {}
        for name, descriptor in raw_states.items():
            if isinstance(descriptor, StateDef):
                states[name] = descriptor
                continue
            if not isinstance(descriptor, Mapping):
                raise ConfigError(
                    f"State '{name}' must be a mapping, got {type(descriptor).__name__}"
                )
            states[name] = StateDef(transitions=descriptor.get("transitions") or {})
        return cls(initial=initial, states=states)

    def validate(self) -> None:
        """Check the initial state and every destination exist in ``states``.

        Raises ``ConfigError`` on the first problem found.
        """
        if self.initial not in self.states:
            raise ConfigError(f"Initial state '{self.initial}' not found in states")
        for name, state_def in self.states.items():
            for event, target in state_def.transitions.items():
                if target not in self.states:
                    raise ConfigError(
                        f"Transition '{event}' of state '{name}' targets "
                        f"unknown state '{target}'"
                    )

    def flatten(self) -> dict[EventId, StateId]:
        """Merge every state's transitions into one event -> destination table.

        States are merged in table order; when two states share an event
        name the later state's destination wins.
        """
        merged: dict[EventId, StateId] = {}
        for name, state_def in self.states.items():
            for event, target in state_def.transitions.items():
                if event in merged and merged[event] != target:
                    logger.debug(
                        "Event '%s' of state '%s' overrides destination '%s' with '%s'",
                        event, name, merged[event], target,
                    )
                merged[event] = target
        return merged

    def states_with(self, event: EventId) -> list[StateId]:
        """Return states whose transition table contains *event*, in table order."""
        return [
            name
            for name, state_def in self.states.items()
            if event in state_def.transitions
        ]
