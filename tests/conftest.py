"""Shared fixtures for fsm-history tests."""
from __future__ import annotations

import pytest

from fsm_history import StateMachine


@pytest.fixture
def player_config() -> dict:
    """idle -> running <-> paused, with running able to stop back to idle."""
    return {
        "initial": "idle",
        "states": {
            "idle": {"transitions": {"start": "running"}},
            "running": {"transitions": {"stop": "idle", "pause": "paused"}},
            "paused": {"transitions": {"resume": "running"}},
        },
    }


@pytest.fixture
def machine(player_config: dict) -> StateMachine:
    return StateMachine(player_config)
