"""Tests for MachineConfig and StateDef."""
import dataclasses

import pytest
from fsm_history import ConfigError, MachineConfig, StateDef


class TestFromDict:
    """Building a MachineConfig from a plain mapping."""

    def test_builds_state_table_in_declared_order(self, player_config):
        """States keep declaration order and carry their transitions."""
        # Act
        config = MachineConfig.from_dict(player_config)

        # Assert
        assert config.initial == "idle"
        assert list(config.states) == ["idle", "running", "paused"]
        assert dict(config.states["running"].transitions) == {
            "stop": "idle",
            "pause": "paused",
        }

    def test_none_raises(self):
        """A missing config is rejected."""
        with pytest.raises(ConfigError, match="Empty config"):
            MachineConfig.from_dict(None)

    def test_non_mapping_raises(self):
        """Only mappings are accepted."""
        with pytest.raises(ConfigError, match="must be a mapping"):
            MachineConfig.from_dict(["idle"])

    @pytest.mark.parametrize("missing", ["initial", "states"])
    def test_missing_key_raises(self, player_config, missing):
        """Both 'initial' and 'states' are required."""
        # Arrange
        del player_config[missing]

        # Act & Assert
        with pytest.raises(ConfigError, match=missing):
            MachineConfig.from_dict(player_config)

    def test_descriptor_without_transitions_is_terminal(self):
        """A state with no 'transitions' key has no outgoing transitions."""
        # Act
        config = MachineConfig.from_dict({
            "initial": "a",
            "states": {"a": {"transitions": {"go": "b"}}, "b": {}},
        })

        # Assert
        assert dict(config.states["b"].transitions) == {}

    def test_non_mapping_descriptor_raises(self):
        """State descriptors must be mappings."""
        with pytest.raises(ConfigError, match="State 'a' must be a mapping"):
            MachineConfig.from_dict({"initial": "a", "states": {"a": "b"}})

    def test_non_mapping_transitions_raises(self):
        """Transition tables must be mappings."""
        with pytest.raises(ConfigError, match="transitions must be a mapping"):
            MachineConfig.from_dict({
                "initial": "a",
                "states": {"a": {"transitions": [("go", "a")]}},
            })

    def test_accepts_statedef_values(self):
        """StateDef instances can be mixed into the raw mapping."""
        # Act
        config = MachineConfig.from_dict({
            "initial": "a",
            "states": {"a": StateDef({"go": "a"})},
        })

        # Assert
        assert config.states["a"].transitions["go"] == "a"


class TestImmutability:
    """Configs are read-only once built."""

    def test_frozen_fields(self, player_config):
        config = MachineConfig.from_dict(player_config)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.initial = "running"

    def test_state_table_is_read_only(self, player_config):
        config = MachineConfig.from_dict(player_config)
        with pytest.raises(TypeError):
            config.states["extra"] = StateDef()

    def test_transitions_are_read_only(self, player_config):
        config = MachineConfig.from_dict(player_config)
        with pytest.raises(TypeError):
            config.states["idle"].transitions["start"] = "paused"

    def test_source_mapping_is_copied(self, player_config):
        """Mutating the input after construction does not leak into the config."""
        # Arrange
        config = MachineConfig.from_dict(player_config)

        # Act
        player_config["states"]["idle"]["transitions"]["start"] = "paused"
        player_config["states"]["extra"] = {}

        # Assert
        assert config.states["idle"].transitions["start"] == "running"
        assert "extra" not in config.states

    def test_non_statedef_value_rejected(self):
        """MachineConfig itself only takes StateDef values."""
        with pytest.raises(ConfigError, match="must be a StateDef"):
            MachineConfig(initial="a", states={"a": {"transitions": {}}})


class TestValidate:
    """Eager validation of the state table."""

    def test_valid_config_passes(self, player_config):
        MachineConfig.from_dict(player_config).validate()

    def test_missing_initial_raises(self, player_config):
        # Arrange
        player_config["initial"] = "nowhere"
        config = MachineConfig.from_dict(player_config)

        # Act & Assert
        with pytest.raises(ConfigError, match="Initial state 'nowhere'"):
            config.validate()

    def test_unknown_destination_raises(self, player_config):
        # Arrange
        player_config["states"]["paused"]["transitions"]["crash"] = "broken"
        config = MachineConfig.from_dict(player_config)

        # Act & Assert
        with pytest.raises(ConfigError, match="unknown state 'broken'"):
            config.validate()

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestTableQueries:
    """flatten() and states_with()."""

    def test_flatten_merges_all_states(self, player_config):
        config = MachineConfig.from_dict(player_config)
        assert config.flatten() == {
            "start": "running",
            "stop": "idle",
            "pause": "paused",
            "resume": "running",
        }

    def test_flatten_later_state_wins(self):
        """Colliding event names are overwritten in table order, not rejected."""
        # Arrange
        config = MachineConfig.from_dict({
            "initial": "a",
            "states": {
                "a": {"transitions": {"next": "b"}},
                "b": {"transitions": {"next": "c"}},
                "c": {"transitions": {"next": "a"}},
            },
        })

        # Act & Assert
        assert config.flatten() == {"next": "a"}

    def test_states_with_event(self, player_config):
        config = MachineConfig.from_dict(player_config)
        assert config.states_with("stop") == ["running"]
        assert config.states_with("missing") == []
