"""Tests for runtime configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tessera.config import TesseraConfig, load_config
from tessera.generation.wfc import ContradictionPolicy


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep TESSERA_* variables from the developer's shell out of the tests."""
    for name in TesseraConfig.model_fields:
        monkeypatch.delenv(f"TESSERA_{name.upper()}", raising=False)


class TestDefaults:
    """Test default values."""

    def test_defaults(self):
        config = load_config()
        assert config.width == 32
        assert config.height == 32
        assert config.tile_size == 20
        assert config.seed is None
        assert config.policy is ContradictionPolicy.TOLERANT_RESET
        assert config.steps_per_tick == 1
        assert config.data_dir == Path("data")
        assert config.total_cells == 1024

    def test_config_is_frozen(self):
        config = load_config()
        with pytest.raises(ValidationError):
            config.width = 10


class TestSources:
    """Environment and override precedence."""

    def test_environment_values(self, monkeypatch):
        monkeypatch.setenv("TESSERA_WIDTH", "16")
        monkeypatch.setenv("TESSERA_SEED", "99")
        monkeypatch.setenv("TESSERA_POLICY", "strict")

        config = load_config()

        assert config.width == 16
        assert config.seed == 99
        assert config.policy is ContradictionPolicy.STRICT_FAIL

    def test_overrides_beat_environment(self, monkeypatch):
        monkeypatch.setenv("TESSERA_WIDTH", "16")
        config = load_config(width=8)
        assert config.width == 8

    def test_none_overrides_ignored(self, monkeypatch):
        monkeypatch.setenv("TESSERA_HEIGHT", "12")
        config = load_config(height=None, seed=None)
        assert config.height == 12
        assert config.seed is None

    def test_empty_environment_value_ignored(self, monkeypatch):
        monkeypatch.setenv("TESSERA_SEED", "")
        assert load_config().seed is None


class TestValidation:
    """Invalid values are rejected."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width": 0},
            {"height": -3},
            {"tick_interval": 0},
            {"steps_per_tick": 0},
            {"policy": "optimistic"},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            load_config(**overrides)

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("TESSERA_WIDTH", "wide")
        with pytest.raises(ValidationError):
            load_config()
