"""Test module for configuration."""

import pytest

from irregular_puzzle.config import Settings, get_settings


def test_defaults() -> None:
    """Test the default generation settings."""
    settings = Settings()
    assert settings.TARGET_SIZE == 400
    assert settings.DEFAULT_EXPANSION_RATIO == 0.4
    assert settings.MIN_GRID_DIMENSION == 2
    assert settings.MAX_GRID_DIMENSION == 8
    assert settings.KNOB_PROBABILITY == 0.7
    assert settings.RASTER_BACKEND == "pillow"
    assert settings.ALLOW_LOCAL_PATHS is False


def test_environment_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that environment variables override defaults."""
    monkeypatch.setenv("TARGET_SIZE", "600")
    monkeypatch.setenv("KNOB_PROBABILITY", "1.0")

    settings = Settings()
    assert settings.TARGET_SIZE == 600
    assert settings.KNOB_PROBABILITY == 1.0


def test_environment_is_case_sensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that lowercase variable names are ignored."""
    monkeypatch.setenv("target_size", "600")
    assert Settings().TARGET_SIZE == 400


def test_get_settings_is_cached() -> None:
    """Test that get_settings returns one shared instance."""
    assert get_settings() is get_settings()
