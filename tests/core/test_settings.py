"""Tests for warden.core.settings.

Covers:
- Defaults
- WARDEN_* environment overrides
- Field validation
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from warden.core.settings import DEFAULT_ITERATION_DELAY_SECONDS, WardenSettings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No stray .env file or WARDEN_* variables."""
    monkeypatch.chdir(tmp_path)
    for key in ("NAME", "ITERATION_DELAY_SECONDS", "ITERATIONS_COUNT", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(f"WARDEN_{key}", raising=False)


class TestDefaults:
    def test_defaults(self):
        s = WardenSettings()
        assert s.name is None
        assert s.iteration_delay_seconds == DEFAULT_ITERATION_DELAY_SECONDS == 5.0
        assert s.iterations_count is None
        assert s.log_level == "INFO"
        assert s.log_json is None

    def test_iteration_delay_timedelta(self):
        assert WardenSettings().iteration_delay == timedelta(seconds=5)


class TestEnvOverride:
    def test_env_values(self, monkeypatch):
        monkeypatch.setenv("WARDEN_NAME", "api-monitor")
        monkeypatch.setenv("WARDEN_ITERATION_DELAY_SECONDS", "0.5")
        monkeypatch.setenv("WARDEN_ITERATIONS_COUNT", "3")
        monkeypatch.setenv("WARDEN_LOG_JSON", "true")

        s = WardenSettings()
        assert s.name == "api-monitor"
        assert s.iteration_delay == timedelta(milliseconds=500)
        assert s.iterations_count == 3
        assert s.log_json is True

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("WARDEN_ITERATIONS_COUNT=7\n")
        assert WardenSettings().iterations_count == 7

    def test_unrelated_env_ignored(self, monkeypatch):
        monkeypatch.setenv("WARDEN_SOMETHING_ELSE", "x")
        WardenSettings()


class TestValidation:
    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            WardenSettings(iteration_delay_seconds=-1)

    def test_zero_iterations_rejected(self):
        with pytest.raises(ValidationError):
            WardenSettings(iterations_count=0)

    def test_zero_delay_allowed(self):
        assert WardenSettings(iteration_delay_seconds=0).iteration_delay == timedelta(0)
