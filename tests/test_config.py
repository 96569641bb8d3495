from __future__ import annotations

import pytest

from toget import __version__
from toget.config import DEFAULT_MAX_WORKERS, Settings, load_settings


def test_settings_defaults() -> None:
    settings = Settings.from_env({})

    assert settings.timeout_ms is None
    assert settings.max_workers == DEFAULT_MAX_WORKERS
    assert settings.user_agent == f"toget/{__version__}"


def test_settings_read_environment() -> None:
    settings = Settings.from_env(
        {"TOGET_TIMEOUT_MS": "2500", "TOGET_MAX_WORKERS": "8", "TOGET_USER_AGENT": "probe/2"}
    )

    assert settings == Settings(timeout_ms=2500, max_workers=8, user_agent="probe/2")


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_settings_reject_invalid_numbers(value: str) -> None:
    with pytest.raises(ValueError, match="TOGET_TIMEOUT_MS"):
        Settings.from_env({"TOGET_TIMEOUT_MS": value})


def test_load_settings_uses_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("TOGET_TIMEOUT_MS", "750")

    assert load_settings().timeout_ms == 750
