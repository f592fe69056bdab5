from pathlib import Path

import pytest

from botkit.config import get_settings


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("API_BASE_URL", "http://platform.local/v1/chat")
    monkeypatch.setenv("COGNITIVE_BACKOFF_MIN_MS", "0")
    monkeypatch.setenv("COGNITIVE_BACKOFF_MAX_MS", "0")
    monkeypatch.setenv("COGNITIVE_INTEGRATIONS", "")
    monkeypatch.setenv("COGNITIVE_PREFERENCES_PATH", str(tmp_path / "models.config.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
