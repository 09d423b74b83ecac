from core.config import DEFAULT_API_BASE_URL, load_settings


def test_defaults(monkeypatch):
    for name in ("HMS_API_BASE_URL", "HMS_API_TIMEOUT", "HMS_SEARCH_DEBOUNCE_MS", "HMS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("core.config.load_dotenv", lambda: False)

    settings = load_settings()

    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.api_timeout == 10.0
    assert settings.search_debounce_ms == 500
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setattr("core.config.load_dotenv", lambda: False)
    monkeypatch.setenv("HMS_API_BASE_URL", "https://hms.example.org/api/")
    monkeypatch.setenv("HMS_API_TIMEOUT", "2.5")
    monkeypatch.setenv("HMS_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.api_base_url == "https://hms.example.org/api"
    assert settings.api_timeout == 2.5
    assert settings.log_level == "DEBUG"
