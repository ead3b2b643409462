from sitegen import config
from sitegen.config import MAX_KEY_SLOTS, Settings


def _clear_key_env(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    for slot in range(1, MAX_KEY_SLOTS + 1):
        monkeypatch.delenv(f"GEMINI_API_KEY_{slot}", raising=False)


def test_numbered_key_slots_in_priority_order(monkeypatch):
    _clear_key_env(monkeypatch)
    monkeypatch.setenv("GEMINI_API_KEY_3", "third-key")
    monkeypatch.setenv("GEMINI_API_KEY_1", "first-key")
    monkeypatch.setenv("GEMINI_API_KEY_2", "   ")
    monkeypatch.setenv("GEMINI_API_KEY_20", " last-key ")
    monkeypatch.setenv("GEMINI_API_KEY", "ignored-single-key")

    assert Settings().api_keys == ["first-key", "third-key", "last-key"]


def test_single_key_used_when_no_slot_is_set(monkeypatch):
    _clear_key_env(monkeypatch)
    monkeypatch.setenv("GEMINI_API_KEY", "single-key")
    assert Settings().api_keys == ["single-key"]


def test_no_keys_configured(monkeypatch):
    _clear_key_env(monkeypatch)
    assert Settings().api_keys == []


def test_slots_beyond_limit_are_ignored(monkeypatch):
    _clear_key_env(monkeypatch)
    monkeypatch.setenv(f"GEMINI_API_KEY_{MAX_KEY_SLOTS + 1}", "overflow-key")
    assert Settings().api_keys == []


def test_numeric_settings_fall_back_on_invalid_values(monkeypatch):
    monkeypatch.setenv("PROVIDER_MAX_ATTEMPTS", "five")
    monkeypatch.setenv("KEY_COOLDOWN_SECONDS", "120")
    monkeypatch.setenv("MIN_HTML_CHARS", "1500")
    settings = Settings()
    assert settings.max_attempts == 3
    assert settings.key_cooldown_seconds == 120.0
    assert settings.min_html_chars == 1500


def test_provider_defaults(monkeypatch):
    monkeypatch.delenv("PROVIDER_BASE_URL", raising=False)
    monkeypatch.delenv("MODEL", raising=False)
    settings = Settings()
    assert settings.base_url == config.DEFAULT_BASE_URL
    assert settings.model == "gemini-2.0-flash"


def test_refresh_settings_rereads_environment(monkeypatch):
    monkeypatch.setattr(config, "_settings", None)
    _clear_key_env(monkeypatch)
    monkeypatch.setenv("GEMINI_API_KEY_1", "before")
    first = config.refresh_settings()
    assert config.get_settings() is first

    monkeypatch.setenv("GEMINI_API_KEY_1", "after")
    assert config.get_settings().api_keys == ["before"]
    assert config.refresh_settings().api_keys == ["after"]
