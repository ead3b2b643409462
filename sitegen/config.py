from __future__ import annotations

from dataclasses import dataclass, field
import os

from dotenv import find_dotenv, load_dotenv


MAX_KEY_SLOTS = 20
KEY_SLOT_PREFIX = "GEMINI_API_KEY"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-2.0-flash"


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


_load_env()


def _get_env(key: str, default: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_key_slots() -> list[str]:
    """Collect numbered credential slots in priority order.

    Slots ``GEMINI_API_KEY_1`` .. ``GEMINI_API_KEY_20`` are each optional. The
    unnumbered ``GEMINI_API_KEY`` is only used when none of them is set.
    """
    keys: list[str] = []
    for slot in range(1, MAX_KEY_SLOTS + 1):
        value = _get_env(f"{KEY_SLOT_PREFIX}_{slot}")
        if value and value.strip():
            keys.append(value.strip())
    if keys:
        return keys
    single = _get_env(KEY_SLOT_PREFIX)
    if single and single.strip():
        return [single.strip()]
    return []


@dataclass
class Settings:
    api_keys: list[str] = field(default_factory=_get_key_slots)
    base_url: str = field(default_factory=lambda: _get_env("PROVIDER_BASE_URL", DEFAULT_BASE_URL))
    model: str = field(default_factory=lambda: _get_env("MODEL", DEFAULT_MODEL))
    temperature: float = field(default_factory=lambda: _get_float("TEMPERATURE", 0.7))
    max_output_tokens: int = field(default_factory=lambda: _get_int("MAX_OUTPUT_TOKENS", 8192))
    timeout_seconds: float = field(default_factory=lambda: _get_float("PROVIDER_TIMEOUT_SECONDS", 120.0))

    max_attempts: int = field(default_factory=lambda: _get_int("PROVIDER_MAX_ATTEMPTS", 3))
    backoff_seconds: float = field(default_factory=lambda: _get_float("PROVIDER_BACKOFF_SECONDS", 1.0))
    key_cooldown_seconds: float = field(default_factory=lambda: _get_float("KEY_COOLDOWN_SECONDS", 300.0))

    min_html_chars: int = field(default_factory=lambda: _get_int("MIN_HTML_CHARS", 3000))
    min_page_chars: int = field(default_factory=lambda: _get_int("MIN_PAGE_CHARS", 2000))
    min_css_chars: int = field(default_factory=lambda: _get_int("MIN_CSS_CHARS", 800))
    min_js_chars: int = field(default_factory=lambda: _get_int("MIN_JS_CHARS", 300))

    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))
    log_dir: str | None = field(default_factory=lambda: _get_env("LOG_DIR"))


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def refresh_settings() -> Settings:
    """Rebuild settings from environment variables."""
    global _settings
    _settings = Settings()
    return _settings


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_MODEL",
    "MAX_KEY_SLOTS",
    "Settings",
    "get_settings",
    "refresh_settings",
]
