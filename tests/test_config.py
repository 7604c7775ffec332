# File: tests/test_config.py

from freshlink.core.config import Settings, _env_float, _env_int


def test_cors_origins_accept_comma_separated_string():
    settings = Settings(backend_cors_origins="http://a.test, http://b.test,")
    assert settings.backend_cors_origins == ["http://a.test", "http://b.test"]


def test_bad_numeric_env_values_fall_back(monkeypatch):
    monkeypatch.setenv("GEMINI_TEMPERATURE", "warm")
    monkeypatch.setenv("GEMINI_MAX_TOKENS", "lots")
    assert _env_float("GEMINI_TEMPERATURE", 0.35) == 0.35
    assert _env_int("GEMINI_MAX_TOKENS", 1152) == 1152

    monkeypatch.setenv("GEMINI_MAX_TOKENS", "2048")
    assert _env_int("GEMINI_MAX_TOKENS", 1152) == 2048


def test_ai_enabled_follows_key():
    assert Settings(ai_api_key="k").ai_enabled is True
    assert Settings(ai_api_key=None).ai_enabled is False
