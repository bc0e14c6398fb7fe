"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from src.app.core.config import Settings

SECRET = "test-secret-key-that-is-at-least-32-characters"


def test_roster_defaults():
    settings = Settings(SECRET_KEY=SECRET)

    assert settings.ROSTER_IMPORT_MAX_ROWS == 5000
    assert settings.ROSTER_DEFAULT_STATUS == "active"
    assert settings.ROSTER_EXPORT_FILENAME_PREFIX == "trainees-export"
    assert settings.max_file_size_bytes == settings.MAX_FILE_SIZE_MB * 1024 * 1024


def test_roster_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ROSTER_IMPORT_MAX_ROWS", "250")
    monkeypatch.setenv("ROSTER_DEFAULT_STATUS", "inactive")

    settings = Settings(SECRET_KEY=SECRET)

    assert settings.ROSTER_IMPORT_MAX_ROWS == 250
    assert settings.ROSTER_DEFAULT_STATUS == "inactive"


def test_unknown_default_status_is_rejected():
    with pytest.raises(ValidationError):
        Settings(SECRET_KEY=SECRET, ROSTER_DEFAULT_STATUS="archived")


def test_cors_lists():
    settings = Settings(
        SECRET_KEY=SECRET,
        CORS_ORIGINS="https://a.example, https://b.example",
        CORS_ALLOW_METHODS="GET, POST",
    )
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
    assert settings.cors_methods_list == ["GET", "POST"]


def test_wildcard_cors_with_credentials_is_rejected():
    with pytest.raises(ValidationError):
        Settings(SECRET_KEY=SECRET, CORS_ORIGINS="*", CORS_ALLOW_CREDENTIALS=True)


def test_production_requires_real_secret():
    with pytest.raises(ValidationError):
        Settings(
            APP_ENV="production",
            SECRET_KEY="change-me-in-production-use-strong-random-key",
            DATABASE_URL="postgresql+asyncpg://db.internal/roster",
        )


def test_token_issuing_settings_are_not_defined():
    settings = Settings(SECRET_KEY=SECRET)

    for name in ("ALGORITHM", "ACCESS_TOKEN_EXPIRE_MINUTES", "HOST", "PORT"):
        assert name not in Settings.model_fields
        assert not hasattr(settings, name)
