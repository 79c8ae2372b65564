"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from stagecms.core.config import Settings, get_settings


def test_default_settings(monkeypatch):
    monkeypatch.delenv("STAGECMS_DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)

    assert settings.app_name == "StageCMS"
    assert settings.environment == "development"
    assert settings.database_url.startswith("sqlite+aiosqlite")
    assert settings.default_page_size == 20
    assert settings.max_page_size == 100
    assert settings.is_development is True
    assert settings.is_production is False


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("STAGECMS_ENVIRONMENT", "production")
    monkeypatch.setenv("STAGECMS_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("STAGECMS_FILE_UPLOAD_BASE_URL", "https://cdn.example.com/files")

    settings = Settings(_env_file=None)

    assert settings.is_production is True
    assert settings.log_level == "WARNING"
    assert settings.file_upload_base_url == "https://cdn.example.com/files"


def test_upload_base_url_trailing_slash_is_stripped():
    settings = Settings(_env_file=None, file_upload_base_url="https://cdn.example.com/files/")
    assert settings.file_upload_base_url == "https://cdn.example.com/files"


def test_default_page_size_cannot_exceed_max():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, default_page_size=50, max_page_size=10)


def test_invalid_environment_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, environment="staging")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
