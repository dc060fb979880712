"""Tests for settings loaded from the environment."""

from config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.storage_key == "ecoBrowseReports"
    assert settings.cors_origins == ["*"]
    assert len(settings.popular_sites) == 10


def test_cors_origins_from_environment(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["chrome-extension://abcdef"]')
    assert Settings(_env_file=None).cors_origins == ["chrome-extension://abcdef"]
