"""Settings — environment parsing and URL normalization."""

from inkpost.config import Settings


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@host:5432/blog")
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/blog"


def test_other_urls_untouched():
    settings = Settings(database_url="sqlite+aiosqlite:///:memory:")
    assert settings.database_url == "sqlite+aiosqlite:///:memory:"


def test_activity_log_flag_from_env(monkeypatch):
    monkeypatch.setenv("ACTIVITY_LOG_ENABLED", "false")
    assert Settings().activity_log_enabled is False


def test_defaults():
    settings = Settings()
    assert settings.api_prefix == "/api"
    assert settings.log_level == "INFO"
