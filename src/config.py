from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "EcoBrowse"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./ecobrowse.db"

    # Report history
    storage_key: str = "ecoBrowseReports"
    report_title: str = "EcoBrowse Eco-Efficiency Report"

    # Change notifications: "memory" (single process) or "redis"
    notifier_backend: str = "memory"

    # Redis / Celery
    redis_url: str = "redis://localhost:6379/0"
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"

    # Page fetching
    http_timeout: int = 30
    user_agent: str = "Mozilla/5.0 (compatible; EcoBrowseBot/1.0)"
    max_linked_resources: int = 50

    # Sites scored by the popular sites endpoint
    popular_sites: list[str] = [
        "google.com",
        "youtube.com",
        "facebook.com",
        "wikipedia.org",
        "amazon.com",
        "reddit.com",
        "yahoo.com",
        "instagram.com",
        "x.com",
        "linkedin.com",
    ]

    # Origins allowed by CORS
    cors_origins: list[str] = ["*"]


settings = Settings()
