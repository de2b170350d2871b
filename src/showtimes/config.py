"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Dataset
    data_path: str = "./data"
    history_limit: int = 100

    # TMDb API
    tmdb_api_key: str = ""
    tmdb_language: str = "en-US"
    tmdb_timeout: float = 10.0
    cache_ttl_hours: int = 168
    cache_sweep_minutes: int = 60

    # Showtime validity window, in calendar months from today
    validity_months: int = 3

    # Scraping settings
    scrape_timeout: int = 30
    request_delay: float = 3.0
    request_parallelism: int = 1
    max_concurrent_theaters: int = 4

    log_level: str = "INFO"


# Global settings instance
settings = Settings()
