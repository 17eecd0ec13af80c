"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "cashpilot-insights"
    log_level: str = "INFO"

    # Analysis windows
    recent_window_days: int = 30  # active/new customers, recency
    churn_window_days: int = 90
    clock_skew_days: int = 1  # future dates tolerated before counting as inaccurate

    # Request limits
    max_request_transactions: int = 50_000


settings = Settings()
