"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Persistence (key-value state table)
    database_url: str = "sqlite:///./finance_mentor.db"
    seed_demo_data: bool = True

    # Service
    service_name: str = "finance-mentor"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Import
    csv_delimiter: str = ","

    # Forecast assumptions
    starting_balance: float = 15000.0
    forecast_trailing_days: int = 30
    forecast_forward_days: int = 30
    payday_interval_days: int = 14
    payday_amount: float = 3200.0
    avg_daily_spend: float = 120.0
    spend_jitter: float = 0.25  # +/- fraction of avg_daily_spend

    # Unset means unseeded randomness (a fresh series per request)
    forecast_seed: Optional[int] = None
    assistant_seed: Optional[int] = None

    # Remote analysis (OpenRouter chat completions)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "google/gemini-flash-1.5-8b"
    site_url: str = "http://localhost:5173"
    site_name: str = "Finance Mentor"

    # HTTP Client
    http_timeout_seconds: float = 10.0


settings = Settings()
