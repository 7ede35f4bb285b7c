"""Configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # Habit lake
    age_recipient: str = ""
    age_identity: str = ""
    data_lake_path: Path = Path("data/lake")
    data_audit_path: Path = Path("data/audit")

    # Sharing identity stamped on exported goal records
    owner_record_id: str = ""
    owner_name: str = ""
    owner_code: str = ""

    # Display windows
    heatmap_days: int = 30
    trend_days: int = 21

    # Locale
    timezone: str = "Europe/Warsaw"

    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    api_key: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "TRABIT_"}


settings = Settings()
