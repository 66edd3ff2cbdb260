"""
Application configuration via Pydantic Settings.
Loads from environment variables with validation and defaults.
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache

VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # === Server ===
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(default=8010, alias="SERVER_PORT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # === Remote registration endpoint ===
    registration_endpoint: str = Field(
        default="http://localhost:8000/api/register",
        alias="REGISTRATION_ENDPOINT"
    )
    registration_user_id: str = Field(default="local-session", alias="REGISTRATION_USER_ID")
    upload_timeout: float = Field(default=30.0, gt=0, alias="UPLOAD_TIMEOUT")

    # === Local durable store ===
    storage_dir: str = Field(default="data/registrations", alias="STORAGE_DIR")
    queue_key: str = Field(default="queued-registrations", alias="QUEUE_KEY")

    # === Analysis ===
    score_tolerance: float = Field(default=40.0, gt=0, alias="SCORE_TOLERANCE")
    metric_set: str = Field(default="full", alias="METRIC_SET")
    calibration_file: Optional[str] = Field(default=None, alias="CALIBRATION_FILE")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"  # Ignore extra env vars


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
