"""
Configuration settings for the Natural Remedy Bridge system.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Natural Remedy Bridge"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # Database Configuration
    database_url: str = Field(default="sqlite:///./natural_remedy_bridge.db")
    database_echo: bool = Field(default=False)

    # Matching defaults
    match_limit: int = Field(default=10, ge=1)
    match_min_score: float = Field(default=0.12, ge=0.0, le=1.0)

    # Seed data
    seed_drugs_csv: Optional[str] = Field(default=None)
    seed_remedies_csv: Optional[str] = Field(default=None)

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default="logs/app.log")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Create necessary directories
        if self.log_file:
            Path(self.log_file).parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
