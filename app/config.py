"""
Configuration management.
Simple .env based config for VPS deployment.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    environment: str = "development"  # "production" turns on Secure cookies

    # Sessions
    session_cookie_name: str = "auth_session"
    session_expires_in_days: int = 30
    session_cookie_expires: bool = False  # False = browser-session cookie
    session_cookie_same_site: Literal["strict", "lax", "none"] = "strict"

    # Navigation
    authenticated_redirect: str = "/training"
    landing_redirect: str = "/"

    # Database
    database_path: str = "./data/app.db"

    # Logging
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# Global settings instance
settings = Settings()
