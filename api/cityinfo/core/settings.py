"""
Process-wide configuration, read once from environment variables (or `.env`).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# base64 of "dev-change-this-secret-for-cityinfo-tokens" (dev only).
_DEV_SECRET_FOR_KEY = "ZGV2LWNoYW5nZS10aGlzLXNlY3JldC1mb3ItY2l0eWluZm8tdG9rZW5z"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    # Database
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5

    # Bearer tokens
    auth_issuer: str = "https://localhost:7169"
    auth_audience: str = "cityinfoapi"
    auth_secret_for_key: str = _DEV_SECRET_FOR_KEY
    auth_token_lifetime_min: int = 60

    # Notifications
    mail_service: str = "local"
    mail_to: str = "admin@mycompany.com"
    mail_from: str = "noreply@mycompany.com"

    # Files
    download_file_path: str = "getting-started-with-rest-slides.pdf"
    upload_dir: str = "."

    app_env: str = "production"
    log_dir: str = "logs"
    log_level: str = "DEBUG"

    @field_validator("mail_service")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.lower()

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance. Tests call `get_settings.cache_clear()` after
    changing the environment.
    """
    return Settings()
