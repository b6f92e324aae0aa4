"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./lrs.db"
    create_tables: bool = True

    # Signed cookies set by the LTI launch flow
    cookie_secret: str = ""
    cookie_salt: str = "lrs-cookie"

    # Pluggable modules, in registration order
    lrs_modules: list[str] = ["lrs.users"]

    # Process
    exit_on_uncaught_exception: bool = True

    # Logging
    log_level: str = "INFO"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 2000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
