"""
Application settings with Pydantic v2 validation.

Every value can be set from the environment. Nested groups use their own
prefix (STORAGE_, LEDGER_, API_); top-level values have none.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the ledger database lives and how it is pooled."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stock_ledger.db"

    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0)  # ms
    acquire_timeout: float | None = Field(default=30.0, gt=0)  # s

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @model_validator(mode="after")
    def create_data_dir(self) -> "StorageSettings":
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self


class LedgerSettings(BaseSettings):
    """Read-side defaults for listings and price history."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    default_page_size: int = Field(default=50, ge=1, le=500)
    price_history_limit: int = Field(default=10, ge=1)


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stock Ledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # "auto" renders to the console in development and JSON elsewhere
    log_format: Literal["auto", "console", "json"] = "auto"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    api: APISettings = Field(default_factory=APISettings)

    @property
    def json_logs(self) -> bool:
        if self.log_format == "auto":
            return self.environment != "development"
        return self.log_format == "json"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
