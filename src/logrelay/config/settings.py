from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import normalize_level_name, normalize_overrides, to_lowercase

class Settings(BaseSettings):
    """
    Logging settings loaded from environment (and an optional .env file).

    `logrelay.core.builder.make_logger_config(settings)` turns these into a LoggerConfig.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"
    SERVICE_NAME: str | None = None

    # Levels & dispatch
    LOG_LEVEL: Literal["debug", "info", "warn", "error"] = "info"
    LOG_ASYNC_MODE: Literal["sync", "await", "background"] = "background"
    # JSON mapping of logger name -> level, e.g. LOG_OVERRIDES='{"auth": "debug"}'
    LOG_OVERRIDES: dict[str, str] = {}

    # Transports
    LOG_FORMAT: Literal["json", "text", "color"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path | None = None
    LOG_FILE_NAME: str = "app.log"
    LOG_MAX_BYTES: int = 5_000_000  # 5 MB
    LOG_BACKUP_COUNT: int = 5

    # Buffering
    LOG_BUFFERING_ENABLED: bool = False
    LOG_BUFFER_MAX_SIZE: int = 100
    LOG_FLUSH_INTERVAL_MS: int = 2000
    # When set, pending entries are persisted to this JSON file and survive restarts.
    LOG_BUFFER_FILE: Path | None = None

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL: lowercase, and accept "WARNING" as an alias of "warn".
        """
        return normalize_level_name(v)

    @field_validator("LOG_OVERRIDES", mode="before")
    def normalize_log_overrides(cls, v):
        return normalize_overrides(v)

    @field_validator("LOG_FORMAT", "LOG_ASYNC_MODE", mode="before")
    def normalize_lowercase(cls, v: str | None) -> str | None:
        return to_lowercase(v)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

# get_settings() takes no arguments and always returns the same settings from the environment,
# so caching it with @lru_cache() is good for performance.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
