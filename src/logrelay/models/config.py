from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..validators.config_validators import normalize_level_name, normalize_overrides, to_lowercase
from .levels import AsyncMode, LogLevel

DEFAULT_MAX_BUFFER_SIZE = 100
DEFAULT_FLUSH_INTERVAL_MS = 2000

# (error, entry, transport_name) -> None
ErrorHook = Callable[..., None]


class BufferingOptions(BaseModel):
    """
    Buffering knobs for a configuration.

    - enabled: route entries through a BufferController instead of dispatching directly
    - max_buffer_size: flush as soon as this many entries are pending
    - flush_interval_ms: periodic flush interval; 0 or None disables the timer
    - store: BufferStore holding pending entries (in-memory when None)
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    max_buffer_size: int = Field(default=DEFAULT_MAX_BUFFER_SIZE, ge=1)
    flush_interval_ms: int | None = Field(default=DEFAULT_FLUSH_INTERVAL_MS, ge=0)
    store: Any = None

    @field_validator("store")
    @classmethod
    def check_store(cls, v: Any) -> Any:
        if v is None:
            return v
        missing = [m for m in ("load", "save", "clear") if not callable(getattr(v, m, None))]
        if missing:
            raise ValueError(f"buffer store is missing {', '.join(missing)}()")
        return v


class LoggerConfig(BaseModel):
    """
    The process-wide logging configuration.

    Exactly one LoggerConfig is active at a time (see `logrelay.core.manager`).
    Transports are kept in the given order; they are invoked in that order for
    every entry.
    """

    model_config = ConfigDict(frozen=True)

    level: LogLevel = LogLevel.INFO
    async_mode: AsyncMode = AsyncMode.BACKGROUND
    env: str | None = None
    transports: tuple[Any, ...] = ()
    buffering: BufferingOptions | None = None
    overrides: Mapping[str, LogLevel] = Field(default_factory=dict, validate_default=True)
    on_error: ErrorHook | None = None

    # --- Validators ---
    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return normalize_level_name(v)

    @field_validator("async_mode", mode="before")
    @classmethod
    def normalize_async_mode(cls, v: Any) -> Any:
        return to_lowercase(v) if isinstance(v, str) else v

    @field_validator("overrides", mode="before")
    @classmethod
    def normalize_override_levels(cls, v: Any) -> Any:
        return normalize_overrides(v)

    @field_validator("overrides")
    @classmethod
    def freeze_overrides(cls, v: Mapping[str, LogLevel]) -> Mapping[str, LogLevel]:
        # read-only: changing levels goes through configure()
        return MappingProxyType(dict(v))

    @field_validator("transports")
    @classmethod
    def check_transports(cls, v: tuple[Any, ...]) -> tuple[Any, ...]:
        for transport in v:
            if not callable(getattr(transport, "log", None)):
                raise ValueError(f"transport {transport!r} has no log() method")
        return v

    # --- Derived settings ---
    @property
    def buffering_enabled(self) -> bool:
        return bool(self.buffering and self.buffering.enabled)

    def minimum_level_for(self, logger_name: str) -> LogLevel:
        """Per-name override if present, else the baseline level."""
        return self.overrides.get(logger_name, self.level)


__all__ = [
    "BufferingOptions",
    "LoggerConfig",
    "ErrorHook",
    "DEFAULT_MAX_BUFFER_SIZE",
    "DEFAULT_FLUSH_INTERVAL_MS",
]
