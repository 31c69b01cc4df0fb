# src/logrelay/core/builder.py
"""
Logging builder: turn Settings into a LoggerConfig and install it.

This module:
 - picks a formatter from LOG_FORMAT ("json" | "text" | "color")
 - always adds a console transport; adds a rotating file transport when
   LOG_TO_STDOUT is false and LOG_DIR is set
 - enables buffering from LOG_BUFFERING_ENABLED, with a durable JSON store
   when LOG_BUFFER_FILE is set
 - exposes setup_logging(settings) / shutdown_logging() for application start and stop

Settings are duck-typed: any object with the attributes of
`logrelay.config.settings.Settings` works (tests pass a SimpleNamespace).
Missing optional attributes fall back to the Settings defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from ..models.config import BufferingOptions, LoggerConfig
from .formatters import ColorFormatter, JsonFormatter, TextFormatter
from .manager import configure, get_registry
from .stores import JsonFileBufferStore
from .transports import ConsoleTransport, FileTransport

logger = logging.getLogger(__name__)


def make_formatter(settings: Any):
    fmt = getattr(settings, "LOG_FORMAT", "json")
    if fmt == "json":
        return JsonFormatter(env=getattr(settings, "ENV", None), service=getattr(settings, "SERVICE_NAME", None))
    if fmt == "color":
        return ColorFormatter()
    return TextFormatter()


def make_transports(settings: Any) -> list:
    formatter = make_formatter(settings)
    transports: list = [ConsoleTransport(formatter=formatter, name="console")]

    log_dir = getattr(settings, "LOG_DIR", None)
    if (not getattr(settings, "LOG_TO_STDOUT", True)) and log_dir:
        transports.append(
            FileTransport(
                Path(log_dir) / getattr(settings, "LOG_FILE_NAME", "app.log"),
                max_bytes=getattr(settings, "LOG_MAX_BYTES", 5_000_000),
                backup_count=getattr(settings, "LOG_BACKUP_COUNT", 5),
                formatter=formatter,
                name="file",
            )
        )
    return transports


def make_buffering(settings: Any) -> BufferingOptions | None:
    if not getattr(settings, "LOG_BUFFERING_ENABLED", False):
        return None
    buffer_file = getattr(settings, "LOG_BUFFER_FILE", None)
    return BufferingOptions(
        enabled=True,
        max_buffer_size=getattr(settings, "LOG_BUFFER_MAX_SIZE", 100),
        flush_interval_ms=getattr(settings, "LOG_FLUSH_INTERVAL_MS", 2000),
        store=JsonFileBufferStore(buffer_file) if buffer_file else None,
    )


def make_logger_config(settings: Any, *, on_error: Callable[..., None] | None = None) -> LoggerConfig:
    """
    Build the LoggerConfig described by `settings`.

    `on_error` is not expressible as an env var, so it is passed separately.
    """
    return LoggerConfig(
        level=getattr(settings, "LOG_LEVEL", "info"),
        async_mode=getattr(settings, "LOG_ASYNC_MODE", "background"),
        env=getattr(settings, "ENV", None),
        transports=make_transports(settings),
        buffering=make_buffering(settings),
        overrides=dict(getattr(settings, "LOG_OVERRIDES", None) or {}),
        on_error=on_error,
    )


def setup_logging(settings: Any, *, on_error: Callable[..., None] | None = None) -> LoggerConfig:
    """
    Build and install the configuration. Replaces any active one.
    """
    config = make_logger_config(settings, on_error=on_error)
    configure(config)
    logger.debug(
        "logrelay configured: level=%s async_mode=%s transports=%s buffering=%s",
        config.level.value, config.async_mode.value,
        [getattr(t, "name", type(t).__name__) for t in config.transports],
        config.buffering_enabled,
    )
    return config


async def shutdown_logging() -> None:
    """
    Flush and tear down the active configuration; call at application shutdown.
    """
    await get_registry().shutdown()


__all__ = [
    "make_formatter",
    "make_transports",
    "make_buffering",
    "make_logger_config",
    "setup_logging",
    "shutdown_logging",
]
