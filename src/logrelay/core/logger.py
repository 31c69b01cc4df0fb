# src/logrelay/core/logger.py
"""
Logger: the per-name facade callers log through.

A Logger is created by the registry (`logrelay.get_logger(name)`) and bound
to the LoggingContext that was active at that moment. Every call goes:

    FILTERED  level below the effective minimum -> dropped
    STALE     the context was replaced by configure()/shutdown() -> dropped
    ROUTED    buffering enabled -> BufferController.enqueue()
              async_mode sync/await -> await full dispatch
              async_mode background -> dispatch on a background task, return now

Usage:
    log = get_logger("auth")
    await log.info("user signed in", meta={"user_id": 42}, tags=["audit"])
    try:
        ...
    except Exception:
        await log.exception("token refresh failed")
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from ..models.config import LoggerConfig
from ..models.entry import ErrorInfo, LogEntry
from ..models.levels import LogLevel
from ..utils.ids import generate_log_id
from .filters import should_log

if TYPE_CHECKING:
    from .manager import LoggerRegistry, LoggingContext

logger = logging.getLogger(__name__)


class Logger:
    def __init__(self, name: str, context: "LoggingContext", registry: "LoggerRegistry"):
        self._name = name
        self._context = context
        self._registry = registry
        self._generation = context.generation

    def __repr__(self) -> str:
        return f"<Logger {self._name!r} generation={self._generation}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> LoggerConfig:
        return self._context.config

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_stale(self) -> bool:
        return self._registry.generation != self._generation

    def is_enabled_for(self, level: LogLevel | str) -> bool:
        return not self.is_stale and should_log(self._context.config, self._name, level)

    # -----------------------
    # Level shortcuts
    # -----------------------
    async def debug(self, message: str, **metadata: Any) -> None:
        await self.log(LogLevel.DEBUG, message, **metadata)

    async def info(self, message: str, **metadata: Any) -> None:
        await self.log(LogLevel.INFO, message, **metadata)

    async def warn(self, message: str, **metadata: Any) -> None:
        await self.log(LogLevel.WARN, message, **metadata)

    warning = warn

    async def error(self, message: str, **metadata: Any) -> None:
        await self.log(LogLevel.ERROR, message, **metadata)

    async def exception(self, message: str, **metadata: Any) -> None:
        """Log at error level, attaching the exception currently being handled."""
        if metadata.get("error") is None:
            metadata["error"] = sys.exc_info()[1]
        await self.log(LogLevel.ERROR, message, **metadata)

    # -----------------------
    # Core
    # -----------------------
    async def log(
        self,
        level: LogLevel | str,
        message: str,
        *,
        tags: Iterable[str] | None = None,
        context: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        error: ErrorInfo | BaseException | Mapping[str, Any] | None = None,
        env: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        level = LogLevel.parse(level)
        config = self._context.config
        if not should_log(config, self._name, level):
            return

        if self.is_stale:
            logger.debug(
                "Dropping %s entry from stale logger %r (generation %d)",
                level.value, self._name, self._generation,
            )
            return

        entry = self._create_entry(
            level, message,
            tags=tags, context=context, meta=meta, error=error,
            env=env, correlation_id=correlation_id,
        )
        await self._route(entry)

    async def _route(self, entry: LogEntry) -> None:
        buffer = self._context.buffer
        if buffer is not None:
            await buffer.enqueue(entry)
            return

        dispatcher = self._context.dispatcher
        if self._context.config.async_mode.waits_for_dispatch:
            await dispatcher.dispatch(entry)
        else:
            self._context.submit(dispatcher.dispatch(entry))

    def _create_entry(
        self,
        level: LogLevel,
        message: str,
        *,
        tags: Iterable[str] | None,
        context: Mapping[str, Any] | None,
        meta: Mapping[str, Any] | None,
        error: ErrorInfo | BaseException | Mapping[str, Any] | None,
        env: str | None,
        correlation_id: str | None,
    ) -> LogEntry:
        if isinstance(tags, str):
            tags = (tags,)
        return LogEntry(
            id=generate_log_id(),
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            message=str(message),
            logger_name=self._name,
            tags=tuple(tags) if tags is not None else None,
            context=context,
            meta=meta,
            error=ErrorInfo.coerce(error),
            env=env if env is not None else self._context.config.env,
            correlation_id=correlation_id,
        )


__all__ = ["Logger"]
