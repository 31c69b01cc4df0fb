# src/logrelay/core/manager.py
"""
Configuration lifecycle and logger registry.

One LoggingContext is active per registry. It owns everything derived from a
LoggerConfig: the Dispatcher, the BufferController (when buffering is on),
the logger-name cache and the set of in-flight background dispatches.

configure() builds a fresh context and swaps it in under a lock, bumping the
registry generation, then disposes the previous context (timer cancelled,
final best-effort flush). Loggers remember the generation they were created
under and turn into no-ops once it is no longer current.

The module keeps one process-wide registry and exposes it through plain
functions (`configure`, `get_logger`, `flush`, `shutdown`, ...).
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Awaitable, Mapping

from pydantic import ValidationError

from ..exceptions import ConfigurationError, NotConfiguredError
from ..models.config import LoggerConfig
from .buffering import BufferController
from .dispatcher import Dispatcher
from .logger import Logger

logger = logging.getLogger(__name__)

ROOT_LOGGER_NAME = "root"


class LoggingContext:
    """Everything tied to one installed LoggerConfig."""

    def __init__(self, config: LoggerConfig, generation: int):
        self.config = config
        self.generation = generation
        self.dispatcher = Dispatcher(config.transports, config.on_error)
        self.buffer: BufferController | None = None
        if config.buffering_enabled:
            self.buffer = BufferController(config.buffering, self.dispatcher.dispatch_batch)
        self.loggers: dict[str, Logger] = {}
        self._background: set[asyncio.Task] = set()

    def submit(self, coro: Awaitable[None]) -> asyncio.Task:
        """Run a dispatch without waiting for it; keep a reference until it finishes."""
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    @property
    def pending_background(self) -> int:
        return len(self._background)

    async def drain(self) -> None:
        """Wait for background dispatches and flush the buffer, if any."""
        await _wait_all(self._background)
        if self.buffer is not None:
            await self.buffer.flush()

    def dispose(self) -> asyncio.Task | None:
        if self.buffer is None:
            return None
        return self.buffer.dispose()

    async def aclose(self) -> None:
        await _wait_all(self._background)
        if self.buffer is not None:
            await self.buffer.close()


class LoggerRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._context: LoggingContext | None = None
        self._generation = 0
        self._retiring: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def context(self) -> LoggingContext | None:
        return self._context

    def is_configured(self) -> bool:
        return self._context is not None

    def get_config(self) -> LoggerConfig:
        context = self._context
        if context is None:
            raise NotConfiguredError()
        return context.config

    def configure(self, config: LoggerConfig | Mapping[str, Any]) -> LoggerConfig:
        """
        Install `config` as the single active configuration.

        Raises ConfigurationError for an invalid mapping or an empty transport list.
        Loggers handed out before this call stop dispatching.
        """
        config = _coerce_config(config)
        if not config.transports:
            raise ConfigurationError("configure() requires at least one transport", fields=["transports"])

        with self._lock:
            previous = self._context
            self._generation += 1
            self._context = LoggingContext(config, self._generation)

        if previous is not None:
            self._retire(previous)
        logger.debug("Installed logging configuration generation %d", self._generation)
        return config

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> Logger:
        # Read the context under the lock so a concurrent configure() cannot hand
        # out a logger bound to the context it just replaced.
        with self._lock:
            context = self._context
            if context is None:
                raise NotConfiguredError()
            cached = context.loggers.get(name)
            if cached is None:
                cached = context.loggers[name] = Logger(name, context, self)
            return cached

    async def flush(self) -> None:
        """Wait for pending background dispatches and drain the active buffer."""
        context = self._context
        if context is not None:
            await context.drain()

    async def shutdown(self) -> None:
        """
        Tear down the active configuration and wait for its final flush.

        Afterwards the registry is unconfigured; get_logger() raises until the
        next configure().
        """
        with self._lock:
            context = self._context
            self._context = None
            self._generation += 1

        if context is not None:
            await context.aclose()
        await _wait_all(self._retiring)

    def _retire(self, context: LoggingContext) -> None:
        task = context.dispose()
        if task is not None:
            self._retiring.add(task)
            task.add_done_callback(self._retiring.discard)


async def _wait_all(tasks: set[asyncio.Task]) -> None:
    # Tasks left over from an event loop that has since been closed cannot be awaited here.
    loop = asyncio.get_running_loop()
    pending = [task for task in tasks if task.get_loop() is loop]
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


def _coerce_config(config: LoggerConfig | Mapping[str, Any]) -> LoggerConfig:
    if isinstance(config, LoggerConfig):
        return config
    if not isinstance(config, Mapping):
        raise ConfigurationError(f"Expected a LoggerConfig or a mapping, got {type(config).__name__}")
    try:
        return LoggerConfig.model_validate(dict(config))
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ConfigurationError(f"Invalid logging configuration: {exc}", fields=fields) from exc


# --------------------------
# Process-wide registry
# --------------------------
_REGISTRY = LoggerRegistry()


def get_registry() -> LoggerRegistry:
    return _REGISTRY


def configure(config: LoggerConfig | Mapping[str, Any]) -> LoggerConfig:
    return _REGISTRY.configure(config)


def get_logger(name: str = ROOT_LOGGER_NAME) -> Logger:
    return _REGISTRY.get_logger(name)


def is_configured() -> bool:
    return _REGISTRY.is_configured()


def get_config() -> LoggerConfig:
    return _REGISTRY.get_config()


async def flush() -> None:
    await _REGISTRY.flush()


async def shutdown() -> None:
    await _REGISTRY.shutdown()


# Root-logger shortcuts
async def debug(message: str, **metadata: Any) -> None:
    await get_logger(ROOT_LOGGER_NAME).debug(message, **metadata)


async def info(message: str, **metadata: Any) -> None:
    await get_logger(ROOT_LOGGER_NAME).info(message, **metadata)


async def warn(message: str, **metadata: Any) -> None:
    await get_logger(ROOT_LOGGER_NAME).warn(message, **metadata)


async def error(message: str, **metadata: Any) -> None:
    await get_logger(ROOT_LOGGER_NAME).error(message, **metadata)


__all__ = [
    "LoggingContext",
    "LoggerRegistry",
    "ROOT_LOGGER_NAME",
    "get_registry",
    "configure",
    "get_logger",
    "is_configured",
    "get_config",
    "flush",
    "shutdown",
    "debug",
    "info",
    "warn",
    "error",
]
