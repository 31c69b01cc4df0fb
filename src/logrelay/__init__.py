"""
logrelay: structured application logging with pluggable transports.

    import logrelay
    from logrelay import ConsoleTransport, FileTransport

    logrelay.configure({
        "level": "info",
        "async_mode": "await",
        "overrides": {"auth": "debug"},
        "transports": [ConsoleTransport(), FileTransport("logs/app.log")],
    })

    log = logrelay.get_logger("auth")
    await log.debug("token refreshed", meta={"user_id": 42})
    ...
    await logrelay.shutdown()
"""

from .exceptions import LogRelayError, ConfigurationError, NotConfiguredError, BufferStoreError
from .models import LogLevel, AsyncMode, ErrorInfo, LogEntry, BufferingOptions, LoggerConfig
from .core.filters import should_log, set_correlation_id, get_correlation_id, reset_correlation_id
from .core.stores import BufferStore, InMemoryBufferStore, JsonFileBufferStore
from .core.buffering import BufferController
from .core.dispatcher import Dispatcher
from .core.logger import Logger
from .core.manager import (
    LoggerRegistry,
    get_registry,
    configure,
    get_logger,
    is_configured,
    get_config,
    flush,
    shutdown,
    debug,
    info,
    warn,
    error,
)
from .core.formatters import JsonFormatter, TextFormatter, ColorFormatter
from .core.transports import Transport, BaseTransport, ConsoleTransport, FileTransport
from .core.builder import make_logger_config, setup_logging, shutdown_logging

__all__ = [
    "LogRelayError", "ConfigurationError", "NotConfiguredError", "BufferStoreError",
    "LogLevel", "AsyncMode", "ErrorInfo", "LogEntry", "BufferingOptions", "LoggerConfig",
    "should_log", "set_correlation_id", "get_correlation_id", "reset_correlation_id",
    "BufferStore", "InMemoryBufferStore", "JsonFileBufferStore",
    "BufferController", "Dispatcher", "Logger",
    "LoggerRegistry", "get_registry",
    "configure", "get_logger", "is_configured", "get_config", "flush", "shutdown",
    "debug", "info", "warn", "error",
    "JsonFormatter", "TextFormatter", "ColorFormatter",
    "Transport", "BaseTransport", "ConsoleTransport", "FileTransport",
    "make_logger_config", "setup_logging", "shutdown_logging",
]
