# src/logrelay/core/
# ├─ __init__.py            # public API re-exports
# ├─ filters.py             # should_log() level gate + correlation-id contextvar helpers
# ├─ stores.py              # BufferStore, InMemoryBufferStore, JsonFileBufferStore
# ├─ buffering.py           # BufferController (batching, timer, single-flight flush)
# ├─ dispatcher.py          # Dispatcher (ordered, per-transport error isolation)
# ├─ logger.py              # Logger facade
# ├─ manager.py             # LoggingContext, LoggerRegistry, configure()/get_logger()
# ├─ formatters.py          # JsonFormatter, TextFormatter, ColorFormatter
# ├─ transports.py          # ConsoleTransport, FileTransport
# ├─ builder.py             # Settings -> LoggerConfig, setup_logging()/shutdown_logging()
# └─ middleware.py          # Starlette middleware (import it directly; needs starlette)


from .filters import should_log, set_correlation_id, get_correlation_id, reset_correlation_id
from .stores import BufferStore, InMemoryBufferStore, JsonFileBufferStore
from .buffering import BufferController
from .dispatcher import Dispatcher
from .logger import Logger
from .manager import (
    LoggingContext,
    LoggerRegistry,
    get_registry,
    configure,
    get_logger,
    is_configured,
    get_config,
    flush,
    shutdown,
)
from .formatters import JsonFormatter, TextFormatter, ColorFormatter
from .transports import Transport, BaseTransport, ConsoleTransport, FileTransport
from .builder import make_logger_config, setup_logging, shutdown_logging

__all__ = [
    "should_log", "set_correlation_id", "get_correlation_id", "reset_correlation_id",
    "BufferStore", "InMemoryBufferStore", "JsonFileBufferStore",
    "BufferController", "Dispatcher", "Logger",
    "LoggingContext", "LoggerRegistry", "get_registry",
    "configure", "get_logger", "is_configured", "get_config", "flush", "shutdown",
    "JsonFormatter", "TextFormatter", "ColorFormatter",
    "Transport", "BaseTransport", "ConsoleTransport", "FileTransport",
    "make_logger_config", "setup_logging", "shutdown_logging",
]
