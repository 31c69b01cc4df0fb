from .levels import LogLevel, AsyncMode
from .entry import ErrorInfo, LogEntry
from .config import BufferingOptions, LoggerConfig

__all__ = [
    "LogLevel",
    "AsyncMode",
    "ErrorInfo",
    "LogEntry",
    "BufferingOptions",
    "LoggerConfig",
]
