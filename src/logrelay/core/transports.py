# src/logrelay/core/transports.py
"""
Transports: where entries end up.

The pipeline only needs two things from a transport:
  - `name`: a stable identifier used in error reports
  - `log(entry)`: deliver one entry; may return an awaitable; may raise

Anything with that shape can be passed to `LoggerConfig(transports=[...])`.
Two implementations ship with the library:

| Transport          | Destination                     | Notes                                  |
| ------------------ | ------------------------------- | -------------------------------------- |
| `ConsoleTransport` | stdout / stderr                 | warn+error go to stderr by default     |
| `FileTransport`    | append-only file                | size-based rotation, writes off-loop   |
"""

from __future__ import annotations

import asyncio
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Awaitable, Protocol, TextIO, runtime_checkable

from ..exceptions import ConfigurationError
from ..models.entry import LogEntry
from ..models.levels import LogLevel
from .formatters import EntryFormatter, TextFormatter

DEFAULT_MAX_BYTES = 5_000_000  # 5 MB
DEFAULT_BACKUP_COUNT = 5


@runtime_checkable
class Transport(Protocol):
    name: str

    def log(self, entry: LogEntry) -> "None | Awaitable[None]":
        ...


class BaseTransport(ABC):
    """Convenience base: provides `name` (defaults to the class name)."""

    def __init__(self, *, name: str | None = None):
        self.name = name or type(self).__name__

    @abstractmethod
    def log(self, entry: LogEntry) -> "None | Awaitable[None]":
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class ConsoleTransport(BaseTransport):
    """
    Write one formatted line per entry to the console.

    - stream: write everything to this stream. When None the stream is picked
      per entry: stderr for warn/error (if split_streams) and stdout otherwise.
      sys.stdout/sys.stderr are looked up at write time so redirection works.
    - formatter: defaults to TextFormatter.
    """

    def __init__(
        self,
        *,
        stream: TextIO | None = None,
        formatter: EntryFormatter | None = None,
        split_streams: bool = True,
        name: str | None = None,
    ):
        super().__init__(name=name)
        self.stream = stream
        self.formatter = formatter or TextFormatter()
        self.split_streams = split_streams

    def log(self, entry: LogEntry) -> None:
        stream = self._stream_for(entry)
        stream.write(self.formatter.format(entry) + "\n")
        stream.flush()

    def _stream_for(self, entry: LogEntry) -> TextIO:
        if self.stream is not None:
            return self.stream
        if self.split_streams and entry.level >= LogLevel.WARN:
            return sys.stderr
        return sys.stdout


class FileTransport(BaseTransport):
    """
    Append one formatted line per entry to a file, rotating by size.

    Rotation works like logging.handlers.RotatingFileHandler: when the next
    line would push the file past `max_bytes`, `app.log` becomes `app.log.1`,
    `app.log.1` becomes `app.log.2`, ... keeping at most `backup_count` rotated
    files. `max_bytes=0` disables rotation.

    Writes are serialized with an asyncio.Lock and run in a worker thread so
    the event loop never blocks on disk IO.
    """

    def __init__(
        self,
        file_path: str | Path,
        *,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
        encoding: str = "utf-8",
        formatter: EntryFormatter | None = None,
        name: str | None = None,
    ):
        if not file_path:
            raise ConfigurationError("FileTransport requires a file_path", fields=["file_path"])
        super().__init__(name=name)
        self.path = Path(file_path)
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.encoding = encoding
        self.formatter = formatter or TextFormatter()
        self._lock = asyncio.Lock()

    async def log(self, entry: LogEntry) -> None:
        line = self.formatter.format(entry) + "\n"
        async with self._lock:
            await asyncio.to_thread(self._write, line)

    def rotated_path(self, index: int) -> Path:
        return self.path.with_name(f"{self.path.name}.{index}")

    # -----------------------
    # blocking helpers (worker thread)
    # -----------------------
    def _write(self, line: str) -> None:
        data = line.encode(self.encoding)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self._should_rollover(len(data)):
            self._rotate()
        with self.path.open("ab") as fh:
            fh.write(data)

    def _should_rollover(self, incoming: int) -> bool:
        if self.max_bytes <= 0 or not self.path.exists():
            return False
        return self.path.stat().st_size + incoming > self.max_bytes

    def _rotate(self) -> None:
        if self.backup_count <= 0:
            self.path.unlink(missing_ok=True)
            return
        for index in range(self.backup_count - 1, 0, -1):
            source = self.rotated_path(index)
            if source.exists():
                os.replace(source, self.rotated_path(index + 1))
        os.replace(self.path, self.rotated_path(1))


__all__ = [
    "Transport",
    "BaseTransport",
    "ConsoleTransport",
    "FileTransport",
    "DEFAULT_MAX_BYTES",
    "DEFAULT_BACKUP_COUNT",
]
