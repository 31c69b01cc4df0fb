# src/logrelay/core/stores.py
"""
Buffer stores: where pending (not yet flushed) entries are kept.

A BufferController persists its whole pending buffer after every enqueue and
clears the store right before handing a batch to its flush handler. A durable
store therefore lets entries survive an unclean shutdown: the next controller
built on the same store loads them back ahead of anything new.

- InMemoryBufferStore: default, not durable.
- JsonFileBufferStore: one JSON document on disk, replaced atomically on save.
"""

from __future__ import annotations

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from ..exceptions import BufferStoreError
from ..models.entry import LogEntry


class BufferStore(ABC):
    """Holder of pending entries consumed by a BufferController."""

    @abstractmethod
    async def load(self) -> list[LogEntry]:
        ...

    @abstractmethod
    async def save(self, entries: Sequence[LogEntry]) -> None:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...


class InMemoryBufferStore(BufferStore):
    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    async def load(self) -> list[LogEntry]:
        return list(self._entries)

    async def save(self, entries: Sequence[LogEntry]) -> None:
        self._entries = list(entries)

    async def clear(self) -> None:
        self._entries = []


class JsonFileBufferStore(BufferStore):
    """
    Durable store backed by a single JSON file.

    Layout: {"entries": [<LogEntry.to_dict()>, ...]}. Saves write a sibling
    temp file and os.replace() it over the target so a crash mid-write leaves
    the previous snapshot intact. File IO runs in a worker thread.

    Any read, parse or write failure is raised as BufferStoreError.
    """

    def __init__(self, path: str | Path, *, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    async def load(self) -> list[LogEntry]:
        return await asyncio.to_thread(self._read)

    async def save(self, entries: Sequence[LogEntry]) -> None:
        payload = {"entries": [entry.to_dict() for entry in entries]}
        await asyncio.to_thread(self._write, payload)

    async def clear(self) -> None:
        await asyncio.to_thread(self._remove)

    # -----------------------
    # blocking helpers (worker thread)
    # -----------------------
    def _read(self) -> list[LogEntry]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding=self.encoding)
            if not raw.strip():
                return []
            data = json.loads(raw)
            return [LogEntry.from_dict(item) for item in data.get("entries", [])]
        except (OSError, ValueError, AttributeError) as exc:
            # pydantic's ValidationError is a ValueError subclass
            raise BufferStoreError(f"Failed to load buffered entries: {exc}", path=str(self.path)) from exc

    def _write(self, payload: dict) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False, default=str), encoding=self.encoding)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise BufferStoreError(f"Failed to save buffered entries: {exc}", path=str(self.path)) from exc

    def _remove(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise BufferStoreError(f"Failed to clear buffered entries: {exc}", path=str(self.path)) from exc


__all__ = ["BufferStore", "InMemoryBufferStore", "JsonFileBufferStore"]
