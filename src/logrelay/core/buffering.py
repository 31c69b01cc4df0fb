# src/logrelay/core/buffering.py
"""
BufferController: accumulate entries and flush them to a handler in batches.

This decouples emitting an entry from dispatching it. Entries are appended to
an in-memory buffer, the whole buffer is saved to a BufferStore after every
enqueue, and the buffer is drained to the flush handler:
 - when it reaches `max_buffer_size`,
 - every `flush_interval_ms` (periodic timer task),
 - on an explicit `flush()` call,
 - once more on `dispose()`.

Guarantees:
 - readiness: the persisted backlog is loaded exactly once, before the first
   enqueue or flush touches the buffer, so entries left behind by a previous
   process are flushed ahead of new ones.
 - serialized state: buffer mutation and the matching store call run under one
   asyncio.Lock, so the persisted copy never diverges from memory.
 - single flight: at most one flush runs at a time. `flush()` calls made while
   one is running await that same flush instead of starting another.
 - after `dispose()` the timer never fires again. Until then a timer that
   died with its event loop is restarted on the next loop that uses the controller.

The batch is cleared from the store *before* the handler runs. If the handler
fails the batch is not re-queued (at-most-once delivery).
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable

from ..models.config import BufferingOptions
from ..models.entry import LogEntry
from .stores import BufferStore, InMemoryBufferStore

logger = logging.getLogger(__name__)

FlushHandler = Callable[[list[LogEntry]], "Awaitable[None] | None"]


class BufferController:
    def __init__(self, options: BufferingOptions | None, flush_handler: FlushHandler):
        options = options or BufferingOptions(enabled=True)
        self._store: BufferStore = options.store if options.store is not None else InMemoryBufferStore()
        self._max_buffer_size = options.max_buffer_size
        self._flush_interval_ms = options.flush_interval_ms
        self._flush_handler = flush_handler

        self._buffer: list[LogEntry] = []
        self._ready = False
        self._lock = asyncio.Lock()
        self._flush_task: asyncio.Future | None = None
        self._timer: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._disposed = False

        # The timer needs a running loop; without one it starts on first enqueue.
        self._start_timer()

    # -----------------------
    # Introspection
    # -----------------------
    @property
    def store(self) -> BufferStore:
        return self._store

    @property
    def pending(self) -> tuple[LogEntry, ...]:
        return tuple(self._buffer)

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def flush_in_progress(self) -> bool:
        return self._flush_task is not None and not self._flush_task.done()

    # -----------------------
    # Public operations
    # -----------------------
    async def enqueue(self, entry: LogEntry) -> None:
        """
        Append an entry, persist the buffer, and flush when the size threshold is reached.

        Store errors propagate; on a failed save the entry is taken back out of
        memory so memory and store stay identical.
        """
        self._bind_loop()
        self._start_timer()
        async with self._lock:
            await self._ensure_ready()
            self._buffer.append(entry)
            try:
                await self._store.save(list(self._buffer))
            except BaseException:
                self._buffer.pop()
                raise
            reached = len(self._buffer) >= self._max_buffer_size

        if reached:
            await self.flush()

    async def flush(self) -> None:
        """
        Drain the buffer to the flush handler; coalesce with a flush already in flight.

        Exceptions from the store or the handler propagate to every awaiting caller.
        Cancelling one caller does not cancel the shared flush.
        """
        self._bind_loop()
        task = self._flush_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._perform_flush())
            self._flush_task = task
            task.add_done_callback(_consume_exception)
        await asyncio.shield(task)

    def dispose(self) -> asyncio.Task | None:
        """
        Stop the timer for good and start one best-effort final flush.

        Inside a running loop the final flush is scheduled and its task returned
        (callers may await it or not). Without a running loop it is run to
        completion here. Final-flush failures go to the diagnostic logger.
        """
        if self._disposed:
            return None
        self._disposed = True

        if self._timer is not None:
            if not self._timer.done():
                self._timer.cancel()
            self._timer = None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._final_flush())
            return None
        return loop.create_task(self._final_flush())

    async def close(self) -> None:
        """dispose() and wait for the final flush."""
        task = self.dispose()
        if task is not None:
            await task

    # -----------------------
    # Internals
    # -----------------------
    def _bind_loop(self) -> asyncio.AbstractEventLoop:
        """
        Attach loop-bound state to the running loop.

        A controller can outlive the loop it was first used on (one asyncio.run()
        after another). Its lock, in-flight flush and timer belong to the old loop
        and are dropped; the new loop gets fresh ones.
        """
        loop = asyncio.get_running_loop()
        if loop is not self._loop:
            self._loop = loop
            self._lock = asyncio.Lock()
            self._flush_task = None
            if self._timer is not None and self._timer.get_loop() is not loop:
                self._timer = None
        return loop

    def _start_timer(self) -> None:
        if self._disposed or not self._flush_interval_ms:
            return
        try:
            loop = self._bind_loop()
        except RuntimeError:
            return
        if self._timer is not None and not self._timer.done():
            return
        self._timer = loop.create_task(self._run_timer(self._flush_interval_ms / 1000))

    async def _run_timer(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            if self._disposed:
                return
            try:
                await self.flush()
            except Exception:
                # the next tick tries again
                logger.exception("Periodic buffer flush failed")

    async def _final_flush(self) -> None:
        try:
            await self.flush()
        except Exception:
            logger.exception("Final buffer flush failed; pending entries were dropped")

    async def _perform_flush(self) -> None:
        try:
            async with self._lock:
                await self._ensure_ready()
                if not self._buffer:
                    return
                batch = self._buffer
                self._buffer = []
                try:
                    await self._store.clear()
                except BaseException:
                    self._buffer = batch
                    raise

            # Outside the lock: entries enqueued from here on start the next batch.
            result = self._flush_handler(batch)
            if inspect.isawaitable(result):
                await result
        finally:
            self._flush_task = None

    async def _ensure_ready(self) -> None:
        # Called with self._lock held.
        if self._ready:
            return
        backlog = await self._store.load()
        self._buffer = list(backlog) + self._buffer
        self._ready = True


def _consume_exception(task: asyncio.Future) -> None:
    # Awaiting callers already received the exception; mark it retrieved.
    if not task.cancelled():
        task.exception()


__all__ = ["BufferController", "FlushHandler"]
