# src/logrelay/core/dispatcher.py
"""
Dispatcher: deliver one entry to every configured transport.

Transports are invoked in configured order, one after the other; each
invocation is awaited (when the transport returns an awaitable) before the
next starts. Each invocation is isolated: an exception from one transport is
reported and the remaining transports still receive the entry. dispatch()
itself never raises for transport failures.

Failure reporting goes to the configuration's `on_error(error, entry,
transport_name)` hook when set, otherwise to this module's logger. A hook that
raises is itself reported to the logger and otherwise ignored.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Iterable, Sequence

from ..models.config import ErrorHook
from ..models.entry import LogEntry

logger = logging.getLogger(__name__)


def transport_name(transport: Any) -> str:
    """Stable identifying name of a transport, used in error reports."""
    name = getattr(transport, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(transport).__name__


class Dispatcher:
    def __init__(self, transports: Sequence[Any], on_error: ErrorHook | None = None):
        self._transports = tuple(transports)
        self._on_error = on_error

    @property
    def transports(self) -> tuple[Any, ...]:
        return self._transports

    async def dispatch(self, entry: LogEntry) -> None:
        if not self._transports:
            return

        for transport in self._transports:
            try:
                result = transport.log(entry)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._report(exc, entry, transport_name(transport))

    async def dispatch_batch(self, entries: Iterable[LogEntry]) -> None:
        """Flush handler for buffered mode: dispatch each entry in order."""
        for entry in entries:
            await self.dispatch(entry)

    def _report(self, error: Exception, entry: LogEntry, name: str) -> None:
        if self._on_error is None:
            logger.error(
                "Transport %s failed to log entry %s", name, entry.id,
                exc_info=(type(error), error, error.__traceback__),
            )
            return

        try:
            self._on_error(error, entry, name)
        except Exception:
            logger.exception("on_error hook raised while reporting a failure in transport %s", name)


__all__ = ["Dispatcher", "transport_name"]
