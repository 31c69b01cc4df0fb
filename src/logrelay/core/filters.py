# src/logrelay/core/filters.py
"""
Level filter and correlation-id helpers.

Level filter
------------
`should_log(config, logger_name, level)` is the gate every log call passes
before an entry is built. The effective minimum severity is the override for
that logger name when one exists, otherwise the configuration's baseline
level. Overrides are name-scoped: an override for "auth" does not touch
"auth.db" or any other name.

Correlation id
--------------
A correlation id is an opaque string that ties several entries together
(typically all entries of one HTTP request). It is stored in a
`contextvars.ContextVar` so it follows asyncio tasks across awaits. The
pipeline never invents or injects one: callers (or the HTTP middleware) pass
it explicitly via `correlation_id=get_correlation_id()`.
"""

import contextvars

from ..models.config import LoggerConfig
from ..models.levels import LogLevel

_correlation_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def should_log(config: LoggerConfig, logger_name: str, level: LogLevel | str) -> bool:
    """
    Return True iff an entry at `level` from `logger_name` passes the configuration.
    """
    minimum = config.minimum_level_for(logger_name)
    return LogLevel.parse(level).severity >= minimum.severity


def set_correlation_id(correlation_id: str | None):
    """
    Set the correlation id in the current context and return the token to allow reset.
    """
    return _correlation_id_ctx.set(correlation_id)


def reset_correlation_id(token) -> None:
    _correlation_id_ctx.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id_ctx.get()


__all__ = ["should_log", "set_correlation_id", "reset_correlation_id", "get_correlation_id"]
