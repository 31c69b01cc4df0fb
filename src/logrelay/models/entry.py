from __future__ import annotations

import traceback
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from ..utils.frozen import freeze, thaw
from .levels import LogLevel


class ErrorInfo(BaseModel):
    """
    Structured description of an error attached to a log entry.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    message: str | None = None
    stack: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        """Capture the exception type, message and formatted traceback."""
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(name=type(exc).__name__, message=str(exc), stack=stack or None)

    @classmethod
    def coerce(cls, value: "ErrorInfo | BaseException | Mapping[str, Any] | None") -> "ErrorInfo | None":
        if value is None or isinstance(value, ErrorInfo):
            return value
        if isinstance(value, BaseException):
            return cls.from_exception(value)
        return cls.model_validate(dict(value))


class LogEntry(BaseModel):
    """
    Immutable record of one log event.

    Optional fields that the caller did not provide stay None and are left out of
    `to_dict()`. An empty-but-present container (e.g. `tags=()`) is preserved, so
    consumers can tell "not given" from "given and empty".

    `context` and `meta` are deep, read-only snapshots (MappingProxyType, lists
    as tuples): neither the caller mutating what it passed in nor a transport
    poking at the entry changes what other consumers see. `to_dict()` returns
    plain dicts and lists again.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str
    level: LogLevel
    message: str
    logger_name: str
    tags: tuple[str, ...] | None = None
    context: Mapping[str, Any] | None = None
    meta: Mapping[str, Any] | None = None
    error: ErrorInfo | None = None
    env: str | None = None
    correlation_id: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, v: Any) -> Any:
        return LogLevel.parse(v) if isinstance(v, str) else v

    @field_validator("context", "meta")
    @classmethod
    def freeze_mapping(cls, v: Any) -> Any:
        return freeze(v) if v is not None else v

    @field_validator("error", mode="before")
    @classmethod
    def coerce_error(cls, v: Any) -> Any:
        if isinstance(v, BaseException):
            return ErrorInfo.from_exception(v)
        return v

    def to_dict(self) -> dict[str, Any]:
        """
        Plain-dict view of the entry, absent optional fields omitted.

        Used by formatters and durable buffer stores.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "level": self.level.value,
            "message": self.message,
            "logger_name": self.logger_name,
        }
        if self.tags is not None:
            data["tags"] = list(self.tags)
        if self.context is not None:
            data["context"] = thaw(self.context)
        if self.meta is not None:
            data["meta"] = thaw(self.meta)
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        if self.env is not None:
            data["env"] = self.env
        if self.correlation_id is not None:
            data["correlation_id"] = self.correlation_id
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LogEntry":
        return cls.model_validate(dict(data))


__all__ = ["ErrorInfo", "LogEntry"]
