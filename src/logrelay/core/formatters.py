# src/logrelay/core/formatters.py

"""
Entry formatters used by the bundled transports.

  - JsonFormatter: one JSON object per entry, for log collectors (ELK,
    Fluentd, CloudWatch, ...). Adds service/env/version fields and never raises
    on non-serializable metadata (values are stringified).

  - TextFormatter: compact human-readable line:
        [2025-09-27T10:31:04+00:00] [INFO ] [auth] user signed in {"meta": {...}}

  - ColorFormatter: TextFormatter with the level highlighted by ANSI colors,
    for local development terminals.

A formatter is any object with `format(entry) -> str`; transports accept a
custom one.
"""

from __future__ import annotations

import json
from importlib import metadata as importlib_metadata
from typing import Any, Protocol

from ..models.entry import LogEntry


def get_package_version(default: str = "unknown") -> str:
    try:
        return importlib_metadata.version("logrelay")
    except importlib_metadata.PackageNotFoundError:
        return default


PROJECT_VERSION = get_package_version()

# Optional fields rendered after the message by the text formatters, in this order.
EXTRA_FIELDS = ("tags", "context", "meta", "error", "env", "correlation_id")


class EntryFormatter(Protocol):
    def format(self, entry: LogEntry) -> str:
        ...


class JsonFormatter:
    """
    Structured JSON formatter.

    Construction:
      - env: default environment name; an entry's own `env` wins.
      - service: logical service name included in every line.
    """

    def __init__(self, *, env: str | None = None, service: str | None = None):
        self.env = env
        self.service = service

    def format(self, entry: LogEntry) -> str:
        record: dict[str, Any] = {
            "timestamp": entry.timestamp,
            "level": entry.level.value.upper(),
            "logger": entry.logger_name,
            "message": entry.message,
            "id": entry.id,
            "service": self.service,
            "env": entry.env if entry.env is not None else self.env,
            "version": PROJECT_VERSION,
        }

        data = entry.to_dict()
        for key in EXTRA_FIELDS:
            if key in data and key not in record:
                record[key] = _safe(data[key])

        # default=str is the last safety net for nested non-serializable values.
        return json.dumps(record, ensure_ascii=False, default=str)


class TextFormatter:
    def format(self, entry: LogEntry) -> str:
        parts = [
            f"[{entry.timestamp}]",
            f"[{self.format_level(entry)}]",
            f"[{entry.logger_name}]",
            entry.message,
        ]
        extras = {key: value for key, value in entry.to_dict().items() if key in EXTRA_FIELDS}
        if extras:
            parts.append(json.dumps(extras, ensure_ascii=False, default=str))
        return " ".join(parts)

    def format_level(self, entry: LogEntry) -> str:
        return entry.level.value.upper().ljust(5)


class ColorFormatter(TextFormatter):
    """
    Development-friendly colored formatter.

    ANSI codes may show up as raw escape sequences on consoles without ANSI
    support; use TextFormatter there.
    """

    COLOR_CODES = {
        "debug": "\033[36m",    # cyan
        "info": "\033[32m",     # green
        "warn": "\033[33m",     # yellow
        "error": "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def format_level(self, entry: LogEntry) -> str:
        color = self.COLOR_CODES.get(entry.level.value, "")
        return f"{color}{super().format_level(entry)}{self.RESET}"


def _safe(value: Any) -> Any:
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        # Fall back to a string representation rather than failing the whole line.
        return str(value)


__all__ = [
    "EntryFormatter",
    "JsonFormatter",
    "TextFormatter",
    "ColorFormatter",
    "PROJECT_VERSION",
]
