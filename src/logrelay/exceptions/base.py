"""
Custom exceptions for logging-pipeline operations.
"""

from typing import Iterable

# canonical library-level exception

class LogRelayError(Exception):
    """
    Base exception for logrelay errors.

    - message: human-friendly message
    - fields: optional list of configuration field names related to the error (e.g., ['transports'])
    - error_code: canonical short code (e.g., 'invalid_config', 'not_configured')
    """

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict describing the error.
        Shape:
            {
                "detail": "A human-friendly message",
                "code": "invalid_config",      # optional canonical code
                "fields": ["transports"],      # optional
            }
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload


class ConfigurationError(LogRelayError):
    """Raised when configure() receives a configuration that cannot be installed."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_config")


class NotConfiguredError(LogRelayError):
    """Raised when a logger is requested before any configuration is active."""

    def __init__(self, message: str = "configure() must be called before get_logger()"):
        super().__init__(message, error_code="not_configured")


class BufferStoreError(LogRelayError):
    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(message, error_code="store_failure")
        self.path = path


__all__ = [
    "LogRelayError",
    "ConfigurationError",
    "NotConfiguredError",
    "BufferStoreError",
]
