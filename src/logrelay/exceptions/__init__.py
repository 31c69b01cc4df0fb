from .base import LogRelayError, ConfigurationError, NotConfiguredError, BufferStoreError

__all__ = [
    "LogRelayError",
    "ConfigurationError",
    "NotConfiguredError",
    "BufferStoreError",
]
