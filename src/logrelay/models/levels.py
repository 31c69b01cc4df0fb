from enum import Enum

from ..validators.config_validators import normalize_level_name


class LogLevel(str, Enum):
    """
    Severity of a log entry.

    Levels are totally ordered: debug < info < warn < error. Comparisons go
    through `severity` so the enum's string values never leak into ordering.
    """

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def parse(cls, value: "str | LogLevel") -> "LogLevel":
        """Accept a LogLevel or a case-insensitive level name ("WARNING" is an alias of warn)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(normalize_level_name(value))
        except ValueError:
            raise ValueError(f"Unknown log level: {value!r}") from None

    def __lt__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}


class AsyncMode(str, Enum):
    """
    Whether a log call waits for its dispatch.

    SYNC and AWAIT block the caller until every transport has been invoked;
    BACKGROUND starts the dispatch and returns immediately.
    """

    SYNC = "sync"
    AWAIT = "await"
    BACKGROUND = "background"

    @property
    def waits_for_dispatch(self) -> bool:
        return self is not AsyncMode.BACKGROUND
