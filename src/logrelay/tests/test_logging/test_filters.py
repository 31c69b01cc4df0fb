# src/logrelay/tests/test_logging/test_filters.py
import itertools

import pytest

from logrelay.core.filters import should_log, set_correlation_id, get_correlation_id, reset_correlation_id
from logrelay.models.config import LoggerConfig
from logrelay.models.levels import LogLevel

ORDER = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]


def test_levels_are_totally_ordered():
    assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARN < LogLevel.ERROR
    assert sorted(reversed(ORDER)) == ORDER


@pytest.mark.parametrize("raw, expected", [
    ("debug", LogLevel.DEBUG),
    ("INFO", LogLevel.INFO),
    ("Warning", LogLevel.WARN),
    ("warn", LogLevel.WARN),
    (LogLevel.ERROR, LogLevel.ERROR),
])
def test_parse_accepts_names_and_aliases(raw, expected):
    assert LogLevel.parse(raw) is expected


def test_parse_rejects_unknown_level():
    with pytest.raises(ValueError):
        LogLevel.parse("verbose")


@pytest.mark.parametrize("minimum, level", list(itertools.product(ORDER, ORDER)))
def test_should_log_follows_severity_order(minimum, level):
    config = LoggerConfig(level=minimum)
    assert should_log(config, "any", level) is (level.severity >= minimum.severity)


def test_override_applies_only_to_its_own_name():
    config = LoggerConfig(level="info", overrides={"auth": "debug"})
    assert should_log(config, "auth", LogLevel.DEBUG) is True
    assert should_log(config, "root", LogLevel.DEBUG) is False
    # no prefix matching
    assert should_log(config, "auth.db", LogLevel.DEBUG) is False


def test_override_can_raise_the_minimum():
    config = LoggerConfig(level="debug", overrides={"noisy": "error"})
    assert should_log(config, "noisy", LogLevel.WARN) is False
    assert should_log(config, "noisy", LogLevel.ERROR) is True
    assert should_log(config, "other", LogLevel.DEBUG) is True


def test_correlation_id_defaults_to_none_and_resets():
    assert get_correlation_id() is None
    token = set_correlation_id("abc-123")
    assert get_correlation_id() == "abc-123"
    reset_correlation_id(token)
    assert get_correlation_id() is None
