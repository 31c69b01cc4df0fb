# src/logrelay/tests/test_logging/test_formatters.py
import json

from logrelay.core.formatters import PROJECT_VERSION, ColorFormatter, JsonFormatter, TextFormatter
from logrelay.models.levels import LogLevel


def test_json_formatter_includes_core_fields(entry_factory):
    fmt = JsonFormatter(env="test", service="billing")
    entry = entry_factory("hello", level=LogLevel.WARN, logger_name="api")

    data = json.loads(fmt.format(entry))

    assert data["message"] == "hello"
    assert data["level"] == "WARN"
    assert data["logger"] == "api"
    assert data["id"] == entry.id
    assert data["timestamp"] == entry.timestamp
    assert data["service"] == "billing"
    assert data["env"] == "test"
    assert data["version"] == PROJECT_VERSION
    assert "meta" not in data


def test_json_formatter_entry_env_wins(entry_factory):
    fmt = JsonFormatter(env="production")
    data = json.loads(fmt.format(entry_factory("x", env="canary")))
    assert data["env"] == "canary"


def test_json_formatter_renders_metadata(entry_factory):
    entry = entry_factory(
        "x", tags=("audit",), meta={"user_id": 1}, correlation_id="cid",
        error=RuntimeError("boom"),
    )
    data = json.loads(JsonFormatter().format(entry))
    assert data["tags"] == ["audit"]
    assert data["meta"] == {"user_id": 1}
    assert data["correlation_id"] == "cid"
    assert data["error"]["name"] == "RuntimeError"


def test_json_formatter_handles_non_serializable_values(entry_factory):
    class Opaque:
        def __repr__(self):
            return "<Opaque>"

    entry = entry_factory("x", meta={"obj": Opaque()})
    data = json.loads(JsonFormatter().format(entry))
    assert "<Opaque>" in json.dumps(data["meta"])


def test_text_formatter_without_extras(entry_factory):
    entry = entry_factory("plain line", level=LogLevel.INFO, logger_name="auth")
    line = TextFormatter().format(entry)
    assert line == f"[{entry.timestamp}] [INFO ] [auth] plain line"


def test_text_formatter_appends_extras(entry_factory):
    entry = entry_factory("with meta", meta={"k": "v"}, correlation_id="c1")
    line = TextFormatter().format(entry)
    extras = json.loads(line.split("with meta ", 1)[1])
    assert extras == {"meta": {"k": "v"}, "correlation_id": "c1"}


def test_color_formatter_wraps_level_in_ansi_codes(entry_factory):
    line = ColorFormatter().format(entry_factory("x", level=LogLevel.ERROR))
    assert ColorFormatter.COLOR_CODES["error"] + "ERROR" in line
    assert ColorFormatter.RESET in line
    assert line.endswith(" x")
