from typing import Any, Mapping

# Level names accepted from users and env vars, mapped to canonical level values.
LEVEL_ALIASES = {
    "warning": "warn",
    "err": "error",
}


def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.lower()


def normalize_level_name(value: Any) -> Any:
    """
    Lowercase a level name and resolve aliases ("WARNING" -> "warn").

    Non-string values are returned untouched so pydantic can reject or coerce them.
    """
    if not isinstance(value, str):
        return value
    name = value.strip().lower()
    return LEVEL_ALIASES.get(name, name)


def normalize_overrides(value: Any) -> Any:
    """
    Normalize every level in a logger-name -> level mapping.
    """
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        return value
    return {name: normalize_level_name(level) for name, level in value.items()}
