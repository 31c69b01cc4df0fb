from types import MappingProxyType
from typing import Any, Mapping


def freeze(value: Any) -> Any:
    """
    Return a read-only deep snapshot of container metadata.

    Mappings become MappingProxyType over fresh dicts, lists and tuples become
    tuples, sets become frozensets; nested containers are frozen recursively.
    Other values are kept as they are.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, list) or type(value) is tuple:
        return tuple(freeze(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of freeze() for serialization: plain dicts and lists."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if type(value) is tuple:
        return [thaw(item) for item in value]
    return value


__all__ = ["freeze", "thaw"]
