"""Merge policy for extension values during ``PluginMetadata.accept``."""

from collections.abc import Mapping
from typing import Any


def is_mergeable(value: Any) -> bool:
    """Only plain string-keyed mappings are merged; anything else is replaced."""
    return isinstance(value, Mapping) and all(isinstance(k, str) for k in value)


def merge_extension(current: Any, incoming: Any) -> Any:
    """Return the value to store when ``incoming`` is applied over ``current``.

    Mappings are merged one level deep with ``incoming`` winning on conflicts,
    nested values are taken wholesale. The result is a new dict, neither input
    is mutated.
    """
    if current is None:
        return incoming
    if is_mergeable(current) and is_mergeable(incoming):
        merged = dict(current)
        merged.update(incoming)
        return merged
    return incoming
