"""Dual-shape property access for template and instance properties.

Template ``properties`` arrive either as a key-value mapping (anything
with a ``get`` method) or as a plain record object.  Everything past the
geometry boundary sees plain floats only.
"""

from __future__ import annotations

from typing import Any


def get_prop(properties: Any, key: str, default: Any = None) -> Any:
    """Return ``properties[key]`` for mappings, ``properties.key`` for records."""
    if properties is None:
        return default
    getter = getattr(properties, "get", None)
    if callable(getter):
        value = getter(key)
    else:
        value = getattr(properties, key, None)
    return default if value is None else value


def get_number(properties: Any, key: str) -> float | None:
    """Return a positive numeric property as float, or None if absent/invalid."""
    value = get_prop(properties, key)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def first_number(key: str, *sources: Any) -> float | None:
    """Return the first positive value of *key* across *sources*, in order."""
    for source in sources:
        number = get_number(source, key)
        if number is not None:
            return number
    return None
