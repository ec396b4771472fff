"""Functions over arbitrary values: null handling, conversion, property access."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from squiggly.functions import coercion
from squiggly.functions.registry import squiggly_function


@squiggly_function(aliases=("coalesce",))
def default(value: Any, fallback: Any) -> Any:
    """*fallback* when the value is None. Does not propagate None."""
    return fallback if value is None else value


@squiggly_function()
def is_null(value: Any) -> bool:
    return value is None


@squiggly_function()
def is_not_null(value: Any) -> bool:
    return value is not None


@squiggly_function()
def to_string(value: Any) -> str | None:
    return coercion.to_string(value)


@squiggly_function()
def to_number(value: Any) -> int | float | None:
    return coercion.to_number(value)


@squiggly_function()
def to_bool(value: Any) -> bool | None:
    return coercion.to_bool(value)


@squiggly_function(aliases=("property",))
def get(value: Any, key: str) -> Any:
    """Mapping lookup, or attribute lookup on other objects.

    Private and dunder attributes are never read.
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value.get(key)
    if key.startswith("_"):
        raise ValueError(f"attribute {key!r} is not accessible")
    return getattr(value, key, None)


@squiggly_function()
def keys(value: Mapping | None) -> list[Any] | None:
    return None if value is None else list(value.keys())


@squiggly_function()
def values(value: Mapping | None) -> list[Any] | None:
    return None if value is None else list(value.values())
