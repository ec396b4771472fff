"""Functions over strings, arrays and other iterables."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence, Sized
from typing import Any

from squiggly.functions.coercion import to_string
from squiggly.functions.registry import squiggly_function


def _sliceable(value: Any) -> bool:
    return isinstance(value, (str, Sequence)) and not isinstance(value, Mapping)


@squiggly_function(aliases=("count", "length"))
def size(value: Any) -> int:
    """Length of strings and collections; 0 for None, 1 for any other value."""
    if value is None:
        return 0
    if isinstance(value, Sized):
        return len(value)
    return 1


@squiggly_function()
def first(value: Any) -> Any:
    if value is None or isinstance(value, Mapping):
        return value
    if _sliceable(value):
        return value[0] if value else None
    if isinstance(value, Iterable):
        return next(iter(value), None)
    return value


@squiggly_function()
def last(value: Any) -> Any:
    if value is None or isinstance(value, Mapping):
        return value
    if _sliceable(value):
        return value[-1] if value else None
    if isinstance(value, Iterable):
        items = list(value)
        return items[-1] if items else None
    return value


@squiggly_function()
def reverse(value: Any) -> Any:
    if isinstance(value, str):
        return value[::-1]
    if _sliceable(value):
        return list(reversed(value))
    return value


@squiggly_function()
def slice_(value: Any, start: int, end: int | None = None) -> Any:
    if _sliceable(value):
        return value[start:end]
    return value


@squiggly_function()
def limit(value: Any, count: int) -> Any:
    """First *count* items, or the last ``-count`` when negative."""
    if not _sliceable(value):
        return value
    return value[:count] if count >= 0 else value[count:]


@squiggly_function()
def sort(value: list | None, descending: bool = False) -> list | None:
    """Sort ascending (None last) or descending."""
    if value is None:
        return None
    return sorted(
        value, key=lambda item: (item is None, item), reverse=descending
    )


@squiggly_function()
def distinct(value: list | None) -> list | None:
    """Drop repeated items, keeping the first of each."""
    if value is None:
        return None
    unique: list[Any] = []
    for item in value:
        if item not in unique:
            unique.append(item)
    return unique


@squiggly_function()
def flatten(value: list | None) -> list | None:
    if value is None:
        return None
    flat: list[Any] = []
    for item in value:
        if isinstance(item, (list, tuple)):
            flat.extend(flatten(list(item)))
        else:
            flat.append(item)
    return flat


@squiggly_function()
def contains(value: Any, search: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        needle = to_string(search)
        return needle is not None and needle in value
    if isinstance(value, Iterable):
        return search in value
    return value == search


@squiggly_function()
def index_of(value: Any, search: Any) -> int:
    """Position of *search*, or -1."""
    if isinstance(value, str):
        needle = to_string(search)
        return -1 if needle is None else value.find(needle)
    if _sliceable(value):
        try:
            return list(value).index(search)
        except ValueError:
            return -1
    return -1
