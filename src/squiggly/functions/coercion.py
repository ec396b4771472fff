"""Generic conversion of function arguments.

Each argument is converted to the annotation of the parameter it lands
in. Numbers, strings, patterns and iterables are all acceptable inputs
where they can be converted sensibly. ``None`` is never converted, so
functions see it and propagate it. A failed conversion raises
TypeError or ValueError, which the caller turns into an invocation
failure.
"""

from __future__ import annotations

import re
import types
import typing
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel


def to_string(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_number(value: Any) -> int | float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            return float(text)
    raise TypeError(f"Cannot convert {type(value).__name__} to a number")


def to_int(value: Any) -> int | None:
    number = to_number(value)
    return None if number is None else int(number)


def to_float(value: Any) -> float | None:
    number = to_number(value)
    return None if number is None else float(number)


def to_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "false"):
            return text == "true"
        raise ValueError(f"Cannot convert {value!r} to a boolean")
    if isinstance(value, (int, float)):
        return value != 0
    return bool(value)


def to_pattern(value: Any) -> re.Pattern | None:
    if value is None or isinstance(value, re.Pattern):
        return value
    return re.compile(to_string(value))


def to_list(value: Any) -> list[Any] | None:
    """Unwrap arrays and iterables; wrap a single scalar in a list."""
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, (str, bytes, Mapping)):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def to_mapping(value: Any) -> Mapping[str, Any] | None:
    if value is None or isinstance(value, Mapping):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump()
    raise TypeError(f"Cannot convert {type(value).__name__} to a mapping")


def to_datetime(value: Any) -> datetime | None:
    """Dates become midnight, numbers are epoch milliseconds (UTC), strings ISO 8601."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        raise TypeError("Cannot convert a boolean to a date")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise TypeError(f"Cannot convert {type(value).__name__} to a date")


_CONVERTERS: dict[Any, Callable[[Any], Any]] = {
    str: to_string,
    int: to_int,
    float: to_float,
    bool: to_bool,
    re.Pattern: to_pattern,
    list: to_list,
    Sequence: to_list,
    Iterable: to_list,
    dict: to_mapping,
    Mapping: to_mapping,
    datetime: to_datetime,
}


def _base_type(hint: Any) -> type:
    if hint is Any:
        return object
    return typing.get_origin(hint) or hint


def coerce(value: Any, hint: Any) -> Any:
    """Convert *value* to the parameter annotation *hint*.

    Unions keep a value that already has one of the member types and
    otherwise try the members in order. Unknown annotations pass the
    value through.
    """
    if value is None or hint is None or hint is Any:
        return value

    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        members = [m for m in typing.get_args(hint) if m is not type(None)]
        if any(isinstance(value, _base_type(m)) for m in members):
            return value
        if int in members and float in members:
            return to_number(value)
        error: Exception | None = None
        for member in members:
            try:
                return coerce(value, member)
            except (TypeError, ValueError) as e:
                error = e
        if error is not None:
            raise error
        return value

    converter = _CONVERTERS.get(_base_type(hint))
    if converter is None:
        return value
    return converter(value)
