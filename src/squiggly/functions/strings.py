"""String functions.

Every function takes the current value first and returns None for a
None value unless noted. Functions that grow their output from an
argument are tagged SECURE. ``lpad``, ``rpad`` and ``repeat`` size
themselves through ``EnvironmentPolicy.limit_size``; ``format`` and the
replace functions refuse oversized results through
``EnvironmentPolicy.check_growth``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from squiggly.environment import Environment, EnvironmentPolicy
from squiggly.functions.coercion import to_string
from squiggly.functions.registry import squiggly_function


@squiggly_function(aliases=("capitalise",))
def capitalize(value: str | None) -> str | None:
    if not value:
        return value
    return value[0].upper() + value[1:]


@squiggly_function(aliases=("lowercase",))
def lower(value: str | None) -> str | None:
    return None if value is None else value.lower()


@squiggly_function(aliases=("uppercase",))
def upper(value: str | None) -> str | None:
    return None if value is None else value.upper()


@squiggly_function()
def trim(value: str | None) -> str | None:
    return None if value is None else value.strip()


@squiggly_function()
def ltrim(value: str | None) -> str | None:
    return None if value is None else value.lstrip()


@squiggly_function()
def rtrim(value: str | None) -> str | None:
    return None if value is None else value.rstrip()


@squiggly_function()
def substring(value: str | None, start: int, end: int | None = None) -> str | None:
    """Python slice semantics: negative positions count from the end."""
    if value is None:
        return None
    return value[start:end]


@squiggly_function()
def truncate(
    value: str | None, max_size: int | None, append: str | None = None
) -> str | None:
    """Cut to *max_size* characters and add *append* when anything was cut."""
    if value is None or max_size is None:
        return value
    if max_size < 0:
        raise ValueError(f"max_size must not be negative, got {max_size}")
    if len(value) <= max_size:
        return value
    return value[:max_size] + (append or "")


@squiggly_function()
def starts_with(value: str | None, search: str | None) -> bool:
    if value is None or search is None:
        return False
    return value.startswith(search)


@squiggly_function()
def ends_with(value: str | None, search: str | None) -> bool:
    if value is None or search is None:
        return False
    return value.endswith(search)


# A literal %% or one conversion with its optional width and precision.
_CONVERSION = re.compile(r"%%|%(?:\([^)]*\))?[-#0 +]*(\*|\d+)?(?:\.(\*|\d+))?")


@squiggly_function(environment=Environment.SECURE)
def format_(
    value: str | None, *args: Any, policy: EnvironmentPolicy
) -> str | None:
    """printf-style formatting; a format that doesn't fit *args* is returned as is.

    Under SECURE, field widths and precisions are checked before
    formatting and the result after it.
    """
    if value is None:
        return None
    for size in _requested_sizes(value, args):
        policy.check_growth(len(value), size)
    try:
        result = value % args
    except (TypeError, ValueError):
        return value
    policy.check_growth(len(value), len(result))
    return result


def _requested_sizes(template: str, args: tuple[Any, ...]) -> Iterator[int]:
    for match in _CONVERSION.finditer(template):
        for size in match.groups():
            if size == "*":
                yield from (a for a in args if isinstance(a, int))
            elif size:
                yield int(size)


@squiggly_function()
def join(value: Any, separator: str | None = None) -> str | None:
    """Join arrays and iterables; a single scalar is just stringified."""
    if value is None:
        return None
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        return to_string(value)
    return (separator or "").join(to_string(item) or "" for item in value)


@squiggly_function()
def split(value: str | None, separator: str | re.Pattern | None = None) -> list[str]:
    """Split on a literal or a pattern. None splits to an empty list."""
    if value is None:
        return []
    if separator is None or separator == "":
        return [value]
    if isinstance(separator, re.Pattern):
        return separator.split(value)
    return value.split(separator)


@squiggly_function(environment=Environment.SECURE)
def replace(
    value: str | None,
    search: str | re.Pattern | None,
    replacement: str | None = None,
    *,
    policy: EnvironmentPolicy,
) -> str | None:
    return _replace(value, search, replacement, 0, policy)


@squiggly_function(environment=Environment.SECURE)
def replace_first(
    value: str | None,
    search: str | re.Pattern | None,
    replacement: str | None = None,
    *,
    policy: EnvironmentPolicy,
) -> str | None:
    return _replace(value, search, replacement, 1, policy)


def _replace(
    value: str | None,
    search: str | re.Pattern | None,
    replacement: str | None,
    count: int,
    policy: EnvironmentPolicy,
) -> str | None:
    if value is None or search is None or search == "":
        return value
    replacement = replacement or ""
    if isinstance(search, re.Pattern):
        result = search.sub(replacement, value, count=count)
    else:
        result = value.replace(search, replacement, count if count else -1)
    policy.check_growth(len(value), len(result))
    return result


@squiggly_function(environment=Environment.SECURE)
def lpad(
    value: str | None, size: int, pad: str | None = " ", *, policy: EnvironmentPolicy
) -> str | None:
    padding = _padding(value, size, pad, policy)
    return None if value is None else padding + value


@squiggly_function(environment=Environment.SECURE)
def rpad(
    value: str | None, size: int, pad: str | None = " ", *, policy: EnvironmentPolicy
) -> str | None:
    padding = _padding(value, size, pad, policy)
    return None if value is None else value + padding


def _padding(
    value: str | None, size: int, pad: str | None, policy: EnvironmentPolicy
) -> str:
    if value is None or not pad:
        return ""
    missing = policy.limit_size(size, len(pad)) - len(value)
    if missing <= 0:
        return ""
    return (pad * (missing // len(pad) + 1))[:missing]


@squiggly_function(environment=Environment.SECURE)
def repeat(
    value: str | None, times: int | None, *, policy: EnvironmentPolicy
) -> str | None:
    if value is None or times is None:
        return value
    times = policy.limit_size(times, len(value))
    if times <= 0:
        return ""
    return value * times
