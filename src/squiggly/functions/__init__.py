"""Function registry and the standard function library."""

from __future__ import annotations

import functools

from squiggly.functions.registry import (
    FunctionRegistry,
    FunctionSpec,
    default_function_name,
    squiggly_function,
)


@functools.lru_cache(maxsize=None)
def default_registry() -> FunctionRegistry:
    """A registry holding the whole library. Built once per process."""
    from squiggly.functions import dates, numbers, objects, sequences, strings

    registry = FunctionRegistry()
    for module in (strings, numbers, sequences, dates, objects):
        registry.register_module(module)
    return registry


__all__ = [
    "default_function_name",
    "default_registry",
    "FunctionRegistry",
    "FunctionSpec",
    "squiggly_function",
]
