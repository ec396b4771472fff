"""JSONata evaluation for variable references.

Variable names (``$user.locale``) and variable function arguments are
resolved against the caller's binding mapping with jsonata-python, the
same way any other path into a dict would be evaluated.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import Any

import jsonata

from squiggly.errors import ExpressionError


def evaluate(expression: str, bindings: Mapping[str, Any]) -> Any:
    """Evaluate a JSONata expression against a binding mapping.

    Args:
        expression: JSONata expression string (e.g., "user.locale").
        bindings: Mapping of variable names to values.

    Returns:
        The resolved value, or None for paths that don't exist.

    Raises:
        ExpressionError: If the expression is invalid or evaluation fails.
    """
    try:
        return _compile(expression).evaluate(dict(bindings))
    except Exception as e:
        raise ExpressionError(
            f"Expression '{expression}' failed: {e}"
        ) from e


@functools.lru_cache(maxsize=1024)
def _compile(expression: str) -> jsonata.Jsonata:
    return jsonata.Jsonata(expression)


def variable_path(variable: str) -> str:
    """Quote each dotted segment so keywords and odd characters are field names."""
    return ".".join(f"`{segment}`" for segment in variable.split("."))


def resolve_variable(
    variable: str, bindings: Mapping[str, Any] | None
) -> Any:
    """Look up a dotted variable path in *bindings*.

    Returns None when there are no bindings or the path is undefined.
    """
    if not bindings:
        return None
    return evaluate(variable_path(variable), bindings)
