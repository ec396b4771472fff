"""Filter document loading.

A filter document is YAML (or JSON, which YAML reads too) with a single
top-level ``filters`` list holding the root nodes::

    filters:
      - name: id
      - name: address
        nested: true
        children:
          - name: city
            value_functions:
              - name: upper
      - name: "**"
        deep: true
        max_depth: 3

Names use the ``parse_name`` shorthand. Loaded nodes are bound against
a function registry so every function name is canonical.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from squiggly import filter_logger
from squiggly.environment import EnvironmentPolicy
from squiggly.errors import FilterLoadError
from squiggly.functions import FunctionRegistry, default_registry
from squiggly.nodes import FilterNode


class FilterDocument(BaseModel):
    filters: list[FilterNode]


def bind_nodes(
    nodes: Iterable[FilterNode],
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
) -> tuple[FilterNode, ...]:
    """Resolve every function in the tree, returning canonical copies.

    Raises:
        FunctionResolutionError: If any function is unknown or excluded.
    """
    if registry is None:
        registry = default_registry()
    return tuple(_bind_node(node, registry, policy) for node in nodes)


def _bind_node(
    node: FilterNode,
    registry: FunctionRegistry,
    policy: EnvironmentPolicy | None,
) -> FilterNode:
    bound = node.with_functions(
        key_functions=[registry.bind(f, policy) for f in node.key_functions],
        value_functions=[registry.bind(f, policy) for f in node.value_functions],
    )
    return bound.with_children(
        _bind_node(child, registry, policy) for child in node.children
    )


def parse_filter_document(
    raw: Any,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
    *,
    bind: bool = True,
) -> tuple[FilterNode, ...]:
    """Build root nodes from an already-parsed document mapping.

    Raises:
        FilterLoadError: If the structure doesn't match a filter document.
        InvalidNameError: If a name is empty or malformed.
        FunctionResolutionError: If *bind* is set and a function is unknown.
    """
    if not isinstance(raw, dict):
        raise FilterLoadError(
            f"Filter document must be a mapping, got {type(raw).__name__}"
        )

    try:
        document = FilterDocument.model_validate(raw)
    except PydanticValidationError as e:
        raise FilterLoadError(f"Filter structure invalid: {e}") from e

    if not bind:
        return tuple(document.filters)
    return bind_nodes(document.filters, registry, policy)


def load_filter(
    path: str | Path,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
    *,
    bind: bool = True,
) -> tuple[FilterNode, ...]:
    """Load root filter nodes from a YAML or JSON file.

    Raises:
        FilterLoadError: If the file doesn't exist, isn't valid YAML,
            or doesn't match a filter document.
    """
    path = Path(path)
    if not path.is_file():
        raise FilterLoadError(f"Filter file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise FilterLoadError(f"Invalid YAML in {path}: {e}") from e

    nodes = parse_filter_document(raw, registry, policy, bind=bind)
    filter_logger.log_filter_loaded(str(path), count_nodes(nodes))
    return nodes


def count_nodes(nodes: Iterable[FilterNode]) -> int:
    return sum(1 + count_nodes(node.children) for node in nodes)
