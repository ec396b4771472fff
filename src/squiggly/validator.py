"""Static filter validator.

Checks a filter tree without evaluating it against any data. Catches
unknown functions, wrong argument counts, meaningless depth bounds and
rules that can never take effect before a traversal runs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from squiggly.environment import EnvironmentPolicy
from squiggly.errors import FunctionResolutionError
from squiggly.functions import FunctionRegistry, default_registry
from squiggly.nodes import ROOT, FilterNode, FunctionNode

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding."""

    severity: Severity
    path: str  # slash-separated node names from the root, e.g. "address/city"
    message: str
    field: str  # "name", "depth", "key_functions", "value_functions", "children"


@dataclass(frozen=True)
class ValidationResult:
    """Aggregate result of filter validation."""

    diagnostics: list[Diagnostic]

    @property
    def ok(self) -> bool:
        """True when there are no error-severity diagnostics."""
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]


def _label(node: FilterNode) -> str:
    return f"-{node.get_name()}" if node.is_negated() else node.get_name()


# ---------------------------------------------------------------------------
# 1. Sibling names
# ---------------------------------------------------------------------------


def _check_siblings(nodes: Sequence[FilterNode], scope: str) -> list[Diagnostic]:
    """Reserved root name, and repeated rules where only the first can win."""
    diagnostics: list[Diagnostic] = []
    seen: dict[tuple[str, str, bool], int] = {}

    for i, node in enumerate(nodes):
        path = f"{scope}/{_label(node)}" if scope else _label(node)
        if node.get_name() == ROOT:
            diagnostics.append(
                Diagnostic(
                    severity=Severity.ERROR,
                    path=path,
                    message=f"Name '{ROOT}' is reserved",
                    field="name",
                )
            )

        key = (node.name.kind, node.get_name(), node.is_negated())
        if key in seen:
            diagnostics.append(
                Diagnostic(
                    severity=Severity.WARNING,
                    path=path,
                    message=(
                        f"Rule '{_label(node)}' repeats the rule at index "
                        f"{seen[key]}; the first one declared always wins"
                    ),
                    field="name",
                )
            )
        else:
            seen[key] = i

    return diagnostics


# ---------------------------------------------------------------------------
# 2. Depth bounds and structure
# ---------------------------------------------------------------------------


def _check_node_shape(node: FilterNode, path: str) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    bounds = [b for b in (node.min_depth, node.max_depth) if b is not None]

    if any(b < 0 for b in bounds):
        diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                path=path,
                message="Depth bounds must not be negative",
                field="depth",
            )
        )

    if bounds and not node.is_deep():
        diagnostics.append(
            Diagnostic(
                severity=Severity.WARNING,
                path=path,
                message="Depth bounds are ignored on a node that is not deep",
                field="depth",
            )
        )
    elif (
        node.min_depth is not None
        and node.max_depth is not None
        and node.min_depth >= node.max_depth
    ):
        diagnostics.append(
            Diagnostic(
                severity=Severity.WARNING,
                path=path,
                message=(
                    f"Depth range [{node.min_depth}, {node.max_depth}) is empty; "
                    f"the node never applies"
                ),
                field="depth",
            )
        )

    if node.is_negated() and node.children:
        diagnostics.append(
            Diagnostic(
                severity=Severity.WARNING,
                path=path,
                message="Children of a negated node are never used",
                field="children",
            )
        )

    return diagnostics


# ---------------------------------------------------------------------------
# 3. Functions
# ---------------------------------------------------------------------------


def _check_function(
    function: FunctionNode,
    path: str,
    field: str,
    registry: FunctionRegistry,
    policy: EnvironmentPolicy | None,
) -> list[Diagnostic]:
    """Resolve a call and its nested calls, and check argument counts."""
    try:
        spec = registry.resolve(function.name, policy)
    except FunctionResolutionError as e:
        return [
            Diagnostic(
                severity=Severity.ERROR, path=path, message=str(e), field=field
            )
        ]

    diagnostics: list[Diagnostic] = []
    count = 1 + len(function.arguments)
    if not spec.accepts(count):
        diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                path=path,
                message=(
                    f"Function '{function.name}' expects {spec.describe_arity()} "
                    f"argument(s) including the current value, got {count}"
                ),
                field=field,
            )
        )

    for argument in function.arguments:
        if isinstance(argument, FunctionNode):
            diagnostics.extend(
                _check_function(argument, path, field, registry, policy)
            )
    return diagnostics


def _check_tree(
    nodes: Sequence[FilterNode],
    scope: str,
    registry: FunctionRegistry,
    policy: EnvironmentPolicy | None,
) -> list[Diagnostic]:
    diagnostics = _check_siblings(nodes, scope)

    for node in nodes:
        path = f"{scope}/{_label(node)}" if scope else _label(node)
        diagnostics.extend(_check_node_shape(node, path))
        for function in node.key_functions:
            diagnostics.extend(
                _check_function(function, path, "key_functions", registry, policy)
            )
        for function in node.value_functions:
            diagnostics.extend(
                _check_function(function, path, "value_functions", registry, policy)
            )
        diagnostics.extend(_check_tree(node.children, path, registry, policy))

    return diagnostics


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_filter(
    nodes: Sequence[FilterNode],
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
) -> ValidationResult:
    """Statically validate a filter tree.

    Checks:
    - Reserved ``root`` name and repeated sibling rules
    - Negative, ignored or empty depth ranges
    - Children under negated nodes
    - Function resolution under *policy* and argument counts

    The filter is considered valid when ``result.ok`` is True (no
    error-severity diagnostics).
    """
    if registry is None:
        registry = default_registry()
    return ValidationResult(diagnostics=_check_tree(nodes, "", registry, policy))


def load_and_validate_filter(
    path: str | Path,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
) -> tuple[tuple[FilterNode, ...], ValidationResult]:
    """Load a filter document without binding it, then validate it.

    Convenience wrapper: calls ``load_filter`` then ``validate_filter``.
    Raises ``FilterLoadError`` if YAML/Pydantic parsing fails.
    """
    from squiggly.loader import load_filter

    nodes = load_filter(path, registry, policy, bind=False)
    return nodes, validate_filter(nodes, registry, policy)
