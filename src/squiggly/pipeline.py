"""Function execution pipeline.

Runs a node's key functions over the field's key and its value
functions over the field's value, each list in declaration order.
A call that fails leaves the key or value as it was and processing
moves on to the next function, so one malformed transform never
aborts a traversal. An unknown function is a malformed filter and
is raised.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from squiggly import filter_logger
from squiggly.environment import EnvironmentPolicy, get_active_policy
from squiggly.errors import ExpressionError, FunctionInvocationError
from squiggly.expressions import resolve_variable
from squiggly.functions import FunctionRegistry, default_registry
from squiggly.matching import MatchResult, match_field
from squiggly.nodes import (
    Argument,
    FilterNode,
    FunctionNode,
    LiteralArgument,
    PatternArgument,
    VariableArgument,
)


def evaluate_argument(
    argument: Argument,
    value: Any,
    registry: FunctionRegistry,
    policy: EnvironmentPolicy,
    variables: Mapping[str, Any] | None,
) -> Any:
    """Evaluate one argument expression against the current value.

    Uses structural pattern matching on the argument model type. A
    nested call receives the same current value as the outer one.
    """
    match argument:
        case LiteralArgument():
            return argument.value
        case VariableArgument():
            return resolve_variable(argument.name, variables)
        case PatternArgument():
            return argument.pattern
        case FunctionNode():
            return invoke(
                argument, value, registry=registry, policy=policy, variables=variables
            )
        case _:
            raise FunctionInvocationError(
                "unknown",
                f"Unknown argument kind: {getattr(argument, 'kind', 'unknown')}",
            )


def invoke(
    function: FunctionNode,
    value: Any,
    *,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
    variables: Mapping[str, Any] | None = None,
) -> Any:
    """Call *function* with *value* as its first argument.

    Raises:
        FunctionResolutionError: If the function is unknown or excluded.
        FunctionInvocationError: If an argument or the call itself fails.
    """
    if registry is None:
        registry = default_registry()
    if policy is None:
        policy = get_active_policy()

    spec = registry.resolve(function.name, policy)
    try:
        arguments = [
            evaluate_argument(argument, value, registry, policy, variables)
            for argument in function.arguments
        ]
    except ExpressionError as e:
        raise FunctionInvocationError(function.name, str(e), cause=e) from e
    return spec.call(value, arguments, policy)


def apply_functions(
    value: Any,
    functions: Sequence[FunctionNode],
    *,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
    variables: Mapping[str, Any] | None = None,
) -> Any:
    """Thread *value* through *functions*, skipping any call that fails."""
    if registry is None:
        registry = default_registry()
    if policy is None:
        policy = get_active_policy()

    for function in functions:
        try:
            value = invoke(
                function, value, registry=registry, policy=policy, variables=variables
            )
        except FunctionInvocationError as e:
            filter_logger.log_function_failed(function.name, str(e))
    return value


def transform_key(
    node: FilterNode,
    key: Any,
    *,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
    variables: Mapping[str, Any] | None = None,
) -> Any:
    return apply_functions(
        key, node.key_functions, registry=registry, policy=policy, variables=variables
    )


def transform_value(
    node: FilterNode,
    value: Any,
    *,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
    variables: Mapping[str, Any] | None = None,
) -> Any:
    return apply_functions(
        value, node.value_functions, registry=registry, policy=policy, variables=variables
    )


@dataclass(frozen=True)
class FieldDecision:
    """What a walker should emit for one field."""

    result: MatchResult
    key: Any
    value: Any

    @property
    def included(self) -> bool:
        return self.result.included


def process_field(
    nodes: Sequence[FilterNode],
    key: Any,
    value: Any,
    depth: int,
    *,
    registry: FunctionRegistry | None = None,
    policy: EnvironmentPolicy | None = None,
    variables: Mapping[str, Any] | None = None,
) -> FieldDecision:
    """Match one field and, when included, transform its key and value.

    Matching uses the original key; key and value functions run
    independently of each other. Excluded fields come back untouched.
    """
    result = match_field(nodes, str(key), depth, variables)
    if result.node is None:
        return FieldDecision(result, key, value)

    if registry is None:
        registry = default_registry()
    if policy is None:
        policy = get_active_policy()
    return FieldDecision(
        result,
        transform_key(
            result.node, key, registry=registry, policy=policy, variables=variables
        ),
        transform_value(
            result.node, value, registry=registry, policy=policy, variables=variables
        ),
    )
