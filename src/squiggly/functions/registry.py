"""Function registry: filter-language names and aliases -> implementations.

Library functions are plain Python callables marked with
``@squiggly_function``. The registry reads their signatures once to
learn arity and the parameter annotations that drive argument
coercion, and tags each with the environment it is restricted in.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from types import ModuleType
from typing import Any

from squiggly.environment import Environment, EnvironmentPolicy, get_active_policy
from squiggly.errors import FunctionInvocationError, FunctionResolutionError
from squiggly.functions import coercion
from squiggly.nodes import FunctionNode

_METADATA_ATTR = "__squiggly_function__"

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class FunctionMetadata:
    name: str
    aliases: tuple[str, ...]
    environment: Environment


def default_function_name(python_name: str) -> str:
    """``ends_with`` -> ``endsWith``; a trailing underscore is dropped."""
    head, *rest = python_name.rstrip("_").split("_")
    return head + "".join(part.capitalize() for part in rest)


def squiggly_function(
    name: str | None = None,
    aliases: Iterable[str] = (),
    environment: Environment = Environment.NORMAL,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark a function for ``FunctionRegistry.register_module``.

    Tag *environment* SECURE when the function's cost grows with an
    argument the filter author controls.
    """

    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        metadata = FunctionMetadata(
            name=name or default_function_name(func.__name__),
            aliases=tuple(aliases),
            environment=environment,
        )
        setattr(func, _METADATA_ATTR, metadata)
        return func

    return decorate


@dataclass(frozen=True)
class FunctionSpec:
    """A registered function and what its signature says about calling it.

    ``min_args``/``max_args`` count the implicit current value;
    ``max_args`` is None for variadic functions.
    """

    name: str
    aliases: tuple[str, ...]
    environment: Environment
    implementation: Callable[..., Any]
    min_args: int
    max_args: int | None
    parameter_types: tuple[Any, ...]
    rest_type: Any
    wants_policy: bool

    @classmethod
    def build(
        cls,
        name: str,
        aliases: Iterable[str],
        environment: Environment,
        implementation: Callable[..., Any],
    ) -> FunctionSpec:
        signature = inspect.signature(implementation)
        hints = typing.get_type_hints(implementation)
        params = list(signature.parameters.values())
        positional = [p for p in params if p.kind in _POSITIONAL]
        variadic = next(
            (p for p in params if p.kind == inspect.Parameter.VAR_POSITIONAL), None
        )
        policy_param = signature.parameters.get("policy")

        return cls(
            name=name,
            aliases=tuple(aliases),
            environment=environment,
            implementation=implementation,
            min_args=sum(1 for p in positional if p.default is inspect.Parameter.empty),
            max_args=None if variadic else len(positional),
            parameter_types=tuple(hints.get(p.name, Any) for p in positional),
            rest_type=hints.get(variadic.name, Any) if variadic else None,
            wants_policy=(
                policy_param is not None
                and policy_param.kind == inspect.Parameter.KEYWORD_ONLY
            ),
        )

    def accepts(self, count: int) -> bool:
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args

    def describe_arity(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"

    def _type_at(self, index: int) -> Any:
        if index < len(self.parameter_types):
            return self.parameter_types[index]
        return self.rest_type

    def call(
        self,
        value: Any,
        arguments: Sequence[Any],
        policy: EnvironmentPolicy,
    ) -> Any:
        """Coerce *value* and *arguments*, then run the implementation.

        Raises:
            FunctionInvocationError: On arity mismatch, a failed
                conversion, or any exception from the implementation.
        """
        raw = (value, *arguments)
        if not self.accepts(len(raw)):
            raise FunctionInvocationError(
                self.name,
                f"expects {self.describe_arity()} argument(s), got {len(raw)}",
            )
        kwargs = {"policy": policy} if self.wants_policy else {}
        try:
            converted = [
                coercion.coerce(item, self._type_at(i)) for i, item in enumerate(raw)
            ]
            return self.implementation(*converted, **kwargs)
        except Exception as e:
            raise FunctionInvocationError(self.name, str(e), cause=e) from e


class FunctionRegistry:
    """Resolves function names and aliases (case-sensitive) to specs."""

    def __init__(self) -> None:
        self._specs: dict[str, FunctionSpec] = {}
        self._lookup: dict[str, FunctionSpec] = {}

    def register(
        self,
        name: str,
        aliases: Iterable[str],
        environment: Environment,
        implementation: Callable[..., Any],
    ) -> FunctionSpec:
        """Register *implementation* under *name* and *aliases*.

        Raises:
            ValueError: If the name or an alias is already taken.
        """
        spec = FunctionSpec.build(name, aliases, environment, implementation)
        for key in (spec.name, *spec.aliases):
            if key in self._lookup:
                raise ValueError(f"Function name '{key}' is already registered")
        self._specs[spec.name] = spec
        for key in (spec.name, *spec.aliases):
            self._lookup[key] = spec
        return spec

    def register_module(self, module: ModuleType) -> None:
        """Register every ``@squiggly_function`` defined in *module*."""
        for _, member in inspect.getmembers(module, inspect.isfunction):
            metadata = getattr(member, _METADATA_ATTR, None)
            if metadata is None or member.__module__ != module.__name__:
                continue
            self.register(
                metadata.name, metadata.aliases, metadata.environment, member
            )

    def resolve(
        self, name: str, policy: EnvironmentPolicy | None = None
    ) -> FunctionSpec:
        """Look up *name* and check it against *policy* (default: active).

        Raises:
            FunctionResolutionError: If the name is unknown or the
                policy excludes the function.
        """
        spec = self._lookup.get(name)
        if spec is None:
            raise FunctionResolutionError(name, "unknown function")
        if policy is None:
            policy = get_active_policy()
        if not policy.allows(spec):
            raise FunctionResolutionError(
                name, "not available in the secure environment"
            )
        return spec

    def bind(
        self, function: FunctionNode, policy: EnvironmentPolicy | None = None
    ) -> FunctionNode:
        """Return *function* with every name, nested calls included, canonical."""
        spec = self.resolve(function.name, policy)
        arguments = tuple(
            self.bind(argument, policy) if isinstance(argument, FunctionNode) else argument
            for argument in function.arguments
        )
        return function.model_copy(update={"name": spec.name, "arguments": arguments})

    def specs(self) -> list[FunctionSpec]:
        return list(self._specs.values())

    def __contains__(self, name: object) -> bool:
        return name in self._lookup
