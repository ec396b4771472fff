"""Filter and function nodes: the immutable tree a parsed filter becomes.

All data structures live here. The only logic is the query surface the
matching engine and the function pipeline read: modifier flags, depth
availability and specificity. Nodes are frozen; ``with_*`` methods
return new nodes that share every untouched field.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from squiggly.names import AnyDeepName, AnyShallowName, ExactName, Name, VariableName, parse_name

ROOT = "root"


class Modifier(enum.IntFlag):
    NONE = 0
    DEEP = 0x1
    NEGATED = 0x2
    NESTED = 0x4


_ALL_MODIFIERS = Modifier.DEEP | Modifier.NEGATED | Modifier.NESTED

_FLAG_KEYS: tuple[tuple[Modifier, str], ...] = (
    (Modifier.DEEP, "deep"),
    (Modifier.NEGATED, "negated"),
    (Modifier.NESTED, "nested"),
)


class ParseContext(BaseModel):
    """Source position of a node. Used in diagnostics only."""

    model_config = ConfigDict(frozen=True)

    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# ── Function calls ───────────────────────────────────────────────


class LiteralArgument(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: Any = None


class VariableArgument(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["variable"] = "variable"
    name: str = Field(min_length=1)


class PatternArgument(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pattern"] = "pattern"
    pattern: re.Pattern


class FunctionNode(BaseModel):
    """A call to a registered function.

    The current key or value is the implicit first argument;
    ``arguments`` are the rest, evaluated before the call. In documents,
    any argument that is not a mapping is taken as a literal.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["function"] = "function"
    name: str = Field(min_length=1)
    arguments: tuple[Argument, ...] = ()

    @field_validator("arguments", mode="before")
    @classmethod
    def _literal_shorthand(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        return tuple(
            item
            if isinstance(item, (Mapping, BaseModel))
            else {"kind": "literal", "value": item}
            for item in value
        )


Argument = Annotated[
    LiteralArgument | VariableArgument | PatternArgument | FunctionNode,
    Field(discriminator="kind"),
]

# Resolve forward reference for recursive FunctionNode.arguments
FunctionNode.model_rebuild()


# ── Filter nodes ─────────────────────────────────────────────────


class FilterNode(BaseModel):
    """One rule of a filter expression, e.g. ``-address{city,zip}``.

    ``modifiers`` packs the deep/negated/nested flags. Build nodes with
    the ``deep``/``negated``/``nested`` booleans (``create`` or a
    document mapping) and read them back through the ``is_*`` methods.
    A node with no sub-filter is not nested; ``foo{}`` is nested with
    no children. Any node with children is nested.
    """

    model_config = ConfigDict(frozen=True)

    context: ParseContext = ParseContext()
    name: Name
    modifiers: int = 0
    children: tuple[FilterNode, ...] = ()
    key_functions: tuple[FunctionNode, ...] = ()
    value_functions: tuple[FunctionNode, ...] = ()
    min_depth: int | None = None
    max_depth: int | None = None
    stage: int = 0

    @model_validator(mode="before")
    @classmethod
    def _pack_modifiers(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        bits = data.get("modifiers", 0)
        if isinstance(bits, int):
            for flag, key in _FLAG_KEYS:
                if data.pop(key, False):
                    bits |= flag
            if data.get("children"):
                bits |= Modifier.NESTED
            data["modifiers"] = int(bits)
        if isinstance(data.get("name"), str):
            data["name"] = parse_name(data["name"])
        return data

    @field_validator("modifiers")
    @classmethod
    def _check_modifiers(cls, value: int) -> int:
        if value & ~_ALL_MODIFIERS:
            raise ValueError(f"Unknown modifier bits: {value:#x}")
        return value

    # ── Construction ──────────────────────────────────────────────

    @classmethod
    def create(
        cls,
        name: Name | str,
        *,
        deep: bool = False,
        negated: bool = False,
        nested: bool = False,
        children: Iterable[FilterNode] = (),
        key_functions: Iterable[FunctionNode] = (),
        value_functions: Iterable[FunctionNode] = (),
        min_depth: int | None = None,
        max_depth: int | None = None,
        stage: int = 0,
        context: ParseContext | None = None,
    ) -> FilterNode:
        return cls(
            context=context or ParseContext(),
            name=name,
            deep=deep,
            negated=negated,
            nested=nested,
            children=tuple(children),
            key_functions=tuple(key_functions),
            value_functions=tuple(value_functions),
            min_depth=min_depth,
            max_depth=max_depth,
            stage=stage,
        )

    @classmethod
    def create_named(cls, name: Name | str) -> FilterNode:
        """A plain, non-nested node."""
        return cls.create(name)

    @classmethod
    def create_named_nested(cls, name: Name | str) -> FilterNode:
        """A nested node with no children (``name{}``)."""
        return cls.create(name, nested=True)

    def with_name(self, name: Name | str) -> FilterNode:
        if isinstance(name, str):
            name = parse_name(name)
        return self.model_copy(update={"name": name})

    def with_children(self, children: Iterable[FilterNode]) -> FilterNode:
        children = tuple(children)
        update: dict[str, Any] = {"children": children}
        if children:
            update["modifiers"] = int(self.modifiers | Modifier.NESTED)
        return self.model_copy(update=update)

    def with_functions(
        self,
        key_functions: Iterable[FunctionNode] | None = None,
        value_functions: Iterable[FunctionNode] | None = None,
    ) -> FilterNode:
        update: dict[str, Any] = {}
        if key_functions is not None:
            update["key_functions"] = tuple(key_functions)
        if value_functions is not None:
            update["value_functions"] = tuple(value_functions)
        return self.model_copy(update=update)

    # ── Queries ───────────────────────────────────────────────────

    def get_name(self) -> str:
        return self.name.name

    def matches(
        self, candidate: str, variables: Mapping[str, Any] | None = None
    ) -> bool:
        return self.name.matches(candidate, variables)

    def get_specificity(self) -> int:
        """How precisely the name targets a field; higher wins among siblings."""
        return self.name.specificity()

    def is_nested(self) -> bool:
        return bool(self.modifiers & Modifier.NESTED)

    def is_empty_nested(self) -> bool:
        """True for ``name{}``: nested, with children explicitly pruned."""
        return self.is_nested() and not self.children

    def is_negated(self) -> bool:
        return bool(self.modifiers & Modifier.NEGATED)

    def is_deep(self) -> bool:
        return bool(self.modifiers & Modifier.DEEP)

    def is_any_shallow(self) -> bool:
        return isinstance(self.name, AnyShallowName)

    def is_any_deep(self) -> bool:
        return isinstance(self.name, AnyDeepName)

    def is_variable(self) -> bool:
        return isinstance(self.name, VariableName)

    def is_available_at_depth(self, depth: int) -> bool:
        """Whether a deep node applies at *depth*.

        ``min_depth`` is inclusive and ``max_depth`` exclusive. Non-deep
        nodes are never available.
        """
        if not self.is_deep():
            return False
        if self.min_depth is not None and depth < self.min_depth:
            return False
        if self.max_depth is not None and depth >= self.max_depth:
            return False
        return True

    # Ordered by specificity alone; stage is carried but not compared.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FilterNode):
            return NotImplemented
        return self.get_specificity() < other.get_specificity()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, FilterNode):
            return NotImplemented
        return self.get_specificity() <= other.get_specificity()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, FilterNode):
            return NotImplemented
        return self.get_specificity() > other.get_specificity()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, FilterNode):
            return NotImplemented
        return self.get_specificity() >= other.get_specificity()


# Resolve forward reference for recursive FilterNode.children
FilterNode.model_rebuild()

EMPTY = FilterNode.create_named(ExactName(name=ROOT))
