"""Name matchers for a single filter path segment.

Names are a closed set of frozen models discriminated on the ``kind``
field, so a filter document with an unknown name kind fails at parse
time. Every variant answers ``matches`` and ``specificity``; the
higher the specificity, the more precisely the name targets a field.
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from squiggly.errors import InvalidNameError
from squiggly.expressions import resolve_variable

# ── Specificity tiers ─────────────────────────────────────────────

ANY_DEEP_SPECIFICITY = 0
ANY_SHALLOW_SPECIFICITY = 1
PATTERN_SPECIFICITY = 2
EXACT_SPECIFICITY = 3
VARIABLE_SPECIFICITY = 4

ANY_SHALLOW_ID = "*"
ANY_DEEP_ID = "**"

_REGEX_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}

_REGEX_NAME = re.compile(r"~(?P<source>.+)~(?P<flags>[imsx]*)", re.DOTALL)


# ── Variants ──────────────────────────────────────────────────────


class ExactName(BaseModel):
    """Matches one literal field name."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["exact"] = "exact"
    name: str

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> Any:
        if value is None or value == "":
            raise InvalidNameError("Exact name must be a non-empty string")
        return value

    def matches(
        self, candidate: str, variables: Mapping[str, Any] | None = None
    ) -> bool:
        return candidate == self.name

    def specificity(self) -> int:
        return EXACT_SPECIFICITY


class VariableName(BaseModel):
    """A name taken from the caller's variable bindings at match time.

    ``variable`` is a dotted path (``user.locale``). The bound value is
    stringified into an exact name; an undefined, null or empty value
    never matches anything.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["variable"] = "variable"
    variable: str

    @field_validator("variable", mode="before")
    @classmethod
    def _check_variable(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value:
            raise InvalidNameError("Variable name must be a non-empty string")
        if any(not segment or "`" in segment for segment in value.split(".")):
            raise InvalidNameError(f"Invalid variable path: {value!r}")
        return value

    @property
    def name(self) -> str:
        return self.variable

    def resolve(self, variables: Mapping[str, Any] | None) -> ExactName | None:
        value = resolve_variable(self.variable, variables)
        if value is None:
            return None
        if isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        if not text:
            return None
        return ExactName(name=text)

    def matches(
        self, candidate: str, variables: Mapping[str, Any] | None = None
    ) -> bool:
        resolved = self.resolve(variables)
        return resolved is not None and resolved.matches(candidate)

    def specificity(self) -> int:
        return VARIABLE_SPECIFICITY


class AnyShallowName(BaseModel):
    """``*``: any field at the current level."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["any_shallow"] = "any_shallow"

    @property
    def name(self) -> str:
        return ANY_SHALLOW_ID

    def matches(
        self, candidate: str, variables: Mapping[str, Any] | None = None
    ) -> bool:
        return True

    def specificity(self) -> int:
        return ANY_SHALLOW_SPECIFICITY


class AnyDeepName(BaseModel):
    """``**``: any field at any depth."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["any_deep"] = "any_deep"

    @property
    def name(self) -> str:
        return ANY_DEEP_ID

    def matches(
        self, candidate: str, variables: Mapping[str, Any] | None = None
    ) -> bool:
        return True

    def specificity(self) -> int:
        return ANY_DEEP_SPECIFICITY


class PatternName(BaseModel):
    """Matches field names against a precompiled regular expression.

    ``name`` keeps the source text as written in the filter (``~ab+~i``
    or ``user*``). The whole candidate must match.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["pattern"] = "pattern"
    name: str
    pattern: re.Pattern

    @field_validator("pattern", mode="before")
    @classmethod
    def _compile(cls, value: Any) -> Any:
        if isinstance(value, re.Pattern):
            if not value.pattern:
                raise InvalidNameError("Pattern must not be empty")
            return value
        if not isinstance(value, str) or not value:
            raise InvalidNameError("Pattern must be a non-empty string")
        try:
            return re.compile(value)
        except re.error as e:
            raise InvalidNameError(f"Invalid pattern {value!r}: {e}") from e

    @classmethod
    def from_regex(cls, source: str, flags: str = "") -> PatternName:
        """Build from a regular expression plus letter flags (``imsx``)."""
        if not source:
            raise InvalidNameError("Pattern must not be empty")
        bits = 0
        for letter in flags:
            if letter not in _REGEX_FLAGS:
                raise InvalidNameError(f"Unknown regex flag {letter!r}")
            bits |= _REGEX_FLAGS[letter]
        try:
            compiled = re.compile(source, bits)
        except re.error as e:
            raise InvalidNameError(f"Invalid pattern {source!r}: {e}") from e
        return cls(name=f"~{source}~{flags}", pattern=compiled)

    @classmethod
    def from_glob(cls, text: str) -> PatternName:
        """Build from a glob where ``*`` and ``?`` are wildcards."""
        if not text:
            raise InvalidNameError("Pattern must not be empty")
        return cls(name=text, pattern=re.compile(fnmatch.translate(text)))

    def matches(
        self, candidate: str, variables: Mapping[str, Any] | None = None
    ) -> bool:
        return self.pattern.fullmatch(candidate) is not None

    def specificity(self) -> int:
        return PATTERN_SPECIFICITY


# Discriminated union: Pydantic picks the right model based on `kind`
Name = Annotated[
    ExactName | VariableName | AnyShallowName | AnyDeepName | PatternName,
    Field(discriminator="kind"),
]


def parse_name(text: str) -> Name:
    """Classify one path segment as written in a filter document.

    ``**`` and ``*`` are the wildcards, ``$path`` is a variable,
    ``~regex~flags`` is a regular expression, text containing ``*`` or
    ``?`` is a glob, anything else is an exact name.

    Raises:
        InvalidNameError: If *text* is empty or not a valid name.
    """
    if not isinstance(text, str) or not text:
        raise InvalidNameError("Name must be a non-empty string")
    if text == ANY_DEEP_ID:
        return AnyDeepName()
    if text == ANY_SHALLOW_ID:
        return AnyShallowName()
    if text.startswith("$"):
        return VariableName(variable=text[1:])
    match = _REGEX_NAME.fullmatch(text)
    if match:
        return PatternName.from_regex(match["source"], match["flags"])
    if "*" in text or "?" in text:
        return PatternName.from_glob(text)
    return ExactName(name=text)
