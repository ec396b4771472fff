"""Tests for the name variants and the name shorthand classifier."""

from __future__ import annotations

import re

import pytest

from squiggly.errors import InvalidNameError
from squiggly.names import (
    ANY_DEEP_SPECIFICITY,
    ANY_SHALLOW_SPECIFICITY,
    EXACT_SPECIFICITY,
    PATTERN_SPECIFICITY,
    VARIABLE_SPECIFICITY,
    AnyDeepName,
    AnyShallowName,
    ExactName,
    PatternName,
    VariableName,
    parse_name,
)


# ── Exact ─────────────────────────────────────────────────────────


@pytest.mark.parametrize("literal", ["id", "name", "a.b", "with space", "root"])
def test_exact_matches_its_own_name(literal):
    name = ExactName(name=literal)
    assert name.matches(name.name)


def test_exact_does_not_match_other_names():
    name = ExactName(name="id")
    assert not name.matches("ID")
    assert not name.matches("ids")
    assert not name.matches("")


def test_exact_empty_name_raises():
    with pytest.raises(InvalidNameError):
        ExactName(name="")


def test_exact_none_name_raises():
    with pytest.raises(InvalidNameError):
        ExactName(name=None)


# ── Variable ──────────────────────────────────────────────────────


def test_variable_matches_bound_value():
    name = VariableName(variable="field")
    assert name.matches("email", {"field": "email"})
    assert not name.matches("phone", {"field": "email"})


def test_variable_nested_path():
    name = VariableName(variable="user.preferred")
    variables = {"user": {"preferred": "nickname"}}
    assert name.matches("nickname", variables)


def test_variable_unresolved_never_matches():
    name = VariableName(variable="missing")
    assert not name.matches("missing", {"other": "x"})
    assert not name.matches("missing", None)
    assert not name.matches("missing", {})


def test_variable_empty_value_never_matches():
    name = VariableName(variable="field")
    assert not name.matches("", {"field": ""})


def test_variable_resolve_returns_exact_name():
    resolved = VariableName(variable="field").resolve({"field": "email"})
    assert resolved == ExactName(name="email")


def test_variable_name_is_path():
    assert VariableName(variable="user.locale").name == "user.locale"


@pytest.mark.parametrize("path", ["", "a..b", ".a", "a.", "a`b"])
def test_variable_invalid_path_raises(path):
    with pytest.raises(InvalidNameError):
        VariableName(variable=path)


# ── Wildcards ─────────────────────────────────────────────────────


@pytest.mark.parametrize("candidate", ["id", "anything", "", "a.b"])
def test_wildcards_match_any_candidate(candidate):
    assert AnyShallowName().matches(candidate)
    assert AnyDeepName().matches(candidate)


def test_wildcard_names():
    assert AnyShallowName().name == "*"
    assert AnyDeepName().name == "**"


# ── Pattern ───────────────────────────────────────────────────────


def test_glob_pattern():
    name = PatternName.from_glob("user*")
    assert name.name == "user*"
    assert name.matches("user")
    assert name.matches("userName")
    assert not name.matches("superuser")


def test_glob_question_mark():
    name = PatternName.from_glob("a?c")
    assert name.matches("abc")
    assert not name.matches("abbc")


def test_regex_pattern_must_match_whole_candidate():
    name = PatternName.from_regex("na.e")
    assert name.matches("name")
    assert not name.matches("names")


def test_regex_flags():
    name = PatternName.from_regex("id", "i")
    assert name.name == "~id~i"
    assert name.matches("ID")


def test_regex_unknown_flag_raises():
    with pytest.raises(InvalidNameError):
        PatternName.from_regex("id", "q")


def test_invalid_regex_raises():
    with pytest.raises(InvalidNameError):
        PatternName.from_regex("(unclosed")


def test_empty_pattern_raises():
    with pytest.raises(InvalidNameError):
        PatternName.from_glob("")
    with pytest.raises(InvalidNameError):
        PatternName(name="x", pattern="")


def test_pattern_accepts_string_source():
    name = PatternName(name="ab+", pattern="ab+")
    assert isinstance(name.pattern, re.Pattern)
    assert name.matches("abbb")


# ── Specificity ──────────────────────────────────────────────────


def test_specificity_ordering():
    tiers = [
        AnyDeepName().specificity(),
        AnyShallowName().specificity(),
        PatternName.from_glob("a*").specificity(),
        ExactName(name="a").specificity(),
        VariableName(variable="a").specificity(),
    ]
    assert tiers == sorted(tiers)
    assert len(set(tiers)) == 5
    assert tiers == [
        ANY_DEEP_SPECIFICITY,
        ANY_SHALLOW_SPECIFICITY,
        PATTERN_SPECIFICITY,
        EXACT_SPECIFICITY,
        VARIABLE_SPECIFICITY,
    ]


# ── parse_name ────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "text, expected_type",
    [
        ("**", AnyDeepName),
        ("*", AnyShallowName),
        ("$locale", VariableName),
        ("~na.e~", PatternName),
        ("~na.e~i", PatternName),
        ("user*", PatternName),
        ("a?c", PatternName),
        ("id", ExactName),
    ],
)
def test_parse_name_classifies(text, expected_type):
    assert isinstance(parse_name(text), expected_type)


def test_parse_name_keeps_source_text():
    assert parse_name("id").name == "id"
    assert parse_name("$user.locale").name == "user.locale"
    assert parse_name("~na.e~i").name == "~na.e~i"


@pytest.mark.parametrize("text", ["", None, "$"])
def test_parse_name_invalid(text):
    with pytest.raises(InvalidNameError):
        parse_name(text)
