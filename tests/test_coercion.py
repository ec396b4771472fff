"""Tests for argument coercion."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

import pytest

from squiggly.functions.coercion import (
    coerce,
    to_bool,
    to_datetime,
    to_list,
    to_mapping,
    to_number,
    to_string,
)
from squiggly.nodes import ParseContext


# ── Scalars ───────────────────────────────────────────────────────


def test_to_string():
    assert to_string(None) is None
    assert to_string("x") == "x"
    assert to_string(True) == "true"
    assert to_string(False) == "false"
    assert to_string(12) == "12"


def test_to_number():
    assert to_number("3") == 3
    assert isinstance(to_number("3"), int)
    assert to_number(" 2.5 ") == 2.5
    assert to_number(True) == 1
    with pytest.raises(ValueError):
        to_number("abc")
    with pytest.raises(TypeError):
        to_number([1])


def test_to_bool():
    assert to_bool("TRUE") is True
    assert to_bool("false") is False
    assert to_bool(0) is False
    assert to_bool(2) is True
    with pytest.raises(ValueError):
        to_bool("maybe")


# ── Collections ──────────────────────────────────────────────────


def test_to_list():
    assert to_list((1, 2)) == [1, 2]
    assert to_list("ab") == ["ab"]
    assert to_list(5) == [5]
    assert to_list({"a": 1}) == [{"a": 1}]
    original = [1]
    assert to_list(original) is original


def test_to_mapping():
    assert to_mapping({"a": 1}) == {"a": 1}
    assert to_mapping(ParseContext(line=2, column=3)) == {"line": 2, "column": 3}
    with pytest.raises(TypeError):
        to_mapping(5)


# ── Dates ─────────────────────────────────────────────────────────


def test_to_datetime_from_iso_string():
    assert to_datetime("2024-01-15T10:30:00Z") == datetime(
        2024, 1, 15, 10, 30, tzinfo=timezone.utc
    )
    assert to_datetime("2024-01-15") == datetime(2024, 1, 15)


def test_to_datetime_from_epoch_millis():
    assert to_datetime(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert to_datetime(86_400_000) == datetime(1970, 1, 2, tzinfo=timezone.utc)


def test_to_datetime_from_date():
    assert to_datetime(date(2024, 3, 1)) == datetime(2024, 3, 1)


def test_to_datetime_rejects_boolean():
    with pytest.raises(TypeError):
        to_datetime(True)


# ── coerce ────────────────────────────────────────────────────────


def test_coerce_passes_none_through():
    assert coerce(None, int) is None
    assert coerce(None, str | None) is None


def test_coerce_any_passes_through():
    value = object()
    assert coerce(value, Any) is value


def test_coerce_simple_hints():
    assert coerce("4", int) == 4
    assert coerce(4, str) == "4"
    assert coerce((1, 2), list) == [1, 2]
    assert coerce("a+", re.Pattern).pattern == "a+"


def test_coerce_union_keeps_member_type():
    pattern = re.compile("x")
    assert coerce(pattern, str | re.Pattern | None) is pattern
    assert coerce("x", str | re.Pattern | None) == "x"


def test_coerce_number_union_keeps_fraction():
    assert coerce("3.5", int | float | None) == 3.5
    assert coerce("3", int | float | None) == 3


def test_coerce_union_tries_members_in_order():
    assert coerce(7, str | None) == "7"


def test_coerce_failure_raises():
    with pytest.raises(ValueError):
        coerce("abc", int)


def test_coerce_unknown_hint_passes_through():
    class Opaque:
        pass

    value = "text"
    assert coerce(value, Opaque) is value
