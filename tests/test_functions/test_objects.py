"""Tests for value, conversion and property functions."""

from __future__ import annotations

import pytest

from squiggly.environment import Environment, EnvironmentPolicy
from squiggly.functions import objects
from squiggly.nodes import FunctionNode, ParseContext
from squiggly.pipeline import apply_functions


def test_default():
    assert objects.default(None, "x") == "x"
    assert objects.default("", "x") == ""
    assert objects.default(0, 5) == 0


def test_null_checks():
    assert objects.is_null(None)
    assert not objects.is_null(0)
    assert objects.is_not_null("")


def test_conversions():
    assert objects.to_string(True) == "true"
    assert objects.to_number("12") == 12
    assert objects.to_bool("false") is False


def test_conversion_failure_raises():
    with pytest.raises(ValueError):
        objects.to_number("twelve")


def test_get():
    assert objects.get({"a": 1}, "a") == 1
    assert objects.get({"a": 1}, "b") is None
    assert objects.get(ParseContext(line=4), "line") == 4
    assert objects.get(None, "a") is None


def test_get_refuses_private_attributes():
    context = ParseContext(line=4)
    for key in ("__class__", "__init__", "_private"):
        with pytest.raises(ValueError, match="not accessible"):
            objects.get(context, key)
    assert objects.get({"__class__": "mapping key"}, "__class__") == "mapping key"


def test_get_dunder_chain_stops_in_pipeline():
    chain = [
        FunctionNode(name="get", arguments=("__class__",)),
        FunctionNode(name="get", arguments=("__init__",)),
        FunctionNode(name="get", arguments=("__globals__",)),
        FunctionNode(name="keys"),
    ]
    context = ParseContext(line=4)
    policy = EnvironmentPolicy(environment=Environment.SECURE)
    assert apply_functions(context, chain, policy=policy) is context



def test_keys_values():
    mapping = {"b": 2, "a": 1}
    assert objects.keys(mapping) == ["b", "a"]
    assert objects.values(mapping) == [2, 1]
    assert objects.keys(None) is None
