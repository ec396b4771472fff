"""Tests for the static filter validator."""

from __future__ import annotations

import pytest

from squiggly.environment import Environment, EnvironmentPolicy
from squiggly.errors import FilterLoadError
from squiggly.nodes import FilterNode, FunctionNode
from squiggly.validator import Severity, load_and_validate_filter, validate_filter


def fn(name, *arguments):
    return FunctionNode(name=name, arguments=arguments)


def _messages(result, severity):
    return [d.message for d in result.diagnostics if d.severity == severity]


# ── Clean filters ────────────────────────────────────────────────


def test_valid_filter_has_no_diagnostics():
    nodes = (
        FilterNode.create("id"),
        FilterNode.create(
            "address",
            nested=True,
            children=[FilterNode.create("city", value_functions=[fn("upper")])],
        ),
        FilterNode.create("**", deep=True, min_depth=1, max_depth=4),
    )
    result = validate_filter(nodes)
    assert result.ok
    assert result.diagnostics == []


def test_empty_filter_is_valid():
    assert validate_filter(()).ok


# ── Names ─────────────────────────────────────────────────────────


def test_reserved_root_name():
    result = validate_filter((FilterNode.create("root"),))
    assert not result.ok
    assert result.errors[0].field == "name"
    assert "reserved" in result.errors[0].message


def test_duplicate_sibling_warns():
    nodes = (FilterNode.create("id"), FilterNode.create("id"))
    result = validate_filter(nodes)
    assert result.ok
    assert len(result.warnings) == 1
    assert "index 0" in result.warnings[0].message


def test_negated_and_positive_same_name_not_duplicate():
    nodes = (FilterNode.create("id"), FilterNode.create("id", negated=True))
    assert validate_filter(nodes).diagnostics == []


def test_duplicates_in_different_scopes_are_fine():
    nodes = (
        FilterNode.create("a", nested=True, children=[FilterNode.create("id")]),
        FilterNode.create("b", nested=True, children=[FilterNode.create("id")]),
    )
    assert validate_filter(nodes).diagnostics == []


# ── Depth bounds ─────────────────────────────────────────────────


def test_negative_depth_is_error():
    result = validate_filter((FilterNode.create("**", deep=True, min_depth=-1),))
    assert not result.ok
    assert result.errors[0].field == "depth"


def test_bounds_on_shallow_node_warn():
    result = validate_filter((FilterNode.create("id", max_depth=2),))
    assert result.ok
    assert "not deep" in result.warnings[0].message


def test_empty_depth_range_warns():
    result = validate_filter(
        (FilterNode.create("**", deep=True, min_depth=2, max_depth=2),)
    )
    assert result.ok
    assert "is empty" in result.warnings[0].message


def test_children_under_negated_node_warn():
    node = FilterNode.create(
        "address", negated=True, nested=True, children=[FilterNode.create("city")]
    )
    result = validate_filter((node,))
    assert result.ok
    assert result.warnings[0].field == "children"
    assert result.warnings[0].path == "-address"


# ── Functions ────────────────────────────────────────────────────


def test_unknown_function_is_error():
    node = FilterNode.create("id", value_functions=[fn("bogus")])
    result = validate_filter((node,))
    assert not result.ok
    assert result.errors[0].field == "value_functions"
    assert "unknown function" in result.errors[0].message


def test_unknown_nested_function_is_error():
    node = FilterNode.create("id", key_functions=[fn("default", fn("bogus"))])
    result = validate_filter((node,))
    assert result.errors[0].field == "key_functions"
    assert "bogus" in result.errors[0].message


def test_wrong_argument_count_is_error():
    node = FilterNode.create("id", value_functions=[fn("upper", "x")])
    result = validate_filter((node,))
    assert not result.ok
    assert "expects 1 argument(s)" in result.errors[0].message


def test_variadic_function_accepts_many_arguments():
    node = FilterNode.create("id", value_functions=[fn("format", 1, 2, 3, 4)])
    assert validate_filter((node,)).ok


def test_restricted_function_under_excluding_policy():
    node = FilterNode.create("id", value_functions=[fn("lpad", 5)])
    policy = EnvironmentPolicy(environment=Environment.SECURE, exclude_restricted=True)
    assert validate_filter((node,)).ok
    result = validate_filter((node,), policy=policy)
    assert not result.ok
    assert "secure environment" in result.errors[0].message


def test_diagnostic_paths_are_nested():
    node = FilterNode.create(
        "address",
        nested=True,
        children=[FilterNode.create("city", value_functions=[fn("bogus")])],
    )
    result = validate_filter((node,))
    assert result.errors[0].path == "address/city"


# ── Loading ──────────────────────────────────────────────────────


def test_load_and_validate(tmp_path):
    f = tmp_path / "filter.yaml"
    f.write_text(
        "filters:\n"
        "  - name: id\n"
        "    value_functions:\n"
        "      - name: nope\n"
        "  - name: id\n"
    )
    nodes, result = load_and_validate_filter(f)
    assert len(nodes) == 2
    assert len(result.errors) == 1
    assert len(result.warnings) == 1
    assert _messages(result, Severity.WARNING)[0].startswith("Rule 'id' repeats")


def test_load_and_validate_missing_file(tmp_path):
    with pytest.raises(FilterLoadError):
        load_and_validate_filter(tmp_path / "missing.yaml")
