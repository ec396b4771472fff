"""Matching engine: decide what happens to one field at one depth.

Given the active filter set (sibling nodes at the current traversal
position), a candidate field name and the current depth, the engine
answers exclude, include as a leaf, or include and recurse with a new
active set. It holds no state, so one immutable node tree can serve
any number of concurrent traversals.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from squiggly.nodes import FilterNode


class MatchOutcome(str, Enum):
    EXCLUDE = "exclude"
    INCLUDE_LEAF = "include_leaf"
    INCLUDE_WITH_CHILDREN = "include_with_children"


@dataclass(frozen=True)
class MatchResult:
    """Engine decision for one field.

    ``node`` is the selected rule for inclusions (None when excluded);
    ``children`` is the next active set for INCLUDE_WITH_CHILDREN.
    """

    outcome: MatchOutcome
    node: FilterNode | None = None
    children: tuple[FilterNode, ...] = ()

    @property
    def included(self) -> bool:
        return self.outcome != MatchOutcome.EXCLUDE


EXCLUDED = MatchResult(MatchOutcome.EXCLUDE)


def _applies(
    node: FilterNode,
    candidate: str,
    depth: int,
    variables: Mapping[str, Any] | None,
) -> bool:
    # Deep nodes must be in their depth range before their name counts.
    if node.is_deep() and not node.is_available_at_depth(depth):
        return False
    return node.matches(candidate, variables)


def select_node(
    nodes: Sequence[FilterNode],
    candidate: str,
    depth: int,
    variables: Mapping[str, Any] | None = None,
) -> FilterNode | None:
    """Pick the rule that governs *candidate*, or None if it is excluded.

    A negated match excludes when its specificity is at least that of
    the best positive match. Otherwise the most specific positive match
    wins, and among equals the first declared.
    """
    positive: list[FilterNode] = []
    negated: list[FilterNode] = []
    for node in nodes:
        if _applies(node, candidate, depth, variables):
            (negated if node.is_negated() else positive).append(node)

    if not positive:
        return None

    best = max(positive, key=FilterNode.get_specificity)
    if any(n.get_specificity() >= best.get_specificity() for n in negated):
        return None
    return best


def match_field(
    nodes: Sequence[FilterNode],
    candidate: str,
    depth: int,
    variables: Mapping[str, Any] | None = None,
) -> MatchResult:
    """Decide whether *candidate* at *depth* is included, and how.

    Args:
        nodes: The active filter set at this position (root set at depth 0).
        candidate: Field name being considered.
        depth: Current traversal depth, starting at 0.
        variables: Bindings for variable names, if any.

    Returns:
        EXCLUDED, an INCLUDE_LEAF result, or INCLUDE_WITH_CHILDREN with
        the next active set. A deep node without children hands back
        the same active set, so it keeps applying until its depth range
        ends or the data runs out of children.
    """
    node = select_node(nodes, candidate, depth, variables)
    if node is None:
        return EXCLUDED
    if node.is_empty_nested():
        return MatchResult(MatchOutcome.INCLUDE_LEAF, node)
    if node.children:
        return MatchResult(MatchOutcome.INCLUDE_WITH_CHILDREN, node, node.children)
    if node.is_deep():
        same = nodes if isinstance(nodes, tuple) else tuple(nodes)
        return MatchResult(MatchOutcome.INCLUDE_WITH_CHILDREN, node, same)
    return MatchResult(MatchOutcome.INCLUDE_LEAF, node)


def should_include(
    nodes: Sequence[FilterNode],
    candidate: str,
    depth: int,
    variables: Mapping[str, Any] | None = None,
) -> bool:
    return select_node(nodes, candidate, depth, variables) is not None
