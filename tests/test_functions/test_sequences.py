"""Tests for sequence functions."""

from __future__ import annotations

from squiggly.functions import sequences


def test_size():
    assert sequences.size(None) == 0
    assert sequences.size("abc") == 3
    assert sequences.size([1, 2]) == 2
    assert sequences.size({"a": 1}) == 1
    assert sequences.size(42) == 1


def test_first_last():
    assert sequences.first([1, 2, 3]) == 1
    assert sequences.last([1, 2, 3]) == 3
    assert sequences.first("abc") == "a"
    assert sequences.first([]) is None
    assert sequences.last(iter([4, 5])) == 5
    assert sequences.first(7) == 7


def test_reverse():
    assert sequences.reverse("abc") == "cba"
    assert sequences.reverse([1, 2, 3]) == [3, 2, 1]
    assert sequences.reverse(5) == 5


def test_slice_and_limit():
    assert sequences.slice_([1, 2, 3, 4], 1, 3) == [2, 3]
    assert sequences.slice_("abcd", 2) == "cd"
    assert sequences.limit([1, 2, 3, 4], 2) == [1, 2]
    assert sequences.limit([1, 2, 3, 4], -2) == [3, 4]
    assert sequences.limit(None, 2) is None


def test_sort():
    assert sequences.sort([3, None, 1, 2]) == [1, 2, 3, None]
    assert sequences.sort([3, 1, 2], True) == [3, 2, 1]
    assert sequences.sort(None) is None


def test_distinct_keeps_first_occurrence():
    assert sequences.distinct([3, 1, 3, 2, 1]) == [3, 1, 2]
    assert sequences.distinct([{"a": 1}, {"a": 1}]) == [{"a": 1}]


def test_flatten():
    assert sequences.flatten([1, [2, [3, (4, 5)]], 6]) == [1, 2, 3, 4, 5, 6]


def test_contains():
    assert sequences.contains("abc", "b")
    assert sequences.contains("a1", 1)
    assert sequences.contains([1, 2], 2)
    assert not sequences.contains(None, 1)
    assert sequences.contains(5, 5)


def test_index_of():
    assert sequences.index_of("abc", "c") == 2
    assert sequences.index_of([1, 2], 2) == 1
    assert sequences.index_of([1, 2], 9) == -1
    assert sequences.index_of(None, 1) == -1
