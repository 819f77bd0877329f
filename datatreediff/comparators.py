"""Leaf comparison functions for same-kind, null-pair and mismatched fields."""

from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

from .models import ArrayDiff, ArrayDiffDesc, TypeDiff, ValueDiff
from .utils import canonical_json, get_type_name


NULL_TEXT = "null"


def compare_primitives(key: str, a: Any, b: Any) -> list[ValueDiff]:
    """
    Compare two scalars of the same kind.

    Strings and booleans compare exactly, numbers by numeric equality
    (``1 == 1.0``).

    Returns:
        An empty list when equal, otherwise a single ValueDiff
    """
    if a == b:
        return []

    value1 = canonical_json(a)
    value2 = canonical_json(b)
    # NaN is never equal to itself but serializes identically
    if value1 == value2:
        return []

    return [ValueDiff(key=key, value1=value1, value2=value2)]


def handle_one_element_null_primitives(key: str, a: Any, b: Any) -> list[ValueDiff]:
    """Compare a null against a scalar; the null side is rendered as ``null``."""
    value1 = NULL_TEXT if a is None else canonical_json(a)
    value2 = NULL_TEXT if b is None else canonical_json(b)
    return [ValueDiff(key=key, value1=value1, value2=value2)]


def handle_one_element_null_arrays(
    key: str,
    a: Sequence[Any] | None,
    b: Sequence[Any] | None
) -> list[ArrayDiff]:
    """Compare a null against an array, treating the null side as empty."""
    return compare_unordered_arrays(key, a or [], b or [])


def handle_different_types(key: str, a: Any, b: Any) -> list[TypeDiff]:
    """Report two non-null values of different kinds."""
    return [TypeDiff(key=key, type1=get_type_name(a), type2=get_type_name(b))]


def compare_unordered_arrays(
    key: str,
    a: Sequence[Any],
    b: Sequence[Any]
) -> list[ArrayDiff]:
    """
    Compare arrays as multisets of canonical element texts, ignoring position.

    Every occurrence of a value on one side beyond the count on the other
    side yields a complementary pair: AHas/BMisses for surplus in A,
    BHas/AMisses for surplus in B. Surplus from A is reported first, in A's
    element order, then surplus from B in B's element order.

    Args:
        key: Path of the array field
        a: Elements of the array in document A
        b: Elements of the array in document B

    Returns:
        List of ArrayDiff entries, empty when both multisets are equal
    """
    a_texts = [canonical_json(item) for item in a]
    b_texts = [canonical_json(item) for item in b]

    diffs: list[ArrayDiff] = []

    remaining = Counter(b_texts)
    for text in a_texts:
        if remaining[text] > 0:
            remaining[text] -= 1
        else:
            diffs.append(ArrayDiff(key=key, descriptor=ArrayDiffDesc.A_HAS, value=text))
            diffs.append(ArrayDiff(key=key, descriptor=ArrayDiffDesc.B_MISSES, value=text))

    remaining = Counter(a_texts)
    for text in b_texts:
        if remaining[text] > 0:
            remaining[text] -= 1
        else:
            diffs.append(ArrayDiff(key=key, descriptor=ArrayDiffDesc.B_HAS, value=text))
            diffs.append(ArrayDiff(key=key, descriptor=ArrayDiffDesc.A_MISSES, value=text))

    return diffs
