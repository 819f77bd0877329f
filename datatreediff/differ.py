"""Recursive field comparison for datatreediff."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from .comparators import (
    NULL_TEXT,
    compare_primitives,
    compare_unordered_arrays,
    handle_different_types,
    handle_one_element_null_arrays,
    handle_one_element_null_primitives,
)
from .exceptions import MaxDepthExceededError
from .models import ComparisonResult, DiffCategory, KeyDiff, ValueDiff, WorkingContext
from .utils import (
    ValueKind,
    build_index_path,
    build_path,
    get_kind,
    validate_document,
)

# Stands in for the element an ordered array lacks at a given index
_MISSING = object()

# Rendered in place of an element that one side does not have at all
ABSENT_TEXT = ""


def _build_dispatch_table() -> dict[tuple[ValueKind, ValueKind], str]:
    """Map every ordered pair of value kinds to the Differ method handling it."""
    same_kind = {
        ValueKind.NULL: "_compare_nulls",
        ValueKind.BOOLEAN: "_compare_primitives",
        ValueKind.NUMBER: "_compare_primitives",
        ValueKind.STRING: "_compare_primitives",
        ValueKind.ARRAY: "_compare_arrays",
        ValueKind.OBJECT: "_compare_objects",
    }
    against_null = {
        ValueKind.BOOLEAN: "_handle_null_primitive",
        ValueKind.NUMBER: "_handle_null_primitive",
        ValueKind.STRING: "_handle_null_primitive",
        ValueKind.ARRAY: "_handle_null_array",
        ValueKind.OBJECT: "_handle_null_object",
    }

    table = {}
    for a_kind in ValueKind:
        for b_kind in ValueKind:
            if a_kind == b_kind:
                table[(a_kind, b_kind)] = same_kind[a_kind]
            elif a_kind == ValueKind.NULL:
                table[(a_kind, b_kind)] = against_null[b_kind]
            elif b_kind == ValueKind.NULL:
                table[(a_kind, b_kind)] = against_null[a_kind]
            else:
                table[(a_kind, b_kind)] = "_handle_different_types"
    return table


DISPATCH_TABLE = _build_dispatch_table()


class Differ:
    """
    Performs the recursive comparison of two document trees.

    Every field goes through ``compare_field``, which dispatches on the pair
    of value kinds and returns the four-way classified diffs for that field
    and everything nested beneath it.

    Only the categories passed in ``categories`` are built; the walk still
    descends wherever an enabled category could surface deeper down.
    """

    def __init__(
        self,
        context: WorkingContext,
        categories: Optional[Iterable[DiffCategory]] = None
    ):
        self.context = context
        self.config = context.config
        self.categories = frozenset(DiffCategory if categories is None else categories)

    def wants(self, category: DiffCategory) -> bool:
        return category in self.categories

    def compare_field(self, key: str, a: Any, b: Any, depth: int = 0) -> ComparisonResult:
        """
        Compare one field of both documents.

        Args:
            key: Path of the field ("" for the document root)
            a: Value in document A
            b: Value in document B
            depth: Nesting depth of the field

        Returns:
            ComparisonResult holding the diffs of this field and its children
        """
        if depth > self.config.max_depth:
            raise MaxDepthExceededError(self.config.max_depth, key)

        handler = getattr(self, DISPATCH_TABLE[(get_kind(a), get_kind(b))])
        return handler(key, a, b, depth)

    def _compare_nulls(self, key: str, a: None, b: None, depth: int) -> ComparisonResult:
        return ComparisonResult()

    def _compare_primitives(self, key: str, a: Any, b: Any, depth: int) -> ComparisonResult:
        result = ComparisonResult()
        if self.wants(DiffCategory.VALUE):
            result.value_diffs = compare_primitives(key, a, b)
        return result

    def _handle_null_primitive(self, key: str, a: Any, b: Any, depth: int) -> ComparisonResult:
        result = ComparisonResult()
        if self.wants(DiffCategory.VALUE):
            result.value_diffs = handle_one_element_null_primitives(key, a, b)
        return result

    def _handle_null_array(self, key: str, a: Any, b: Any, depth: int) -> ComparisonResult:
        result = ComparisonResult()
        if self.wants(DiffCategory.ARRAY):
            self._check_elements_depth(key, a, b, depth)
            result.array_diffs = handle_one_element_null_arrays(key, a, b)
        return result

    def _handle_null_object(self, key: str, a: Any, b: Any, depth: int) -> ComparisonResult:
        # The null side behaves as an empty object: every key becomes a key diff.
        return self._compare_objects(
            key,
            {} if a is None else a,
            {} if b is None else b,
            depth
        )

    def _handle_different_types(self, key: str, a: Any, b: Any, depth: int) -> ComparisonResult:
        result = ComparisonResult()
        if self.wants(DiffCategory.TYPE):
            result.type_diffs = handle_different_types(key, a, b)
        return result

    def _compare_objects(self, key: str, a: dict, b: dict, depth: int) -> ComparisonResult:
        """Compare two objects over the union of their keys, A's keys first."""
        result = ComparisonResult()
        file_a, file_b = self.context.get_file_names()

        for member, a_value in a.items():
            child_path = build_path(key, member)
            if member in b:
                result.extend(self.compare_field(child_path, a_value, b[member], depth + 1))
            elif self.wants(DiffCategory.KEY):
                result.key_diffs.append(KeyDiff(key=child_path, has=file_a, misses=file_b))

        if self.wants(DiffCategory.KEY):
            for member in b:
                if member not in a:
                    result.key_diffs.append(
                        KeyDiff(key=build_path(key, member), has=file_b, misses=file_a)
                    )

        return result

    def _compare_arrays(self, key: str, a: list, b: list, depth: int) -> ComparisonResult:
        if self.config.array_same_order:
            return self._compare_ordered_arrays(key, a, b, depth)

        result = ComparisonResult()
        if self.wants(DiffCategory.ARRAY):
            self._check_elements_depth(key, a, b, depth)
            result.array_diffs = compare_unordered_arrays(key, a, b)
        return result

    def _compare_ordered_arrays(self, key: str, a: list, b: list, depth: int) -> ComparisonResult:
        """
        Compare arrays index by index.

        An element one side lacks compares as null, except that a null
        element against a missing one is still reported as a value diff.
        """
        result = ComparisonResult()

        for i in range(max(len(a), len(b))):
            a_item = a[i] if i < len(a) else _MISSING
            b_item = b[i] if i < len(b) else _MISSING
            child_path = build_index_path(key, i)

            if a_item is _MISSING or b_item is _MISSING:
                result.extend(self._compare_against_missing(child_path, a_item, b_item, depth + 1))
            else:
                result.extend(self.compare_field(child_path, a_item, b_item, depth + 1))

        return result

    def _compare_against_missing(self, key: str, a: Any, b: Any, depth: int) -> ComparisonResult:
        present = b if a is _MISSING else a
        if present is not None:
            return self.compare_field(
                key,
                None if a is _MISSING else a,
                None if b is _MISSING else b,
                depth
            )

        result = ComparisonResult()
        if self.wants(DiffCategory.VALUE):
            value1 = ABSENT_TEXT if a is _MISSING else NULL_TEXT
            value2 = ABSENT_TEXT if b is _MISSING else NULL_TEXT
            result.value_diffs.append(ValueDiff(key=key, value1=value1, value2=value2))
        return result

    def _check_elements_depth(self, key: str, a: Any, b: Any, depth: int):
        # Array elements are serialized whole, outside compare_field's guard
        for side in (a, b):
            if side is not None:
                validate_document(side, self.config.max_depth, key, depth)


def compare_field(
    key: str,
    a: Any,
    b: Any,
    context: WorkingContext,
    categories: Optional[Iterable[DiffCategory]] = None
) -> ComparisonResult:
    """
    Compare one field of two documents under the given context.

    Args:
        key: Path of the field ("" for the document root)
        a: Value in document A
        b: Value in document B
        context: Working context of the run
        categories: Diff categories to build (all when omitted)

    Returns:
        ComparisonResult with key, type, value and array diffs
    """
    return Differ(context, categories).compare_field(key, a, b)
