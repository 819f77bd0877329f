"""Top-level diff finders, one per category, plus a combined single-pass collector."""

from __future__ import annotations

from typing import Any

from .differ import Differ
from .models import (
    ArrayDiff,
    DiffCategory,
    DiffCollection,
    KeyDiff,
    TypeDiff,
    ValueDiff,
    WorkingContext,
)


def find_key_diffs(key: str, a: Any, b: Any, context: WorkingContext) -> list[KeyDiff]:
    """Find keys present in only one of the two documents."""
    return Differ(context, [DiffCategory.KEY]).compare_field(key, a, b).key_diffs


def find_type_diffs(key: str, a: Any, b: Any, context: WorkingContext) -> list[TypeDiff]:
    """Find fields holding values of different kinds."""
    return Differ(context, [DiffCategory.TYPE]).compare_field(key, a, b).type_diffs


def find_value_diffs(key: str, a: Any, b: Any, context: WorkingContext) -> list[ValueDiff]:
    """Find fields holding comparable but different values."""
    return Differ(context, [DiffCategory.VALUE]).compare_field(key, a, b).value_diffs


def find_array_diffs(key: str, a: Any, b: Any, context: WorkingContext) -> list[ArrayDiff]:
    """Find array elements present on one side only."""
    return Differ(context, [DiffCategory.ARRAY]).compare_field(key, a, b).array_diffs


def collect_data(a: Any, b: Any, context: WorkingContext) -> DiffCollection:
    """
    Compute every category enabled in the context's config in one traversal.

    Args:
        a: Root of document A
        b: Root of document B
        context: Working context of the run

    Returns:
        DiffCollection with ``None`` for each disabled category
    """
    categories = context.config.enabled_categories()
    collection = DiffCollection()
    if not categories:
        return collection

    result = Differ(context, categories).compare_field("", a, b)

    if DiffCategory.KEY in categories:
        collection.key_diffs = result.key_diffs
    if DiffCategory.TYPE in categories:
        collection.type_diffs = result.type_diffs
    if DiffCategory.VALUE in categories:
        collection.value_diffs = result.value_diffs
    if DiffCategory.ARRAY in categories:
        collection.array_diffs = result.array_diffs

    return collection
