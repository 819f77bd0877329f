"""Utility functions for datatreediff."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterator, Optional

from .exceptions import MaxDepthExceededError


class ValueKind(Enum):
    """Kind of a parsed document node; the value is the display name."""
    NULL = "null"
    BOOLEAN = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def get_kind(value: Any) -> ValueKind:
    """
    Classify a parsed document node.

    Tuples count as arrays so that documents built in code compare like
    parsed ones. Anything that is not a JSON value raises ``TypeError``.
    """
    if value is None:
        return ValueKind.NULL
    # bool before number: bool is a subclass of int
    elif isinstance(value, bool):
        return ValueKind.BOOLEAN
    elif isinstance(value, (int, float)):
        return ValueKind.NUMBER
    elif isinstance(value, str):
        return ValueKind.STRING
    elif isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    elif isinstance(value, dict):
        return ValueKind.OBJECT
    raise TypeError(f"Not a document value: {type(value).__name__}")


def get_type_name(value: Any) -> str:
    """Get the kind name used in type diffs."""
    return get_kind(value).value


def _normalize_numbers(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {str(k): _normalize_numbers(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_numbers(v) for v in value]
    return value


def canonical_json(value: Any) -> str:
    """
    Serialize a value to the canonical text carried by diff records.

    Compact separators, sorted object keys, and integral floats written as
    integers, so that numerically equal values always share one text.
    """
    return json.dumps(
        _normalize_numbers(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def build_path(parent_path: str, key: str) -> str:
    """Build the path of an object member; the root path is empty."""
    if not parent_path:
        return str(key)
    return f"{parent_path}.{key}"


def build_index_path(parent_path: str, index: int) -> str:
    """Build the path of an array element."""
    return f"{parent_path}[{index}]"


def iter_nodes(value: Any, path: str = "", depth: int = 0) -> Iterator[tuple[str, int, Any]]:
    """
    Yield ``(path, depth, node)`` for a value and everything nested in it.

    Walks depth first with an explicit stack, so arbitrarily deep documents
    never touch the interpreter's recursion limit.
    """
    stack = [(path, depth, value)]
    while stack:
        node_path, node_depth, node = stack.pop()
        yield node_path, node_depth, node

        if isinstance(node, dict):
            children = [(build_path(node_path, k), node_depth + 1, v) for k, v in node.items()]
        elif isinstance(node, (list, tuple)):
            children = [(build_index_path(node_path, i), node_depth + 1, v) for i, v in enumerate(node)]
        else:
            continue
        stack.extend(reversed(children))


def validate_document(
    value: Any,
    max_depth: Optional[int] = None,
    path: str = "",
    depth: int = 0
) -> None:
    """
    Check that a value is a document tree no deeper than ``max_depth``.

    Raises:
        TypeError: a node is not a JSON value
        MaxDepthExceededError: a node sits deeper than ``max_depth``
    """
    for node_path, node_depth, node in iter_nodes(value, path, depth):
        if max_depth is not None and node_depth > max_depth:
            raise MaxDepthExceededError(max_depth, node_path)
        try:
            get_kind(node)
        except TypeError:
            raise TypeError(
                f"Not a document value at {node_path or '<root>'}: {type(node).__name__}"
            ) from None


def sanitize_json_str(json_str: str) -> str:
    """Pretty-print text holding JSON; any other text is returned unchanged."""
    try:
        value = json.loads(json_str)
    except (ValueError, TypeError):
        return json_str
    return json.dumps(value, indent=2, ensure_ascii=False)
