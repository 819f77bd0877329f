"""Removal of ignored paths from documents before comparison."""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Iterable

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.jsonpath import Fields, Index

from .exceptions import ConfigError

logger = logging.getLogger(__name__)


class Masker:
    """
    Removes every node matched by a set of JSONPath expressions.

    Expressions follow jsonpath-ng syntax, e.g. ``$..updatedAt`` or
    ``$.items[*].etag``. Inputs are never modified: masking works on deep
    copies.
    """

    # Cache for compiled JSONPath expressions
    _cache: dict = {}

    def __init__(self, ignore_paths: Iterable[str]):
        self.ignore_paths = tuple(ignore_paths)
        self.expressions = [self.compile(path) for path in self.ignore_paths]

    @classmethod
    def compile(cls, path: str):
        """Compile and cache a JSONPath expression."""
        if path not in cls._cache:
            try:
                cls._cache[path] = jsonpath_parse(path)
            except (JsonPathLexerError, JsonPathParserError) as e:
                raise ConfigError(f"Invalid ignore path '{path}': {e}")
        return cls._cache[path]

    def mask(self, document: Any) -> tuple[Any, int]:
        """
        Return a copy of ``document`` without the ignored nodes.

        Returns:
            Tuple of (masked_document, removed_count)
        """
        if not self.expressions:
            return document, 0

        data = deepcopy(document)
        removed = 0
        for path, expr in zip(self.ignore_paths, self.expressions):
            count = self._delete_matches(data, expr, path)
            logger.debug("Ignore path %s removed %d node(s)", path, count)
            removed += count

        return data, removed

    def _delete_matches(self, data: Any, expr, path: str) -> int:
        removed = 0

        # Reverse order keeps earlier list indices valid while deleting later ones
        for match in reversed(expr.find(data)):
            if match.context is None:
                logger.warning("Ignore path %s matches the document root; skipped", path)
                continue

            parent = match.context.value
            segment = match.path
            if isinstance(segment, Index) and isinstance(parent, list):
                if 0 <= segment.index < len(parent):
                    del parent[segment.index]
                    removed += 1
            elif isinstance(segment, Fields) and isinstance(parent, dict):
                for name in segment.fields:
                    if name in parent:
                        del parent[name]
                        removed += 1

        return removed


def mask_documents(a: Any, b: Any, ignore_paths: Iterable[str]) -> tuple[Any, Any, int]:
    """
    Apply the same ignore paths to both documents.

    Returns:
        Tuple of (masked_a, masked_b, removed_count)
    """
    masker = Masker(ignore_paths)
    masked_a, removed_a = masker.mask(a)
    masked_b, removed_b = masker.mask(b)
    return masked_a, masked_b, removed_a + removed_b
