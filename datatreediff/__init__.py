"""
datatreediff - structural differences between JSON-like documents

Compares two parsed documents and classifies every discrepancy as a key,
type, value or array difference.
"""

__version__ = "0.3.0"

from .differ import Differ, compare_field
from .engine import DataTreeDiffEngine, compare
from .exceptions import (
    ConfigError,
    DataTreeDiffError,
    InputError,
    MalformedDocumentError,
    MaxDepthExceededError,
    OutputError,
)
from .finders import (
    collect_data,
    find_array_diffs,
    find_key_diffs,
    find_type_diffs,
    find_value_diffs,
)
from .models import (
    ArrayDiff,
    ArrayDiffDesc,
    ComparisonResult,
    Config,
    DiffCategory,
    DiffCollection,
    KeyDiff,
    SavedConfig,
    SavedContext,
    TypeDiff,
    ValueDiff,
    WorkingContext,
    WorkingFile,
)
from .storage import load_config, read_document, read_saved_context, write_saved_context

__all__ = [
    # Engine
    "DataTreeDiffEngine",
    "compare",
    "Differ",
    "compare_field",
    # Finders
    "find_key_diffs",
    "find_type_diffs",
    "find_value_diffs",
    "find_array_diffs",
    "collect_data",
    # Context
    "Config",
    "WorkingFile",
    "WorkingContext",
    # Diff records
    "DiffCategory",
    "KeyDiff",
    "TypeDiff",
    "ValueDiff",
    "ArrayDiff",
    "ArrayDiffDesc",
    "ComparisonResult",
    "DiffCollection",
    # Saved sessions
    "SavedConfig",
    "SavedContext",
    "read_document",
    "load_config",
    "read_saved_context",
    "write_saved_context",
    # Errors
    "DataTreeDiffError",
    "InputError",
    "MalformedDocumentError",
    "OutputError",
    "ConfigError",
    "MaxDepthExceededError",
]
