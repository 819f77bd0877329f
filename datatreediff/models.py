"""Data models for datatreediff."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .exceptions import ConfigError


class DiffCategory(Enum):
    KEY = "key"
    TYPE = "type"
    VALUE = "value"
    ARRAY = "array"


class ArrayDiffDesc(Enum):
    """Which side of an unordered array comparison holds or misses a value."""
    A_HAS = "AHas"
    A_MISSES = "AMisses"
    B_HAS = "BHas"
    B_MISSES = "BMisses"


@dataclass(frozen=True)
class WorkingFile:
    """Identity label for one side of the comparison."""
    name: str


@dataclass(frozen=True)
class Config:
    """Configuration for one comparison run."""
    array_same_order: bool = False
    check_for_key_diffs: bool = False
    check_for_type_diffs: bool = False
    check_for_value_diffs: bool = False
    check_for_array_diffs: bool = False
    max_depth: int = 200
    ignore_paths: tuple[str, ...] = ()

    def enabled_categories(self) -> frozenset[DiffCategory]:
        flags = {
            DiffCategory.KEY: self.check_for_key_diffs,
            DiffCategory.TYPE: self.check_for_type_diffs,
            DiffCategory.VALUE: self.check_for_value_diffs,
            DiffCategory.ARRAY: self.check_for_array_diffs,
        }
        return frozenset(category for category, enabled in flags.items() if enabled)

    def with_overrides(self, **changes: Any) -> "Config":
        """Return a copy with the given fields replaced; ``None`` values are skipped."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if "ignore_paths" in changes:
            changes["ignore_paths"] = tuple(changes["ignore_paths"])
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Config":
        """
        Build a Config from a run configuration mapping (e.g. a YAML file).

        Recognised keys: ``array_same_order``, ``max_depth``, ``ignore_paths``
        and ``checks`` (a list of category names: key, type, value, array).
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"run configuration must be a mapping, got {type(data).__name__}")

        known = {"array_same_order", "max_depth", "ignore_paths", "checks"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")

        checks = set()
        for name in data.get("checks") or []:
            try:
                checks.add(DiffCategory(str(name).lower()))
            except ValueError:
                raise ConfigError(f"unknown diff category '{name}'")

        max_depth = data.get("max_depth", cls.max_depth)
        if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth < 1:
            raise ConfigError(f"max_depth must be a positive integer, got {max_depth!r}")

        array_same_order = data.get("array_same_order", False)
        if not isinstance(array_same_order, bool):
            raise ConfigError(f"array_same_order must be true or false, got {array_same_order!r}")

        ignore_paths = data.get("ignore_paths") or []
        if isinstance(ignore_paths, str):
            ignore_paths = [ignore_paths]

        return cls(
            array_same_order=array_same_order,
            check_for_key_diffs=DiffCategory.KEY in checks,
            check_for_type_diffs=DiffCategory.TYPE in checks,
            check_for_value_diffs=DiffCategory.VALUE in checks,
            check_for_array_diffs=DiffCategory.ARRAY in checks,
            max_depth=max_depth,
            ignore_paths=tuple(str(p) for p in ignore_paths),
        )


@dataclass(frozen=True)
class WorkingContext:
    """Immutable identity and configuration shared by a whole comparison."""
    file_a: WorkingFile
    file_b: WorkingFile
    config: Config = field(default_factory=Config)

    def get_file_names(self) -> tuple[str, str]:
        return self.file_a.name, self.file_b.name


@dataclass(frozen=True)
class KeyDiff:
    """A key present in exactly one of the two compared objects."""
    key: str
    has: str
    misses: str

    def to_dict(self) -> dict:
        return {"key": self.key, "has": self.has, "misses": self.misses}

    @classmethod
    def from_dict(cls, data: dict) -> "KeyDiff":
        return cls(key=data["key"], has=data["has"], misses=data["misses"])


@dataclass(frozen=True)
class TypeDiff:
    """A key holding values of different kinds on each side."""
    key: str
    type1: str
    type2: str

    def to_dict(self) -> dict:
        return {"key": self.key, "type1": self.type1, "type2": self.type2}

    @classmethod
    def from_dict(cls, data: dict) -> "TypeDiff":
        return cls(key=data["key"], type1=data["type1"], type2=data["type2"])


@dataclass(frozen=True)
class ValueDiff:
    """A key holding comparable values whose canonical text differs."""
    key: str
    value1: str
    value2: str

    def to_dict(self) -> dict:
        return {"key": self.key, "value1": self.value1, "value2": self.value2}

    @classmethod
    def from_dict(cls, data: dict) -> "ValueDiff":
        return cls(key=data["key"], value1=data["value1"], value2=data["value2"])


@dataclass(frozen=True)
class ArrayDiff:
    """An array element present on one side only."""
    key: str
    descriptor: ArrayDiffDesc
    value: str

    def to_dict(self) -> dict:
        return {"key": self.key, "descriptor": self.descriptor.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "ArrayDiff":
        return cls(
            key=data["key"],
            descriptor=ArrayDiffDesc(data["descriptor"]),
            value=data["value"],
        )


@dataclass
class ComparisonResult:
    """Four-way classified batch of diffs for one field and everything below it."""
    key_diffs: list[KeyDiff] = field(default_factory=list)
    type_diffs: list[TypeDiff] = field(default_factory=list)
    value_diffs: list[ValueDiff] = field(default_factory=list)
    array_diffs: list[ArrayDiff] = field(default_factory=list)

    def extend(self, other: "ComparisonResult") -> None:
        self.key_diffs.extend(other.key_diffs)
        self.type_diffs.extend(other.type_diffs)
        self.value_diffs.extend(other.value_diffs)
        self.array_diffs.extend(other.array_diffs)

    def is_empty(self) -> bool:
        return not (self.key_diffs or self.type_diffs or self.value_diffs or self.array_diffs)


@dataclass
class DiffCollection:
    """Per-category results of a run; ``None`` marks a category that was not checked."""
    key_diffs: Optional[list[KeyDiff]] = None
    type_diffs: Optional[list[TypeDiff]] = None
    value_diffs: Optional[list[ValueDiff]] = None
    array_diffs: Optional[list[ArrayDiff]] = None

    def counts(self) -> dict[str, Optional[int]]:
        return {
            "key": None if self.key_diffs is None else len(self.key_diffs),
            "type": None if self.type_diffs is None else len(self.type_diffs),
            "value": None if self.value_diffs is None else len(self.value_diffs),
            "array": None if self.array_diffs is None else len(self.array_diffs),
        }

    def is_match(self) -> bool:
        return not any(self.counts().values())


@dataclass(frozen=True)
class SavedConfig:
    """The configuration part of a saved session."""
    check_for_key_diffs: bool
    check_for_type_diffs: bool
    check_for_value_diffs: bool
    check_for_array_diffs: bool
    file_a: str
    file_b: str
    array_same_order: bool

    @classmethod
    def from_context(cls, context: WorkingContext) -> "SavedConfig":
        config = context.config
        return cls(
            check_for_key_diffs=config.check_for_key_diffs,
            check_for_type_diffs=config.check_for_type_diffs,
            check_for_value_diffs=config.check_for_value_diffs,
            check_for_array_diffs=config.check_for_array_diffs,
            file_a=context.file_a.name,
            file_b=context.file_b.name,
            array_same_order=config.array_same_order,
        )

    def to_context(self) -> WorkingContext:
        return WorkingContext(
            file_a=WorkingFile(self.file_a),
            file_b=WorkingFile(self.file_b),
            config=Config(
                array_same_order=self.array_same_order,
                check_for_key_diffs=self.check_for_key_diffs,
                check_for_type_diffs=self.check_for_type_diffs,
                check_for_value_diffs=self.check_for_value_diffs,
                check_for_array_diffs=self.check_for_array_diffs,
            ),
        )

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SavedConfig":
        return cls(
            check_for_key_diffs=bool(data["check_for_key_diffs"]),
            check_for_type_diffs=bool(data["check_for_type_diffs"]),
            check_for_value_diffs=bool(data["check_for_value_diffs"]),
            check_for_array_diffs=bool(data["check_for_array_diffs"]),
            file_a=str(data["file_a"]),
            file_b=str(data["file_b"]),
            array_same_order=bool(data["array_same_order"]),
        )


@dataclass
class SavedContext:
    """A persisted run: the four diff sequences plus the run's configuration."""
    config: SavedConfig
    key_diff: list[KeyDiff] = field(default_factory=list)
    type_diff: list[TypeDiff] = field(default_factory=list)
    value_diff: list[ValueDiff] = field(default_factory=list)
    array_diff: list[ArrayDiff] = field(default_factory=list)

    @classmethod
    def from_collection(cls, collection: DiffCollection, context: WorkingContext) -> "SavedContext":
        return cls(
            config=SavedConfig.from_context(context),
            key_diff=list(collection.key_diffs or []),
            type_diff=list(collection.type_diffs or []),
            value_diff=list(collection.value_diffs or []),
            array_diff=list(collection.array_diffs or []),
        )

    def to_collection(self) -> DiffCollection:
        """Rebuild the collection, with ``None`` for categories the saved run did not check."""
        config = self.config
        return DiffCollection(
            key_diffs=list(self.key_diff) if config.check_for_key_diffs else None,
            type_diffs=list(self.type_diff) if config.check_for_type_diffs else None,
            value_diffs=list(self.value_diff) if config.check_for_value_diffs else None,
            array_diffs=list(self.array_diff) if config.check_for_array_diffs else None,
        )

    def to_dict(self) -> dict:
        return {
            "key_diff": [d.to_dict() for d in self.key_diff],
            "type_diff": [d.to_dict() for d in self.type_diff],
            "value_diff": [d.to_dict() for d in self.value_diff],
            "array_diff": [d.to_dict() for d in self.array_diff],
            "config": self.config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SavedContext":
        return cls(
            config=SavedConfig.from_dict(data["config"]),
            key_diff=[KeyDiff.from_dict(d) for d in data.get("key_diff", [])],
            type_diff=[TypeDiff.from_dict(d) for d in data.get("type_diff", [])],
            value_diff=[ValueDiff.from_dict(d) for d in data.get("value_diff", [])],
            array_diff=[ArrayDiff.from_dict(d) for d in data.get("array_diff", [])],
        )
