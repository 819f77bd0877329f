"""Reading documents and run configuration, reading and writing saved sessions."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .exceptions import InputError, MalformedDocumentError, OutputError
from .models import Config, DiffCollection, SavedContext, WorkingContext
from .utils import validate_document

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class DocumentLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted dates and timestamps as strings."""


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _read_text(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        raise InputError(f"File not found: {path}", str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Could not read {path}: {e}", str(path))


def read_document(path: str | Path) -> Any:
    """
    Load a document from a JSON or YAML file.

    Files ending in ``.yaml`` or ``.yml`` are parsed as YAML, everything else
    as JSON.

    Raises:
        InputError: the file cannot be read
        MalformedDocumentError: the content cannot be parsed or holds
            values that are not JSON values
    """
    path = Path(path)
    content = _read_text(path)

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            document = yaml.load(content, Loader=DocumentLoader)
        except (yaml.YAMLError, RecursionError) as e:
            raise MalformedDocumentError(f"Failed to parse YAML document {path}", str(path), str(e))
    else:
        try:
            document = json.loads(content)
        except (json.JSONDecodeError, RecursionError) as e:
            raise MalformedDocumentError(f"Failed to parse JSON document {path}", str(path), str(e))

    # YAML tags such as !!binary and !!set build values no JSON document holds
    try:
        validate_document(document)
    except TypeError as e:
        raise MalformedDocumentError(f"Unsupported value in document {path}", str(path), str(e))

    logger.debug("Loaded document %s", path)
    return document


def load_config(path: str | Path) -> Config:
    """Load a run configuration from a YAML (or JSON) file."""
    path = Path(path)
    content = _read_text(path)

    try:
        data = yaml.safe_load(content)
    except (yaml.YAMLError, RecursionError) as e:
        raise MalformedDocumentError(f"Failed to parse configuration {path}", str(path), str(e))

    return Config.from_dict(data)


def read_saved_context(path: str | Path) -> SavedContext:
    """
    Load a session previously written by ``write_saved_context``.

    Raises:
        InputError: the file cannot be read
        MalformedDocumentError: the file is not a saved session
    """
    path = Path(path)
    content = _read_text(path)

    try:
        data = json.loads(content)
    except (json.JSONDecodeError, RecursionError) as e:
        raise MalformedDocumentError(f"Failed to parse saved session {path}", str(path), str(e))

    try:
        saved = SavedContext.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedDocumentError(
            f"Not a saved session: {path}", str(path), f"{type(e).__name__}: {e}"
        )

    logger.debug("Loaded saved session %s", path)
    return saved


def write_saved_context(
    path: str | Path,
    collection: DiffCollection,
    context: WorkingContext
) -> SavedContext:
    """
    Persist a run's diffs and configuration for later rendering.

    Raises:
        OutputError: the file cannot be written
    """
    path = Path(path)
    saved = SavedContext.from_collection(collection, context)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(saved.to_dict(), f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise OutputError(f"Could not write {path}: {e}", str(path))

    logger.info("Saved session written to %s", path)
    return saved
