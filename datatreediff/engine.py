"""Main comparison engine for datatreediff."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Optional

from .exceptions import InputError
from .finders import collect_data
from .masker import mask_documents
from .models import Config, DiffCollection, WorkingContext, WorkingFile
from .storage import read_document
from .utils import validate_document

logger = logging.getLogger(__name__)


class DataTreeDiffEngine:
    """
    Comparison engine that runs the two stages of a comparison:

    1. Masking: remove the configured ignore paths from both documents
    2. Diffing: classify every difference into key, type, value and array diffs
    """

    def __init__(self, context: WorkingContext):
        """
        Initialize the engine.

        Args:
            context: Working context (file names and configuration) of the run
        """
        self.context = context

    @property
    def config(self) -> Config:
        return self.context.config

    def compare(self, doc_a: Any, doc_b: Any) -> DiffCollection:
        """
        Compare two parsed documents.

        Args:
            doc_a: Root of the first document
            doc_b: Root of the second document

        Returns:
            DiffCollection holding one list per enabled category
        """
        start_time = time.time()

        self._validate_inputs(doc_a, doc_b)

        # Stage 1: Masking
        if self.config.ignore_paths:
            doc_a, doc_b, removed = mask_documents(doc_a, doc_b, self.config.ignore_paths)
            logger.debug("Masking removed %d node(s)", removed)

        # Stage 2: Diffing
        collection = collect_data(doc_a, doc_b, self.context)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug("Compared %s and %s in %d ms", self.context.file_a.name,
                     self.context.file_b.name, duration_ms)
        for category, count in collection.counts().items():
            if count is not None:
                logger.info("%s differences: %d", category.capitalize(), count)

        return collection

    def _validate_inputs(self, doc_a: Any, doc_b: Any):
        """Ensure both documents are JSON value trees within the depth limit."""
        for name, document in ((self.context.file_a.name, doc_a), (self.context.file_b.name, doc_b)):
            try:
                validate_document(document, self.config.max_depth)
            except TypeError as e:
                raise InputError(f"{name} is not a parsed document: {e}", name)

    @classmethod
    def compare_files(
        cls,
        path_a: str | Path,
        path_b: str | Path,
        config: Optional[Config] = None
    ) -> tuple[DiffCollection, WorkingContext]:
        """
        Load two documents from disk and compare them.

        The file paths, as given, name the two sides of the comparison.

        Returns:
            Tuple of (collection, context)
        """
        context = WorkingContext(
            file_a=WorkingFile(str(path_a)),
            file_b=WorkingFile(str(path_b)),
            config=config or Config(),
        )
        doc_a = read_document(path_a)
        doc_b = read_document(path_b)
        return cls(context).compare(doc_a, doc_b), context


def compare(doc_a: Any, doc_b: Any, context: WorkingContext) -> DiffCollection:
    """
    Convenience function to compare two parsed documents.

    Args:
        doc_a: Root of the first document
        doc_b: Root of the second document
        context: Working context of the run

    Returns:
        DiffCollection holding one list per enabled category
    """
    engine = DataTreeDiffEngine(context)
    return engine.compare(doc_a, doc_b)
