"""Custom exception hierarchy for conlang-editor."""

from __future__ import annotations


class ConlangEditorError(Exception):
    """Base exception for all conlang-editor errors."""


class LoopError(ConlangEditorError):
    """Relation would make an entry part of its own etymological lineage."""


class EntityNotFoundError(ConlangEditorError):
    """Entry doesn't exist in the lexicon."""


class DuplicateEntityError(ConlangEditorError):
    """Entry with same ID already exists."""


class DataImportError(ConlangEditorError):
    """Failed to import data (malformed records, bad document layout)."""


class ParseError(DataImportError):
    """Error parsing a lexicon document."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(message)
