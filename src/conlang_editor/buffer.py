"""Staged relation edits committed in a single call."""

from __future__ import annotations

import logging

from conlang_editor.exceptions import LoopError
from conlang_editor.graph import RelationshipGraph
from conlang_editor.models import ExternalParent

logger = logging.getLogger(__name__)


class InsertBuffer:
    """Pending relation values set one field at a time, then inserted.

    The staged parent survives :meth:`insert` so several children can be
    attached to the same parent in a row. The staged external parent is
    cleared by :meth:`insert_external`.
    """

    def __init__(self, graph: RelationshipGraph) -> None:
        self._graph = graph
        self.parent_id = 0
        self.child_id = 0
        self._reset_external()

    def set_parent(self, parent_id: int) -> None:
        self.parent_id = parent_id

    def set_child(self, child_id: int) -> None:
        self.child_id = child_id

    def set_external_value(self, value: str) -> None:
        self.external_value = value.strip()

    def set_external_language(self, language: str) -> None:
        self.external_language = language.strip()

    def set_external_definition(self, definition: str) -> None:
        self.external_definition = definition

    @property
    def external_parent(self) -> ExternalParent:
        """The external parent as currently staged."""
        return ExternalParent(
            self.external_value,
            self.external_language,
            self.external_definition,
        )

    def insert(self) -> bool:
        """Commit the staged parent/child relation.

        Values reaching the buffer are expected to have been checked by the
        edit screen already, so a LoopError here is not re-raised. It is
        logged and reported by returning False; nothing is written.
        """
        try:
            self._graph.add_relation(self.parent_id, self.child_id)
        except LoopError as e:
            logger.warning("Buffered relation rejected: %s", e)
            return False
        return True

    def insert_external(self) -> None:
        """Commit the staged external parent to the staged child and clear it."""
        self._graph.add_external_relation(self.external_parent, self.child_id)
        self._reset_external()

    def _reset_external(self) -> None:
        self.external_value = ""
        self.external_language = ""
        self.external_definition = ""
