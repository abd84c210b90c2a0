"""Links between dictionary entries and free-text external parents."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from conlang_editor.lexicon import EntryExistenceOracle
from conlang_editor.models import ExternalParent

logger = logging.getLogger(__name__)


class ExternalParentRegistry:
    """Reference-counted registry of external parents.

    An external parent stays registered exactly as long as at least one
    child entry links to it.
    """

    def __init__(self, oracle: EntryExistenceOracle) -> None:
        self._oracle = oracle
        self._parent_to_children: dict[str, set[int]] = {}
        self._child_to_parents: dict[int, dict[str, ExternalParent]] = {}
        self._all_parents: dict[str, ExternalParent] = {}

    def add_external_relation(
        self, parent: ExternalParent, child_id: int
    ) -> None:
        """Link ``parent`` to ``child_id``; no-op if the child doesn't exist."""
        if not self._oracle.exists(child_id):
            logger.debug(
                "Skipping external parent %r for missing entry %s",
                parent.display, child_id,
            )
            return

        uid = parent.unique_id
        # first registration wins, later definitions don't overwrite it
        registered = self._all_parents.setdefault(uid, parent)
        self._parent_to_children.setdefault(uid, set()).add(child_id)
        self._child_to_parents.setdefault(child_id, {}).setdefault(
            uid, registered
        )

    def del_external_relation(
        self, parent: ExternalParent, child_id: int
    ) -> None:
        """Unlink ``parent`` from ``child_id``; no-op if the child doesn't exist."""
        if not self._oracle.exists(child_id):
            return

        uid = parent.unique_id
        children = self._parent_to_children.get(uid)
        if children is not None:
            children.discard(child_id)
            if not children:
                del self._parent_to_children[uid]
                self._all_parents.pop(uid, None)
                logger.debug("Dropped unreferenced external parent %r", uid)

        parents = self._child_to_parents.get(child_id)
        if parents is not None:
            parents.pop(uid, None)
            if not parents:
                del self._child_to_parents[child_id]

    def get_external_parents(self, child_id: int) -> list[ExternalParent]:
        return list(self._child_to_parents.get(child_id, {}).values())

    def has_external_parents(self, child_id: int) -> bool:
        return bool(self._child_to_parents.get(child_id))

    def child_has_external_parent(self, child_id: int, unique_id: str) -> bool:
        return unique_id in self._child_to_parents.get(child_id, {})

    def get_children(self, unique_id: str) -> list[int]:
        """Ids of entries derived from an external parent, ascending."""
        return sorted(self._parent_to_children.get(unique_id, ()))

    def all_parents(self) -> list[ExternalParent]:
        """Every registered external parent."""
        return list(self._all_parents.values())

    def iter_child_links(self) -> Iterator[tuple[int, list[ExternalParent]]]:
        """Yield ``(child_id, external_parents)`` for each linked child."""
        for child_id in sorted(self._child_to_parents):
            yield child_id, list(self._child_to_parents[child_id].values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExternalParentRegistry):
            return NotImplemented
        return (
            self._parent_to_children == other._parent_to_children
            and self._child_to_parents == other._child_to_parents
            and self._all_parents == other._all_parents
        )

    def __len__(self) -> int:
        return len(self._all_parents)
