"""Etymological parent/child relationships between dictionary entries."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from conlang_editor.collation import Collator
from conlang_editor.exceptions import LoopError
from conlang_editor.external import ExternalParentRegistry
from conlang_editor.lexicon import EntryExistenceOracle
from conlang_editor.models import ExternalParent, RootEntry

logger = logging.getLogger(__name__)


class RelationshipGraph:
    """Acyclic "derived-from" graph over entry ids.

    Edges are held twice, in a parent-to-children map and its mirror, and
    every mutation keeps both maps in lockstep. Entries are referenced by
    id only; the graph never owns them and tolerates ids whose entries
    have since been deleted.
    """

    def __init__(
        self,
        oracle: EntryExistenceOracle,
        collator: Collator | None = None,
    ) -> None:
        self._oracle = oracle
        self.collator = collator if collator is not None else Collator()
        self._parent_to_children: dict[int, set[int]] = {}
        self._child_to_parents: dict[int, set[int]] = {}
        self.external = ExternalParentRegistry(oracle)

    # ------------------------------------------------------------------
    # Internal relations
    # ------------------------------------------------------------------

    def add_relation(
        self,
        parent_id: int,
        child_id: int,
        override_checks: bool = False,
    ) -> None:
        """Record that ``child_id`` is derived from ``parent_id``.

        Raises LoopError if the relation would put either entry in its own
        lineage. Missing entries are skipped silently. ``override_checks``
        skips both checks and is meant for replaying data that was valid
        when written.
        """
        if not override_checks:
            if self.creates_loop(parent_id, child_id):
                raise LoopError(
                    f"Relation {parent_id!r} -> {child_id!r} creates an "
                    "illegal loop: an entry may never have itself in its "
                    "own etymological lineage"
                )
            if not (self._oracle.exists(parent_id)
                    and self._oracle.exists(child_id)):
                logger.debug(
                    "Skipping relation %s -> %s: entry missing",
                    parent_id, child_id,
                )
                return

        self._parent_to_children.setdefault(parent_id, set()).add(child_id)
        self._child_to_parents.setdefault(child_id, set()).add(parent_id)
        logger.debug("Added relation %s -> %s", parent_id, child_id)

    def del_relation(self, parent_id: int, child_id: int) -> None:
        """Remove the relation if present in either map."""
        _discard(self._parent_to_children, parent_id, child_id)
        _discard(self._child_to_parents, child_id, parent_id)
        logger.debug("Removed relation %s -> %s", parent_id, child_id)

    def creates_loop(self, parent_id: int, child_id: int) -> bool:
        """Whether adding ``parent_id -> child_id`` would close a cycle."""
        if parent_id == child_id:
            return True
        # child already above parent?
        if _reachable(self._child_to_parents, parent_id, child_id):
            return True
        # parent already below child? (mirror map guard)
        return _reachable(self._parent_to_children, child_id, parent_id)

    def get_children(self, entry_id: int) -> list[int]:
        return sorted(self._parent_to_children.get(entry_id, ()))

    def get_parent_ids(self, entry_id: int) -> list[int]:
        return sorted(self._child_to_parents.get(entry_id, ()))

    def child_has_parent(self, child_id: int, parent_id: int) -> bool:
        """Whether ``parent_id`` is anywhere in the ancestry of ``child_id``."""
        return _reachable(self._child_to_parents, child_id, parent_id)

    def has_etymology(self, entry_id: int) -> bool:
        """Whether the entry has parents, children or external parents."""
        return (
            entry_id in self._child_to_parents
            or entry_id in self._parent_to_children
            or self.external.has_external_parents(entry_id)
        )

    def check_all_for_illegal_loops(self) -> list[int]:
        """Ids of every entry that can reach itself through its children.

        Normal editing can't produce these; they come from legacy or
        hand-edited data loaded with checks overridden.
        """
        offending = sorted(_cyclic_nodes(self._parent_to_children))
        if offending:
            logger.warning(
                "Illegal etymology loops found for %d entries", len(offending)
            )
        return offending

    def get_all_roots(self) -> list[RootEntry]:
        """Every parent with children plus every external parent, collated.

        Parents whose entries no longer exist are left out.
        """
        roots = [
            RootEntry(display=self._oracle.resolve(entry_id), entry_id=entry_id)
            for entry_id in sorted(self._parent_to_children)
            if self._oracle.exists(entry_id)
        ]
        roots.extend(
            RootEntry(display=parent.value, external=parent)
            for parent in self.external.all_parents()
        )
        return self.collator.sorted(roots, key=lambda root: root.display)

    def iter_relations(self) -> Iterator[tuple[int, list[int]]]:
        """Yield ``(parent_id, child_ids)`` for every parent, dangling or not."""
        for parent_id in sorted(self._parent_to_children):
            yield parent_id, sorted(self._parent_to_children[parent_id])

    def find_index_mismatches(self) -> list[tuple[int, int]]:
        """Edges ``(parent, child)`` recorded in only one of the two maps."""
        forward = {
            (parent, child)
            for parent, children in self._parent_to_children.items()
            for child in children
        }
        backward = {
            (parent, child)
            for child, parents in self._child_to_parents.items()
            for parent in parents
        }
        return sorted(forward ^ backward)

    @property
    def relation_count(self) -> int:
        return sum(len(c) for c in self._parent_to_children.values())

    # ------------------------------------------------------------------
    # External parents
    # ------------------------------------------------------------------

    def add_external_relation(
        self, parent: ExternalParent, child_id: int
    ) -> None:
        self.external.add_external_relation(parent, child_id)

    def del_external_relation(
        self, parent: ExternalParent, child_id: int
    ) -> None:
        self.external.del_external_relation(parent, child_id)

    def get_external_parents(self, child_id: int) -> list[ExternalParent]:
        return self.external.get_external_parents(child_id)

    def child_has_external_parent(self, child_id: int, unique_id: str) -> bool:
        """Direct membership only; external parents have no ancestry."""
        return self.external.child_has_external_parent(child_id, unique_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelationshipGraph):
            return NotImplemented
        return (
            self._parent_to_children == other._parent_to_children
            and self._child_to_parents == other._child_to_parents
            and self.external == other.external
        )


def _discard(index: dict[int, set[int]], key: int, value: int) -> None:
    """Remove ``value`` from ``index[key]``, dropping the key once empty."""
    values = index.get(key)
    if values is None:
        return
    values.discard(value)
    if not values:
        del index[key]


def _reachable(index: dict[int, set[int]], start: int, target: int) -> bool:
    """Whether ``target`` is reachable from ``start`` in one or more steps.

    Iterative depth-first walk; lineages can be far deeper than the
    interpreter's recursion limit.
    """
    stack = list(index.get(start, ()))
    seen: set[int] = set()
    while stack:
        node = stack.pop()
        if node == target:
            return True
        if node in seen:
            continue
        seen.add(node)
        stack.extend(index.get(node, ()))
    return False


def _cyclic_nodes(index: dict[int, set[int]]) -> set[int]:
    """Every node lying on at least one cycle of ``index``.

    Tarjan's strongly connected components with an explicit work stack: a
    node is cyclic if its component has more than one member or it points
    at itself.
    """
    order: dict[int, int] = {}
    low: dict[int, int] = {}
    stack: list[int] = []
    on_stack: set[int] = set()
    cyclic: set[int] = set()

    def visit(node: int) -> Iterator[int]:
        order[node] = low[node] = len(order)
        stack.append(node)
        on_stack.add(node)
        return iter(index.get(node, ()))

    for root in index:
        if root in order:
            continue
        work = [(root, visit(root))]
        while work:
            node, children = work[-1]
            for child in children:
                if child not in order:
                    work.append((child, visit(child)))
                    break
                if child in on_stack:
                    low[node] = min(low[node], order[child])
            else:
                work.pop()
                if work:
                    caller = work[-1][0]
                    low[caller] = min(low[caller], low[node])
                if low[node] == order[node]:
                    component = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    if len(component) > 1 or node in index.get(node, ()):
                        cyclic.update(component)
    return cyclic
