"""Validation engine for etymology graphs and alphabets."""

from __future__ import annotations

from collections.abc import Iterable

from conlang_editor.collation import CollationTable, uncovered_characters
from conlang_editor.graph import RelationshipGraph
from conlang_editor.lexicon import EntryExistenceOracle
from conlang_editor.models import ValidationResult

ERROR = "ERROR"
WARNING = "WARNING"


def validate_etymology(
    graph: RelationshipGraph,
    oracle: EntryExistenceOracle,
    *,
    table: CollationTable | None = None,
    words: Iterable[str] | None = None,
) -> list[ValidationResult]:
    """Run all validation rules.

    The alphabet rule only runs when both ``table`` and ``words`` are given.
    """
    results: list[ValidationResult] = []
    results.extend(_val_ety_001(graph))
    results.extend(_val_ety_002(graph, oracle))
    results.extend(_val_ety_003(graph))
    if table is not None and words is not None:
        results.extend(_val_col_001(table, words))
    return results


def _val_ety_001(graph: RelationshipGraph) -> list[ValidationResult]:
    """Entries that are their own etymological ancestor."""
    return [
        ValidationResult(
            rule_id="VAL-ETY-001",
            severity=ERROR,
            entity_type="entry",
            entity_id=str(entry_id),
            message="Entry appears in its own etymological lineage",
            details={"children": graph.get_children(entry_id)},
        )
        for entry_id in graph.check_all_for_illegal_loops()
    ]


def _val_ety_002(
    graph: RelationshipGraph, oracle: EntryExistenceOracle
) -> list[ValidationResult]:
    """Relations pointing at entries that no longer exist."""
    results: list[ValidationResult] = []
    for parent_id, child_ids in graph.iter_relations():
        for child_id in child_ids:
            missing = [
                i for i in (parent_id, child_id) if not oracle.exists(i)
            ]
            if missing:
                results.append(ValidationResult(
                    rule_id="VAL-ETY-002",
                    severity=WARNING,
                    entity_type="relation",
                    entity_id=f"{parent_id}->{child_id}",
                    message="Relation references a deleted entry",
                    details={"missing": missing},
                ))
    return results


def _val_ety_003(graph: RelationshipGraph) -> list[ValidationResult]:
    """Edges recorded in only one direction."""
    return [
        ValidationResult(
            rule_id="VAL-ETY-003",
            severity=ERROR,
            entity_type="relation",
            entity_id=f"{parent_id}->{child_id}",
            message="Relation is missing from one of the relation indices",
            details=None,
        )
        for parent_id, child_id in graph.find_index_mismatches()
    ]


def _val_col_001(
    table: CollationTable, words: Iterable[str]
) -> list[ValidationResult]:
    """Characters in use that the alphabet doesn't cover."""
    if not len(table):
        return []
    missing = uncovered_characters(table, words)
    if not missing:
        return []
    return [ValidationResult(
        rule_id="VAL-COL-001",
        severity=WARNING,
        entity_type="alphabet",
        entity_id="alphabet",
        message=(
            "Alphabet does not cover all characters in use; "
            "falling back to plain string ordering"
        ),
        details={"characters": sorted(missing)},
    )]
