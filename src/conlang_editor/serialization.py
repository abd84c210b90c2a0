"""Read and write etymology records and YAML lexicon documents.

Only one direction of each relation is written; the mirror maps are rebuilt
on load by replaying the relations with checks overridden, since the data
was valid when it was written.

A lexicon document looks like::

    alphabet: "a, b, ch, d"
    entries:
      1: cha
      2: ab
    deleted: [3]
    etymology:
      relations:
        - parent: 1
          children: [2]
      external_parents:
        - child: 2
          parents:
            - value: aqua
              language: Latin
              definition: water
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from conlang_editor.collation import Collator, CollationTable, uncovered_characters
from conlang_editor.exceptions import DataImportError, ParseError
from conlang_editor.graph import RelationshipGraph
from conlang_editor.lexicon import EntryExistenceOracle, Lexicon
from conlang_editor.models import ExternalParent

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


# =============================================================================
# Etymology records
# =============================================================================

def dump_etymology(
    graph: RelationshipGraph, oracle: EntryExistenceOracle
) -> dict[str, list[dict[str, Any]]]:
    """Plain-dict records of every relation whose entries still exist."""
    relations: list[dict[str, Any]] = []
    dropped = 0
    for parent_id, child_ids in graph.iter_relations():
        if not oracle.exists(parent_id):
            dropped += len(child_ids)
            continue
        children = [c for c in child_ids if oracle.exists(c)]
        dropped += len(child_ids) - len(children)
        if children:
            relations.append({"parent": parent_id, "children": children})

    externals: list[dict[str, Any]] = []
    for child_id, parents in graph.external.iter_child_links():
        if not oracle.exists(child_id):
            dropped += len(parents)
            continue
        externals.append({
            "child": child_id,
            "parents": [
                {
                    "value": p.value,
                    "language": p.language,
                    "definition": p.definition,
                }
                for p in parents
            ],
        })

    if dropped:
        logger.warning(
            "Dropped %d relation(s) referencing deleted entries", dropped
        )
    return {"relations": relations, "external_parents": externals}


def load_etymology(graph: RelationshipGraph, data: dict[str, Any]) -> None:
    """Replay records produced by :func:`dump_etymology` into ``graph``."""
    if not isinstance(data, dict):
        raise DataImportError("Etymology data must be a mapping")

    for i, record in enumerate(_as_list(data, "relations")):
        if not isinstance(record, dict):
            raise DataImportError(f"Relation #{i + 1} must be a mapping")
        parent_id = _as_id(record.get("parent"), f"Relation #{i + 1} parent")
        children = record.get("children", [])
        if not isinstance(children, list):
            raise DataImportError(
                f"Relation #{i + 1}: field 'children' must be a list"
            )
        for child in children:
            child_id = _as_id(child, f"Relation #{i + 1} child")
            graph.add_relation(parent_id, child_id, override_checks=True)

    for i, record in enumerate(_as_list(data, "external_parents")):
        if not isinstance(record, dict):
            raise DataImportError(f"External parent #{i + 1} must be a mapping")
        child_id = _as_id(record.get("child"), f"External parent #{i + 1} child")
        for parent in record.get("parents") or []:
            graph.add_external_relation(
                _as_external_parent(parent, i), child_id
            )


def _as_list(data: dict[str, Any], name: str) -> list[Any]:
    value = data.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DataImportError(f"Field {name!r} must be a list")
    return value


def _as_id(value: Any, what: str) -> int:
    # bool is an int subclass, and never a valid entry id
    if isinstance(value, bool) or not isinstance(value, int):
        raise DataImportError(f"{what} must be an integer id, got {value!r}")
    return value


def _as_external_parent(data: Any, index: int) -> ExternalParent:
    if not isinstance(data, dict) or not data.get("value"):
        raise DataImportError(
            f"External parent #{index + 1}: each parent needs a 'value'"
        )
    return ExternalParent(
        value=str(data["value"]),
        language=str(data.get("language") or ""),
        definition=str(data.get("definition") or ""),
    )


# =============================================================================
# Lexicon documents
# =============================================================================

@dataclass
class LexiconDocument:
    """A lexicon, its alphabet and its etymology graph loaded together."""

    lexicon: Lexicon
    table: CollationTable
    graph: RelationshipGraph
    source_file: Path | None = field(default=None, compare=False)

    @property
    def collator(self) -> Collator:
        return self.graph.collator


def load_document(source: str | Path | dict[str, Any]) -> LexiconDocument:
    """Load a lexicon document from a YAML file, YAML string or dictionary.

    Raises:
        ParseError: If the YAML can't be parsed or is laid out wrongly
        FileNotFoundError: If the file does not exist
    """
    source_path: Path | None = None

    if isinstance(source, dict):
        data = source
    elif isinstance(source, Path) or _is_file_path(source):
        source_path = Path(source)
        if not source_path.exists():
            raise FileNotFoundError(f"File not found: {source_path}")
        data = _load_yaml(source_path.read_text(encoding=DEFAULT_ENCODING))
    else:
        data = _load_yaml(source)

    document = _parse_document(data)
    document.source_file = source_path
    return document


def dump_document(
    document: LexiconDocument, destination: str | Path | None = None
) -> str:
    """Serialize ``document`` to YAML, writing it to ``destination`` if given.

    Deleted entries and relations referencing them are not written.
    """
    lexicon = document.lexicon
    data = {
        "alphabet": _dump_alphabet(document.table),
        "missing_characters": document.table.missing_characters,
        "entries": {i: lexicon.resolve(i) for i in lexicon.ids()},
        "etymology": dump_etymology(document.graph, lexicon),
    }
    text = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
    if destination is not None:
        Path(destination).write_text(text, encoding=DEFAULT_ENCODING)
        logger.info("Wrote lexicon document to %s", destination)
    return text


def _is_file_path(s: str) -> bool:
    """Check if a string looks like a file path."""
    if "\n" in s:
        return False
    if "/" in s or "\\" in s:
        return True
    return s.endswith((".yaml", ".yml"))


def _load_yaml(text: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line_num = mark.line + 1 if mark else None
        raise ParseError(f"Invalid YAML: {e}", line=line_num) from e

    if data is None:
        raise ParseError("Empty YAML content")
    if not isinstance(data, dict):
        raise ParseError("YAML root must be a mapping (dictionary)")
    return data


def _parse_document(data: dict[str, Any]) -> LexiconDocument:
    table = _parse_alphabet(data.get("alphabet"))

    entries = data.get("entries") or {}
    if not isinstance(entries, dict):
        raise ParseError("Field 'entries' must be a mapping of id to word")
    lexicon = Lexicon()
    for entry_id, value in entries.items():
        try:
            lexicon.add(str(value), _as_id(entry_id, "Entry key"))
        except DataImportError as e:
            raise ParseError(str(e)) from e

    deleted = data.get("deleted") or []
    if not isinstance(deleted, list):
        raise ParseError("Field 'deleted' must be a list of ids")
    for entry_id in deleted:
        if entry_id not in entries:
            raise ParseError(f"Deleted id {entry_id!r} is not an entry")
        lexicon.delete(entry_id)

    missing = data.get("missing_characters")
    if missing is None:
        missing = bool(table) and bool(
            uncovered_characters(table, lexicon.values())
        )
    table.missing_characters = bool(missing)

    graph = RelationshipGraph(lexicon, Collator(table))
    etymology = data.get("etymology")
    if etymology is not None:
        try:
            load_etymology(graph, etymology)
        except DataImportError as e:
            raise ParseError(str(e)) from e

    return LexiconDocument(lexicon=lexicon, table=table, graph=graph)


def _parse_alphabet(alphabet: Any) -> CollationTable:
    if alphabet is None:
        return CollationTable()
    if isinstance(alphabet, str):
        return CollationTable.from_alphabet(alphabet)
    if not isinstance(alphabet, list):
        raise ParseError("Field 'alphabet' must be a string or a list")

    table = CollationTable()
    for i, item in enumerate(alphabet):
        if isinstance(item, str) and item:
            table.add(item)
        elif isinstance(item, dict) and item.get("cluster"):
            rank = item.get("rank")
            if rank is not None and not isinstance(rank, int):
                raise ParseError(f"Alphabet item #{i + 1}: rank must be an integer")
            table.add(str(item["cluster"]), rank)
        else:
            raise ParseError(
                f"Alphabet item #{i + 1} must be a cluster string or a "
                "mapping with 'cluster' and optional 'rank'"
            )
    return table


def _dump_alphabet(table: CollationTable) -> list[Any]:
    clusters = table.clusters()
    if all(table.rank(c) == i for i, c in enumerate(clusters)):
        return clusters
    return [{"cluster": c, "rank": table.rank(c)} for c in clusters]
