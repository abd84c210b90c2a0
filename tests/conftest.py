"""Shared test fixtures for conlang-editor."""

import pytest

from conlang_editor import (
    CollationTable,
    Collator,
    Lexicon,
    RelationshipGraph,
)


@pytest.fixture
def lexicon():
    """Lexicon with five entries, ids 1 through 5."""
    lex = Lexicon()
    for word in ("cha", "ab", "b", "a", "bach"):
        lex.add(word)
    return lex


@pytest.fixture
def table():
    """Alphabet where the digraph 'ch' sorts before 'a' and 'b'."""
    return CollationTable.from_clusters(["ch", "a", "b"])


@pytest.fixture
def collator(table):
    return Collator(table)


@pytest.fixture
def graph(lexicon, collator):
    """Empty relationship graph over the five-entry lexicon."""
    return RelationshipGraph(lexicon, collator)


@pytest.fixture
def chain(graph):
    """Graph with the lineage 1 -> 2 -> 3."""
    graph.add_relation(1, 2)
    graph.add_relation(2, 3)
    return graph
