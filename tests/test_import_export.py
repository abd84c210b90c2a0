"""Tests for etymology records and YAML lexicon documents."""

import logging

import pytest

from conlang_editor import (
    DataImportError,
    ExternalParent,
    ParseError,
    RelationshipGraph,
    dump_document,
    dump_etymology,
    load_document,
    load_etymology,
)

AQUA = ExternalParent("aqua", "Latin", "water")

DOCUMENT = """
alphabet: "ch, a, b"
entries:
  1: cha
  2: ab
  3: b
  4: a
etymology:
  relations:
    - parent: 3
      children: [1]
    - parent: 2
      children: [4]
  external_parents:
    - child: 1
      parents:
        - value: ba
          language: Old Tongue
          definition: ancestor
"""


class TestDumpEtymology:

    def test_dump_records(self, chain):
        chain.add_external_relation(AQUA, 2)
        data = dump_etymology(chain, chain._oracle)
        assert data["relations"] == [
            {"parent": 1, "children": [2]},
            {"parent": 2, "children": [3]},
        ]
        assert data["external_parents"] == [{
            "child": 2,
            "parents": [
                {"value": "aqua", "language": "Latin", "definition": "water"},
            ],
        }]

    def test_deleted_entries_are_pruned(self, graph, lexicon, caplog):
        graph.add_relation(1, 2)
        graph.add_relation(2, 3)
        graph.add_relation(3, 4)
        graph.add_external_relation(AQUA, 3)
        lexicon.delete(3)

        with caplog.at_level(logging.WARNING):
            data = dump_etymology(graph, lexicon)

        assert data == {
            "relations": [{"parent": 1, "children": [2]}],
            "external_parents": [],
        }
        assert "Dropped 3 relation(s)" in caplog.text
        # the graph itself keeps the dangling relations
        assert graph.get_children(2) == [3]

    def test_round_trip_after_delete(self, graph, lexicon, collator):
        graph.add_relation(1, 2)
        graph.add_relation(2, 3)
        graph.add_relation(3, 4)
        graph.add_relation(1, 5)
        lexicon.delete(3)

        reloaded = RelationshipGraph(lexicon, collator)
        load_etymology(reloaded, dump_etymology(graph, lexicon))

        for entry_id in lexicon.ids():
            assert reloaded.get_children(entry_id) == [
                c for c in graph.get_children(entry_id) if lexicon.exists(c)
            ]
            assert reloaded.get_parent_ids(entry_id) == [
                p for p in graph.get_parent_ids(entry_id) if lexicon.exists(p)
            ]
        assert reloaded.get_children(2) == []
        assert reloaded.get_parent_ids(4) == []


class TestLoadEtymology:

    def test_replay_skips_loop_checks(self, graph):
        load_etymology(graph, {
            "relations": [
                {"parent": 1, "children": [2]},
                {"parent": 2, "children": [1]},
            ],
        })
        assert graph.check_all_for_illegal_loops() == [1, 2]

    def test_external_parents_loaded(self, graph):
        load_etymology(graph, {
            "external_parents": [{
                "child": 4,
                "parents": [{"value": "aqua", "language": "Latin"}],
            }],
        })
        assert graph.get_external_parents(4) == [ExternalParent("aqua", "Latin")]

    def test_empty_data(self, graph):
        load_etymology(graph, {})
        assert graph.relation_count == 0

    @pytest.mark.parametrize("data", [
        {"relations": "nope"},
        {"relations": [{"parent": "x", "children": [1]}]},
        {"relations": [{"parent": 1, "children": 2}]},
        {"relations": [{"parent": True, "children": [2]}]},
        {"external_parents": [{"child": 1, "parents": [{"language": "Latin"}]}]},
        ["not", "a", "mapping"],
    ])
    def test_malformed_data(self, graph, data):
        with pytest.raises(DataImportError):
            load_etymology(graph, data)


class TestLoadDocument:

    def test_load_from_string(self):
        doc = load_document(DOCUMENT)
        assert doc.lexicon.ids() == [1, 2, 3, 4]
        assert doc.table.clusters() == ["ch", "a", "b"]
        assert doc.table.is_usable
        assert doc.graph.get_children(3) == [1]
        assert [r.display for r in doc.graph.get_all_roots()] == ["ab", "b", "ba"]

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text(DOCUMENT, encoding="utf-8")
        doc = load_document(path)
        assert doc.source_file == path
        assert doc.graph.get_children(2) == [4]

    def test_load_from_dict(self):
        doc = load_document({
            "alphabet": ["a", "b"],
            "entries": {1: "ab", 2: "ba"},
            "etymology": {"relations": [{"parent": 1, "children": [2]}]},
        })
        assert doc.graph.get_parent_ids(2) == [1]

    def test_deleted_entries(self):
        doc = load_document({
            "entries": {1: "ab", 2: "ba", 3: "bb"},
            "deleted": [3],
            "etymology": {"relations": [{"parent": 2, "children": [3]}]},
        })
        assert doc.lexicon.ids() == [1, 2]
        assert doc.graph.get_children(2) == [3]

    def test_missing_characters_detected(self):
        doc = load_document({
            "alphabet": "a, b",
            "entries": {1: "abz"},
        })
        assert doc.table.missing_characters
        assert not doc.table.is_usable

    def test_missing_characters_explicit(self):
        doc = load_document({
            "alphabet": "a, b",
            "missing_characters": False,
            "entries": {1: "abz"},
        })
        assert doc.table.is_usable

    def test_shared_ranks(self):
        doc = load_document({
            "alphabet": [
                {"cluster": "k"},
                {"cluster": "c", "rank": 0},
                "a",
            ],
        })
        assert doc.table.rank("c") == doc.table.rank("k") == 0
        assert doc.table.rank("a") == 1

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_document(tmp_path / "missing.yaml")

    @pytest.mark.parametrize("text", [
        "entries: [unclosed",
        "",
        "- a list\n- at the root\n",
        "entries: [1, 2]\n",
        "alphabet: 5\n",
        "entries:\n  1: a\ndeleted: [7]\n",
        "entries:\n  one: a\n",
        "etymology:\n  relations: nope\n",
    ])
    def test_parse_errors(self, text):
        with pytest.raises(ParseError):
            load_document(text)

    def test_yaml_error_line(self):
        with pytest.raises(ParseError) as excinfo:
            load_document("entries:\n  1: a\n  2: [b\n")
        assert excinfo.value.line is not None


class TestDumpDocument:

    def test_round_trip(self, tmp_path):
        doc = load_document(DOCUMENT)
        path = tmp_path / "out.yaml"
        text = dump_document(doc, path)

        assert path.read_text(encoding="utf-8") == text
        reloaded = load_document(path)
        assert reloaded.graph == doc.graph
        assert reloaded.lexicon.values() == doc.lexicon.values()
        assert reloaded.table.clusters() == doc.table.clusters()

    def test_deleted_entries_not_written(self):
        doc = load_document({
            "entries": {1: "ab", 2: "ba", 3: "bb"},
            "deleted": [3],
            "etymology": {"relations": [{"parent": 2, "children": [1, 3]}]},
        })
        reloaded = load_document(dump_document(doc))
        assert reloaded.lexicon.ids() == [1, 2]
        assert reloaded.graph.get_children(2) == [1]

    def test_shared_ranks_round_trip(self):
        doc = load_document({
            "alphabet": ["k", {"cluster": "c", "rank": 0}, "a"],
        })
        reloaded = load_document(dump_document(doc))
        assert reloaded.table.rank("c") == 0
        assert reloaded.table.rank("a") == 1
