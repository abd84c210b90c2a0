"""Tests for custom alphabet collation."""

import pytest

from conlang_editor import CollationTable, Collator, uncovered_characters


def _lexical(a, b):
    return (a > b) - (a < b)


class TestCollationTable:

    def test_insertion_order_defines_rank(self, table):
        assert table.rank("ch") == 0
        assert table.rank("a") == 1
        assert table.rank("b") == 2
        assert table.rank("c") is None
        assert table.longest_cluster_length == 2

    def test_from_alphabet(self):
        table = CollationTable.from_alphabet("a, b ,ch,, d")
        assert table.clusters() == ["a", "b", "ch", "d"]
        assert "ch" in table
        assert len(table) == 4

    def test_readding_keeps_rank(self, table):
        assert table.add("a") == 1
        assert len(table) == 3

    def test_explicit_rank_moves_next_rank(self):
        table = CollationTable()
        table.add("x", rank=5)
        assert table.add("y") == 6

    def test_shared_rank(self):
        table = CollationTable()
        table.add("k")
        table.add("c", rank=0)
        assert table.rank("c") == table.rank("k") == 0
        assert table.clusters() == ["k", "c"]

    def test_empty_cluster_rejected(self):
        with pytest.raises(ValueError):
            CollationTable().add("")

    def test_is_usable(self, table):
        assert table.is_usable
        table.missing_characters = True
        assert not table.is_usable
        assert not CollationTable().is_usable

    def test_uncovered_characters(self, table):
        assert uncovered_characters(table, ["abz", "c h", "bach"]) == {"z"}
        assert uncovered_characters(table, []) == set()


class TestCompare:

    def test_digraph_sorts_before_single_letter(self, collator):
        assert collator.compare("cha", "ab") == -1
        assert collator.compare("ab", "cha") == 1

    def test_equal_and_empty(self, collator):
        assert collator.compare("ab", "ab") == 0
        assert collator.compare("", "") == 0
        assert collator.compare("", "a") == -1
        assert collator.compare("a", "") == 1

    def test_prefix_sorts_first(self, collator):
        assert collator.compare("a", "ab") == -1
        assert collator.compare("ab", "a") == 1

    def test_later_clusters_decide(self, collator):
        assert collator.compare("ba", "bb") == -1
        assert collator.compare("bch", "ba") == -1

    def test_unmatched_prefix_sorts_before(self, collator):
        # "c" alone is not a letter of the alphabet, only "ch" is
        assert collator.compare("c", "a") == -1
        assert collator.compare("a", "c") == 1

    def test_both_unmatched_compare_equal(self, collator):
        assert collator.compare("x", "y") == 0
        assert collator.compare("ax", "ay") == 0

    def test_remainders_cut_at_second_operand_cluster(self):
        table = CollationTable()
        table.add("qu")
        table.add("k", rank=0)
        table.add("a")
        table.add("b")
        collator = Collator(table)
        # "k" and "qu" share a rank; both sides lose two characters
        assert collator.compare("kb", "qua") == -1
        assert collator.compare("qua", "kb") == -1

    def test_empty_table_is_lexical(self):
        collator = Collator()
        words = ["b", "a", "", "ab", "B", "cha", "ch"]
        for a in words:
            for b in words:
                assert collator.compare(a, b) == _lexical(a, b)

    def test_missing_characters_falls_back_to_lexical(self):
        table = CollationTable.from_clusters(["b", "a"])
        collator = Collator(table)
        assert collator.compare("b", "a") == -1
        table.missing_characters = True
        assert collator.compare("b", "a") == 1

    def test_collator_is_callable(self, collator):
        assert collator("cha", "ab") == -1

    def test_long_strings(self, collator):
        assert collator.compare("ab" * 5000 + "a", "ab" * 5000 + "b") == -1


class TestSorting:

    def test_sorted_strings(self, collator):
        words = ["b", "ab", "cha", "a"]
        assert collator.sorted(words) == ["cha", "a", "ab", "b"]

    def test_sorted_with_key(self, collator):
        items = [(1, "b"), (2, "cha"), (3, "a")]
        result = collator.sorted(items, key=lambda item: item[1])
        assert [i for i, _ in result] == [2, 3, 1]

    def test_key_for_list_sort(self, collator):
        words = ["bb", "ba", "chb"]
        words.sort(key=collator.key)
        assert words == ["chb", "ba", "bb"]
