"""Custom alphabetical ordering over user-defined grapheme clusters."""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

_T = TypeVar("_T")

# Separator used by the editor's alphabet order property ("a, b, ch, d")
ALPHABET_SEPARATOR = ","

BEFORE = -1
EQUAL = 0
AFTER = 1


class CollationTable:
    """Ordered mapping of grapheme clusters to collation ranks.

    Ranks default to insertion order. An explicit rank may be shared by
    several clusters, which lets an alphabet treat alternative spellings
    of a letter as the same letter.
    """

    def __init__(self) -> None:
        self._ranks: dict[str, int] = {}
        self._longest = 0
        self._next_rank = 0
        self.missing_characters = False

    @classmethod
    def from_clusters(cls, clusters: Iterable[str]) -> CollationTable:
        """Build a table ranking ``clusters`` in the order given."""
        table = cls()
        for cluster in clusters:
            table.add(cluster)
        return table

    @classmethod
    def from_alphabet(
        cls, alphabet: str, separator: str = ALPHABET_SEPARATOR
    ) -> CollationTable:
        """Build a table from a separated alphabet string such as ``"a, ch, b"``.

        Blank items are skipped and surrounding whitespace is stripped.
        """
        return cls.from_clusters(
            item.strip() for item in alphabet.split(separator) if item.strip()
        )

    def add(self, cluster: str, rank: int | None = None) -> int:
        """Add ``cluster`` to the table and return its rank.

        Re-adding a cluster without a rank keeps the existing rank.
        """
        if not cluster:
            raise ValueError("Collation clusters must be non-empty")
        if rank is None:
            if cluster in self._ranks:
                return self._ranks[cluster]
            rank = self._next_rank
        self._ranks[cluster] = rank
        self._next_rank = max(self._next_rank, rank + 1)
        self._longest = max(self._longest, len(cluster))
        return rank

    def rank(self, cluster: str) -> int | None:
        """Rank of ``cluster``, or None if it is not in the table."""
        return self._ranks.get(cluster)

    @property
    def longest_cluster_length(self) -> int:
        return self._longest

    @property
    def is_usable(self) -> bool:
        """False when empty or flagged as not covering the characters in use."""
        return bool(self._ranks) and not self.missing_characters

    def clusters(self) -> list[str]:
        """Clusters in rank order (insertion order among equal ranks)."""
        return sorted(self._ranks, key=self._ranks.__getitem__)

    def characters(self) -> set[str]:
        """Every single character appearing in any cluster."""
        return {ch for cluster in self._ranks for ch in cluster}

    def __contains__(self, cluster: object) -> bool:
        return cluster in self._ranks

    def __len__(self) -> int:
        return len(self._ranks)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ranks)

    def __repr__(self) -> str:
        return (
            f"CollationTable({self.clusters()!r}, "
            f"missing_characters={self.missing_characters!r})"
        )


class Collator:
    """Comparator ordering strings by a :class:`CollationTable`.

    The ordering is not guaranteed to be a strict weak ordering: two
    different strings that share no prefix with the table compare equal.
    Sorting with :meth:`key` is still deterministic because Python's sort
    is stable.
    """

    def __init__(self, table: CollationTable | None = None) -> None:
        self.table = table if table is not None else CollationTable()

    def compare(self, a: str, b: str) -> int:
        """Return -1, 0 or 1 as ``a`` sorts before, level with or after ``b``."""
        table = self.table
        if not table.is_usable:
            return (a > b) - (a < b)

        longest = table.longest_cluster_length
        while True:
            if a == b:
                return EQUAL
            if not a:
                return BEFORE
            if not b:
                return AFTER

            rank_a, _ = _leading_cluster(table, a, longest)
            rank_b, len_b = _leading_cluster(table, b, longest)

            if rank_a is None and rank_b is None:
                return EQUAL
            if rank_a is None:
                return BEFORE
            if rank_b is None:
                return AFTER
            if rank_b > rank_a:
                return BEFORE
            if rank_b < rank_a:
                return AFTER

            # Same letter on both sides: both remainders are cut at the
            # length of b's cluster, even when a matched a different
            # spelling of that rank.
            a = a[len_b:]
            b = b[len_b:]

    __call__ = compare

    @property
    def key(self) -> Callable[[str], Any]:
        """Sort key for ``sorted``/``list.sort`` over plain strings."""
        return functools.cmp_to_key(self.compare)

    def sorted(
        self,
        items: Iterable[_T],
        key: Callable[[_T], str] | None = None,
    ) -> list[_T]:
        """Return ``items`` in collation order, comparing ``key(item)``."""
        if key is None:
            return sorted(items, key=self.key)  # type: ignore[arg-type]
        cmp_key = self.key
        return sorted(items, key=lambda item: cmp_key(key(item)))


def _leading_cluster(
    table: CollationTable, text: str, longest: int
) -> tuple[int | None, int]:
    """Longest cluster of ``table`` prefixing ``text``: (rank, length)."""
    for length in range(min(len(text), longest), 0, -1):
        rank = table.rank(text[:length])
        if rank is not None:
            return rank, length
    return None, 0


def uncovered_characters(
    table: CollationTable, words: Iterable[str]
) -> set[str]:
    """Characters used in ``words`` that appear in no cluster of ``table``.

    Hosts use this to maintain ``table.missing_characters``; whitespace is
    ignored.
    """
    known = table.characters()
    return {
        ch for word in words for ch in word
        if not ch.isspace() and ch not in known
    }
