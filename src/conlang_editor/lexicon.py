"""Entry-existence contract and an in-memory lexicon store."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from conlang_editor.exceptions import DuplicateEntityError, EntityNotFoundError


@runtime_checkable
class EntryExistenceOracle(Protocol):
    """What the etymology graph needs to know about dictionary entries."""

    def exists(self, entry_id: int) -> bool:
        """Whether the entry currently exists."""
        ...

    def resolve(self, entry_id: int) -> str:
        """Display string of the entry."""
        ...


class Lexicon:
    """Minimal dictionary-entry store keyed by integer ids.

    Deleting an entry is a soft delete: the entry stops existing but keeps
    its value, so :meth:`restore` can undo it and relations pointing at it
    come back to life.
    """

    def __init__(self) -> None:
        self._values: dict[int, str] = {}
        self._deleted: set[int] = set()
        self._next_id = 1

    def add(self, value: str, entry_id: int | None = None) -> int:
        """Add an entry and return its id."""
        if entry_id is None:
            entry_id = self._next_id
        elif entry_id in self._values:
            raise DuplicateEntityError(f"Entry already exists: {entry_id!r}")
        self._values[entry_id] = value.strip()
        self._next_id = max(self._next_id, entry_id + 1)
        return entry_id

    def delete(self, entry_id: int) -> None:
        if entry_id not in self._values:
            raise EntityNotFoundError(f"Entry not found: {entry_id!r}")
        self._deleted.add(entry_id)

    def restore(self, entry_id: int) -> None:
        if entry_id not in self._values:
            raise EntityNotFoundError(f"Entry not found: {entry_id!r}")
        self._deleted.discard(entry_id)

    def exists(self, entry_id: int) -> bool:
        return entry_id in self._values and entry_id not in self._deleted

    def resolve(self, entry_id: int) -> str:
        """Display string of an entry; deleted entries still resolve."""
        try:
            return self._values[entry_id]
        except KeyError:
            raise EntityNotFoundError(
                f"Entry not found: {entry_id!r}"
            ) from None

    def ids(self) -> list[int]:
        """Ids of existing entries, ascending."""
        return sorted(i for i in self._values if i not in self._deleted)

    def deleted_ids(self) -> list[int]:
        return sorted(self._deleted)

    def values(self) -> list[str]:
        """Display strings of existing entries, in id order."""
        return [self._values[i] for i in self.ids()]

    def __contains__(self, entry_id: object) -> bool:
        return isinstance(entry_id, int) and self.exists(entry_id)

    def __len__(self) -> int:
        return len(self._values) - len(self._deleted)
