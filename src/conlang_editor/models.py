"""Domain model dataclasses for conlang-editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ExternalParent:
    """A free-text ancestor that is not itself a dictionary entry.

    Two external parents with the same value and language are the same
    parent, whatever their definitions say; ``unique_id`` is the key used
    everywhere the registry indexes them.
    """

    value: str
    language: str = ""
    definition: str = ""
    unique_id: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # length prefix keeps ("a:b", "c") and ("a", "b:c") apart
        object.__setattr__(
            self, "unique_id",
            f"{len(self.value)}:{self.value}:{self.language}",
        )

    @property
    def display(self) -> str:
        """Value shown in lists of external parents."""
        if self.language:
            return f"{self.value} ({self.language})"
        return self.value


@dataclass(frozen=True, slots=True)
class RootEntry:
    """Top of an etymology tree: an internal entry or an external parent."""

    display: str
    entry_id: int | None = None
    external: ExternalParent | None = None

    @property
    def is_external(self) -> bool:
        return self.external is not None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """A single validation finding (error or warning)."""

    rule_id: str
    severity: str
    entity_type: str
    entity_id: str
    message: str
    details: dict[str, Any] | None
