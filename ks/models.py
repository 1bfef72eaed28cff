"""Data types shared by storage, screens and the orchestrator."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional


class SortMode(str, Enum):
    """How the note list is ordered. Cycles name -> date -> size -> name."""

    NAME = "name"
    DATE = "date"
    SIZE = "size"

    def next(self) -> "SortMode":
        order = list(SortMode)
        return order[(order.index(self) + 1) % len(order)]

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortMode":
        """Read a sort mode from config; anything unknown means NAME."""
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.NAME


class MatchLocation(str, Enum):
    """Where a search keyword was found."""

    FILENAME = "filename"
    CONTENT = "content"
    BOTH = "filename and content"


@dataclass(frozen=True)
class NoteRecord:
    """Metadata snapshot of one file in the notes directory."""

    name: str
    modified_at: datetime
    size_bytes: int


@dataclass(frozen=True)
class SearchMatch:
    note: NoteRecord
    location: MatchLocation


def sort_notes(notes: Iterable[NoteRecord], mode: SortMode) -> List[NoteRecord]:
    """
    Sort notes by the given mode.

    Names ascend; dates and sizes descend (newest / largest first). Ties are
    broken by name so every mode is a total order.

    Args:
        notes: Records to sort
        mode: The sort mode to apply

    Returns:
        A new sorted list
    """
    if mode is SortMode.DATE:
        return sorted(notes, key=lambda n: (-n.modified_at.timestamp(), n.name))
    if mode is SortMode.SIZE:
        return sorted(notes, key=lambda n: (-n.size_bytes, n.name))
    return sorted(notes, key=lambda n: n.name)
