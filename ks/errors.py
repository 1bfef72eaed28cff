"""Exception types raised by the notes storage and surfaced by the UI layers."""

from typing import Optional


class NotesError(Exception):
    """Base class for every error ks reports to the user."""


class InvalidFilenameError(NotesError):
    """A filename failed validation. User-correctable, never fatal in the UI."""

    def __init__(self, name: str, reason: str, suggestion: Optional[str] = None):
        super().__init__(reason)
        self.name = name
        self.reason = reason
        self.suggestion = suggestion


class NoteNotFoundError(NotesError):
    """The requested note does not exist in the notes directory."""

    def __init__(self, name: str):
        super().__init__(f"Note '{name}' not found.")
        self.name = name


class StorageError(NotesError):
    """A filesystem operation on the notes directory failed."""
