"""Plain-file note storage.

Notes are the regular files directly inside one directory. Every public
operation validates the filename it is given before touching the disk.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List

from loguru import logger

from ks.errors import NoteNotFoundError, StorageError
from ks.filenames import filename_problem, validate_filename
from ks.models import MatchLocation, NoteRecord, SearchMatch

ConfirmCallback = Callable[[str], bool]

# Undecodable bytes survive a read-then-write round trip as surrogate escapes
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


class NoteStore:
    """Read, write, append, rename, delete and search notes in ``notes_dir``."""

    def __init__(self, notes_dir: Path):
        self.notes_dir = Path(notes_dir)

    def path_for(self, name: str) -> Path:
        return self.notes_dir / validate_filename(name)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def list_notes(self) -> List[NoteRecord]:
        """
        Snapshot every file in the notes directory.

        Returns:
            One NoteRecord per regular file, in directory order

        Raises:
            StorageError: if the directory cannot be read
        """
        try:
            entries = list(self.notes_dir.iterdir())
        except OSError as e:
            raise StorageError(f"Error reading notes directory: {e}") from e

        notes = []
        for entry in entries:
            if filename_problem(entry.name) is not None:
                logger.debug("Skipping {}: not a valid note name", entry.name)
                continue
            try:
                if not entry.is_file():
                    continue
                info = entry.stat()
            except OSError as e:
                # If we can't get info, skip this file
                logger.warning("Skipping {}: {}", entry.name, e)
                continue
            notes.append(
                NoteRecord(
                    name=entry.name,
                    modified_at=datetime.fromtimestamp(info.st_mtime),
                    size_bytes=info.st_size,
                )
            )
        logger.debug("Listed {} notes in {}", len(notes), self.notes_dir)
        return notes

    def read_note(self, name: str) -> str:
        """
        Read a note's text.

        Bytes that are not valid UTF-8 come back as surrogate escapes, so
        writing the text back with ``write_note`` reproduces the file exactly.
        """
        path = self.path_for(name)
        try:
            return path.read_text(encoding=ENCODING, errors=ENCODING_ERRORS)
        except FileNotFoundError as e:
            raise NoteNotFoundError(name) from e
        except OSError as e:
            raise StorageError(f"Error reading file: {e}") from e

    def write_note(self, name: str, content: str) -> Path:
        """Create or overwrite a note with exactly ``content``."""
        path = self.path_for(name)
        try:
            path.write_text(content, encoding=ENCODING, errors=ENCODING_ERRORS)
        except OSError as e:
            raise StorageError(f"Error writing file: {e}") from e
        logger.debug("Wrote {} bytes to {}", len(content), path)
        return path

    def append_note(self, name: str, content: str, *, confirm_create: ConfirmCallback) -> bool:
        """
        Append content to a note, creating it only if the user agrees.

        A newline is inserted first when the existing file is non-empty and
        does not already end in one; a freshly created file gets exactly
        ``content``.

        Args:
            name: Note filename
            content: Text to append
            confirm_create: Asked "File '<name>' does not exist. Create it?"
                when the note is missing

        Returns:
            True if content was written, False if creation was declined
        """
        path = self.path_for(name)
        if not path.exists():
            if not confirm_create(f"File '{name}' does not exist. Create it?"):
                return False
            needs_newline = False
        else:
            needs_newline = self._lacks_trailing_newline(path)

        try:
            with open(path, "a", encoding=ENCODING, errors=ENCODING_ERRORS) as f:
                if needs_newline:
                    f.write("\n")
                f.write(content)
        except OSError as e:
            raise StorageError(f"Error appending to file: {e}") from e
        logger.debug("Appended {} bytes to {}", len(content), path)
        return True

    @staticmethod
    def _lacks_trailing_newline(path: Path) -> bool:
        try:
            with open(path, "rb") as f:
                f.seek(0, 2)
                if f.tell() == 0:
                    return False
                f.seek(-1, 2)
                return f.read(1) != b"\n"
        except OSError:
            # If we can't check, assume we need a newline
            return True

    def delete_note(self, name: str) -> None:
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NoteNotFoundError(name) from e
        except OSError as e:
            raise StorageError(f"Error deleting file: {e}") from e
        logger.debug("Deleted {}", path)

    def rename_note(self, old_name: str, new_name: str) -> Path:
        """
        Rename a note, refusing to overwrite an existing one.

        Raises:
            NoteNotFoundError: if ``old_name`` does not exist
            StorageError: if ``new_name`` is taken or the rename fails
        """
        old_path = self.path_for(old_name)
        new_path = self.path_for(new_name)
        if not old_path.exists():
            raise NoteNotFoundError(old_name)
        if new_path.exists():
            raise StorageError(f"A note named '{new_name}' already exists")
        try:
            old_path.rename(new_path)
        except OSError as e:
            raise StorageError(f"Error renaming file: {e}") from e
        logger.debug("Renamed {} to {}", old_path, new_path)
        return new_path

    def search(self, keyword: str) -> List[SearchMatch]:
        """
        Case-insensitive search of filenames and file contents.

        Files that cannot be read are still matched on their filename.
        """
        needle = keyword.lower()
        results = []
        for note in self.list_notes():
            in_name = needle in note.name.lower()
            try:
                text = (self.notes_dir / note.name).read_text(encoding="utf-8", errors="replace")
                in_content = needle in text.lower()
            except OSError as e:
                logger.warning("Cannot search {}: {}", note.name, e)
                in_content = False

            if in_name and in_content:
                results.append(SearchMatch(note, MatchLocation.BOTH))
            elif in_name:
                results.append(SearchMatch(note, MatchLocation.FILENAME))
            elif in_content:
                results.append(SearchMatch(note, MatchLocation.CONTENT))
        return results
