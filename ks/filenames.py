"""Filename validation for notes.

Every name that reaches a storage operation passes through
``validate_filename`` first, so notes can never escape the notes directory.
"""

import random
import re
from typing import List, Optional

from ks.errors import InvalidFilenameError

_SEPARATORS = re.compile(r"[/\\]")

# Placeholder filename suggestions for creating new notes
FILENAME_PLACEHOLDERS: List[str] = [
    "groceries.txt",
    "homework.txt",
    "bucket-list.txt",
    "ideas.txt",
    "recipes.txt",
    "wishlist.txt",
    "todo.txt",
    "meeting-notes.txt",
    "daily-log.txt",
    "reading-list.txt",
    "goals.txt",
    "quotes.txt",
    "thoughts.txt",
    "workout-plan.txt",
    "travel-plans.txt",
    "gift-ideas.txt",
    "project-notes.txt",
    "brainstorm.txt",
    "reminders.txt",
    "journal.txt",
]


def filename_problem(filename: str) -> Optional[str]:
    """
    Explain why a filename is unsafe.

    Args:
        filename: The candidate filename

    Returns:
        A human-readable reason, or None if the filename is acceptable
    """
    if filename == "":
        return "filename cannot be empty"
    if _SEPARATORS.search(filename):
        return "filename cannot contain path separators (/ or \\)"
    if ".." in filename:
        return "filename cannot contain '..'"
    if filename.startswith("."):
        return "filename cannot start with '.' (hidden files not allowed)"
    return None


def suggest_filename(filename: str) -> str:
    """
    Attempt to fix common filename issues.

    Path segments that are empty or made only of dots are dropped, the rest
    are joined with dashes, leftover ``..`` runs and leading dots are removed.

    Args:
        filename: The rejected filename

    Returns:
        A different filename that passes validation, or "" when no fix exists
    """
    segments = [s for s in _SEPARATORS.split(filename) if s.strip(".")]
    suggested = "-".join(segments)
    while ".." in suggested:
        suggested = suggested.replace("..", "")
    suggested = suggested.lstrip(".")

    if suggested == filename or filename_problem(suggested) is not None:
        return ""
    return suggested


def validate_filename(filename: str) -> str:
    """
    Validate filename is safe.

    Args:
        filename: The filename to validate

    Returns:
        The filename, unchanged

    Raises:
        InvalidFilenameError: if the filename is empty, contains a path
            separator or ``..``, or starts with a dot
    """
    reason = filename_problem(filename)
    if reason is not None:
        raise InvalidFilenameError(filename, reason, suggest_filename(filename) or None)
    return filename


def describe_invalid(error: InvalidFilenameError, *, tab_hint: bool = False) -> str:
    """Render a validation error with its suggested fix, if there is one."""
    if not error.suggestion:
        return error.reason
    if tab_hint:
        return f"{error.reason} - Suggestion: {error.suggestion} (press Tab to use)"
    return f"{error.reason} - Suggestion: {error.suggestion}"


def random_placeholder() -> str:
    return random.choice(FILENAME_PLACEHOLDERS)
