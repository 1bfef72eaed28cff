"""Pieces shared by several screens: cursor lists, yes/no buttons, notifications."""

import itertools
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from ks.config import NOTIFICATION_TTL
from ks.tui.layout import Line

_tokens = itertools.count(1)


def next_token() -> int:
    """Unique id for a screen instance or notification, never reused in a process."""
    return next(_tokens)


def clamp(index: int, count: int) -> int:
    """Clamp a cursor into ``[0, count - 1]`` (0 for an empty list)."""
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def move_cursor(index: int, key: str, count: int, page: int = 1) -> Optional[int]:
    """
    Move a list cursor for a navigation key, clamping at both ends.

    Returns:
        The new index, or None if ``key`` is not a navigation key
    """
    moves = {
        "up": -1,
        "k": -1,
        "down": 1,
        "j": 1,
        "pageup": -page,
        "pagedown": page,
    }
    if key in moves:
        return clamp(index + moves[key], count)
    if key in ("home", "g"):
        return 0
    if key in ("end", "G"):
        return clamp(count - 1, count)
    return None


def choice_lines(choices: Sequence[str], cursor: int, marker: Callable[[str], Line] = lambda _: []) -> List[Line]:
    """Menu-style rows: the highlighted choice gets a ``›`` and the selected style."""
    lines = []
    for i, choice in enumerate(choices):
        if i == cursor:
            line: Line = [("class:selected", f"› {choice}")]
        else:
            line = [("class:muted", f"  {choice}")]
        lines.append(line + marker(choice))
    return lines


def yes_no_line(yes: bool) -> Line:
    """The ``No  Yes`` button pair, highlighting whichever the cursor is on."""
    no_style, yes_style = ("class:unselected", "class:selected") if yes else ("class:selected", "class:unselected")
    return [(no_style, " No "), ("", "  "), (yes_style, " Yes ")]


def hint_line(text: str) -> Line:
    return [("class:muted", text)]


@dataclass(frozen=True)
class YesNo:
    """Outcome of feeding a key to an inline yes/no prompt."""

    cursor_on_yes: bool
    answer: Optional[bool] = None


def yes_no_key(cursor_on_yes: bool, key: str) -> YesNo:
    """
    Confirmation protocol shared by the dialog and inline overlays.

    left/h select No, right/l select Yes, y/n answer directly, Enter answers
    with the cursor, q/esc/Ctrl+C answer No. Other keys change nothing.
    """
    if key in ("left", "h"):
        return YesNo(False)
    if key in ("right", "l"):
        return YesNo(True)
    if key in ("y", "Y"):
        return YesNo(cursor_on_yes, True)
    if key in ("n", "N", "q", "esc", "c-c"):
        return YesNo(cursor_on_yes, False)
    if key == "enter":
        return YesNo(cursor_on_yes, cursor_on_yes)
    return YesNo(cursor_on_yes)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A message waiting to be shown by the next screen instance."""

    text: str
    level: NotificationLevel = NotificationLevel.SUCCESS

    @classmethod
    def error(cls, text: str) -> "Notice":
        return cls(text, NotificationLevel.ERROR)


@dataclass(frozen=True)
class Notification:
    """Transient status message shown atop a screen until it expires."""

    text: str
    created_at: float
    token: int
    level: NotificationLevel = NotificationLevel.SUCCESS
    ttl: float = NOTIFICATION_TTL

    @classmethod
    def create(
        cls, text: str, level: NotificationLevel = NotificationLevel.SUCCESS, now: Optional[float] = None
    ) -> "Notification":
        return cls(text, time.monotonic() if now is None else now, next_token(), level)

    def line(self) -> Line:
        if self.level is NotificationLevel.ERROR:
            return [("class:error", "✗ " + self.text)]
        return [("class:success", "✓ " + self.text)]
