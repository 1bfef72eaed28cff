"""Events fed into screens, effects requested by them, and the screen contract.

A screen never touches the terminal itself. It turns ``(state, event)`` into
a ``Step`` and the runner carries out whatever effect the step asks for.
"""

from dataclasses import dataclass
from typing import Generic, Optional, Protocol, TypeVar, Union

from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.themes import Theme

S = TypeVar("S")
R = TypeVar("R", covariant=True)


@dataclass(frozen=True)
class KeyEvent:
    """One key press.

    ``key`` is a normalised name ("up", "enter", "esc", "tab", "backspace",
    "c-s", "c-c", "paste", ...) or the literal character typed; ``data`` is
    the raw text the terminal sent.
    """

    key: str
    data: str = ""


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class NotificationExpired:
    token: int


@dataclass(frozen=True)
class PreviewLoaded:
    name: str
    text: str = ""
    error: Optional[str] = None


Event = Union[KeyEvent, ResizeEvent, NotificationExpired, PreviewLoaded]


@dataclass(frozen=True)
class ScheduleExpiry:
    """Deliver ``NotificationExpired(token)`` after ``delay`` seconds."""

    token: int
    delay: float


@dataclass(frozen=True)
class LoadPreview:
    """Read a note synchronously and answer with ``PreviewLoaded``."""

    name: str


Effect = Union[ScheduleExpiry, LoadPreview]


@dataclass(frozen=True)
class Step(Generic[S]):
    """Outcome of one transition: the new state, an optional effect, completion."""

    state: S
    effect: Optional[Effect] = None
    done: bool = False


class Screen(Protocol[S, R]):
    """Shape shared by every modal screen."""

    theme: Theme

    def init(self) -> Step[S]:
        ...

    def update(self, state: S, event: Event) -> Step[S]:
        ...

    def view(self, state: S) -> StyleAndTextTuples:
        ...

    def result(self, state: S) -> R:
        ...

    def perform(self, effect: Effect) -> Optional[Event]:
        """Carry out a screen-specific synchronous effect, answering with an event."""
        ...
