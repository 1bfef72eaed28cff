"""Common base for screens."""

from typing import Generic, Optional

from ks.themes import Theme
from ks.tui.events import Effect, Event, R, S


class BaseScreen(Generic[S, R]):
    """Holds the palette a screen was created with.

    Subclasses keep only immutable configuration on ``self``; everything that
    changes while the screen runs lives in the state value passed to
    ``update``.
    """

    def __init__(self, theme: Theme):
        self.theme = theme

    def perform(self, effect: Effect) -> Optional[Event]:
        raise NotImplementedError(f"{type(self).__name__} does not handle {effect!r}")
