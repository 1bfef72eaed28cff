"""Palette chooser."""

from dataclasses import dataclass, replace
from typing import Optional

from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.themes import Theme, theme_names
from ks.tui.events import Event, KeyEvent, ResizeEvent, Step
from ks.tui.layout import Line, center_each, centered, join_lines
from ks.tui.screens.base import BaseScreen
from ks.tui.widgets import choice_lines, clamp, hint_line


@dataclass(frozen=True)
class ThemePickerState:
    cursor: int
    selected: Optional[str] = None
    cancelled: bool = False
    width: int = 0
    height: int = 0


class ThemePickerScreen(BaseScreen[ThemePickerState, Optional[str]]):
    """Lists every palette, starting on and marking the one in use."""

    def __init__(self, theme: Theme):
        super().__init__(theme)
        self.names = theme_names()

    def init(self) -> Step[ThemePickerState]:
        cursor = self.names.index(self.theme.name) if self.theme.name in self.names else 0
        return Step(ThemePickerState(cursor=cursor))

    def update(self, state: ThemePickerState, event: Event) -> Step[ThemePickerState]:
        if isinstance(event, ResizeEvent):
            return Step(replace(state, width=event.width, height=event.height))
        if not isinstance(event, KeyEvent):
            return Step(state)

        key = event.key
        if key in ("c-c", "q", "esc"):
            return Step(replace(state, cancelled=True), done=True)
        if key in ("up", "k"):
            return Step(replace(state, cursor=clamp(state.cursor - 1, len(self.names))))
        if key in ("down", "j"):
            return Step(replace(state, cursor=clamp(state.cursor + 1, len(self.names))))
        if key == "enter":
            return Step(replace(state, selected=self.names[state.cursor]), done=True)
        return Step(state)

    def _current_marker(self, name: str) -> Line:
        if name == self.theme.name:
            return [("", " "), ("class:success", "(current)")]
        return []

    def view(self, state: ThemePickerState) -> StyleAndTextTuples:
        lines = [
            [("class:header", " Choose Theme ")],
            [],
            [("class:secondary", "Select a theme to change the application's color scheme")],
            [],
        ]
        lines += choice_lines(self.names, state.cursor, self._current_marker)
        lines += [[], hint_line("↑/↓: navigate • enter: select • q: cancel")]
        return join_lines(centered(center_each(lines, state.width), 0, state.height))

    def result(self, state: ThemePickerState) -> Optional[str]:
        return state.selected
