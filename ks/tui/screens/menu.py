"""Top-level menu."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.themes import Theme
from ks.tui.events import Event, KeyEvent, ResizeEvent, Step
from ks.tui.layout import center_each, centered, join_lines
from ks.tui.screens.base import BaseScreen
from ks.tui.widgets import choice_lines, clamp, hint_line


class MenuOption(str, Enum):
    NOTES = "Notes"
    NEW_NOTE = "New Note"
    SEARCH = "Search"
    THEMES = "Themes"
    QUIT = "Quit"


@dataclass(frozen=True)
class MenuState:
    cursor: int = 0
    selected: Optional[MenuOption] = None
    width: int = 0
    height: int = 0


class MenuScreen(BaseScreen[MenuState, MenuOption]):
    """Single-column option list; ``message`` is shown under the options."""

    def __init__(self, theme: Theme, message: str = ""):
        super().__init__(theme)
        self.message = message
        self.options = list(MenuOption)

    def init(self) -> Step[MenuState]:
        return Step(MenuState())

    def update(self, state: MenuState, event: Event) -> Step[MenuState]:
        if isinstance(event, ResizeEvent):
            return Step(replace(state, width=event.width, height=event.height))
        if not isinstance(event, KeyEvent):
            return Step(state)

        key = event.key
        if key in ("c-c", "q"):
            return Step(replace(state, selected=MenuOption.QUIT), done=True)
        if key in ("up", "k"):
            return Step(replace(state, cursor=clamp(state.cursor - 1, len(self.options))))
        if key in ("down", "j"):
            return Step(replace(state, cursor=clamp(state.cursor + 1, len(self.options))))
        if key == "enter":
            return Step(replace(state, selected=self.options[state.cursor]), done=True)
        return Step(state)

    def view(self, state: MenuState) -> StyleAndTextTuples:
        lines = [[("class:header", " ks - Keep Simple Notes ")], []]
        lines += choice_lines([o.value for o in self.options], state.cursor)
        if self.message:
            lines += [[], [("class:warning", self.message)]]
        lines += [[], hint_line("↑/↓: navigate • enter: select • q: quit")]
        block = center_each(lines, state.width)
        return join_lines(centered(block, 0, state.height))

    def result(self, state: MenuState) -> MenuOption:
        return state.selected or MenuOption.QUIT
