"""Yes/No confirmation dialog."""

from dataclasses import dataclass, replace
from typing import Optional

from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.themes import Theme
from ks.tui.events import Event, KeyEvent, Step
from ks.tui.layout import join_lines
from ks.tui.screens.base import BaseScreen
from ks.tui.widgets import hint_line, yes_no_key, yes_no_line


@dataclass(frozen=True)
class ConfirmState:
    cursor_on_yes: bool = False  # Default to "No" for safety
    answer: Optional[bool] = None


class ConfirmScreen(BaseScreen[ConfirmState, bool]):
    """Ask a yes/no question; anything but an explicit yes answers no."""

    def __init__(self, theme: Theme, question: str):
        super().__init__(theme)
        self.question = question

    def init(self) -> Step[ConfirmState]:
        return Step(ConfirmState())

    def update(self, state: ConfirmState, event: Event) -> Step[ConfirmState]:
        if not isinstance(event, KeyEvent):
            return Step(state)
        outcome = yes_no_key(state.cursor_on_yes, event.key)
        state = replace(state, cursor_on_yes=outcome.cursor_on_yes, answer=outcome.answer)
        return Step(state, done=outcome.answer is not None)

    def view(self, state: ConfirmState) -> StyleAndTextTuples:
        if state.answer is not None:
            return []
        return join_lines(
            [
                [("class:warning", self.question)],
                [],
                yes_no_line(state.cursor_on_yes),
                [],
                hint_line("←/→: select • y/n: answer • Enter: confirm • Esc: cancel"),
            ]
        )

    def result(self, state: ConfirmState) -> bool:
        return bool(state.answer)
