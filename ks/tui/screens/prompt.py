"""Single-line text prompt (rename target, search keyword)."""

from dataclasses import dataclass, replace
from typing import Callable, Optional

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.themes import Theme
from ks.tui.events import Event, KeyEvent, ResizeEvent, Step
from ks.tui.layout import center_each, centered, document_lines, join_lines, pad
from ks.tui.screens.base import BaseScreen
from ks.tui.screens.note_input import FILENAME_FIELD_WIDTH, apply_suggestion
from ks.tui.textedit import edit
from ks.tui.widgets import hint_line

Validator = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class PromptState:
    field: Document
    error: str = ""
    value: Optional[str] = None
    width: int = 0
    height: int = 0


class TextPromptScreen(BaseScreen[PromptState, Optional[str]]):
    """
    Ask for one line of text.

    Enter on an empty or unchanged value cancels. When ``validator`` returns
    a message the prompt stays open and shows it; with ``suggest_fixes`` Tab
    then swaps in the suggested filename.
    """

    def __init__(
        self,
        theme: Theme,
        label: str,
        initial: str = "",
        placeholder: str = "",
        validator: Optional[Validator] = None,
        suggest_fixes: bool = False,
    ):
        super().__init__(theme)
        self.label = label
        self.initial = initial
        self.placeholder = placeholder
        self.validator = validator
        self.suggest_fixes = suggest_fixes

    def init(self) -> Step[PromptState]:
        return Step(PromptState(field=Document(self.initial, len(self.initial))))

    def update(self, state: PromptState, event: Event) -> Step[PromptState]:
        if isinstance(event, ResizeEvent):
            return Step(replace(state, width=event.width, height=event.height))
        if not isinstance(event, KeyEvent):
            return Step(state)

        key = event.key
        if key in ("esc", "c-c"):
            return Step(replace(state, value=None), done=True)
        if key == "enter":
            text = state.field.text.strip()
            if not text or text == self.initial:
                return Step(replace(state, value=None), done=True)
            error = self.validator(text) if self.validator else None
            if error:
                return Step(replace(state, error=error))
            return Step(replace(state, value=text, error=""), done=True)
        if key == "tab":
            if self.suggest_fixes and state.error:
                fixed = apply_suggestion(state.field)
                if fixed is not None:
                    return Step(replace(state, field=fixed, error=""))
            return Step(state)

        edited = edit(state.field, event)
        if edited is None:
            return Step(state)
        return Step(replace(state, field=edited))

    def view(self, state: PromptState) -> StyleAndTextTuples:
        entry = document_lines(state.field, style="class:accent", placeholder=self.placeholder)
        lines = [[("class:primary", self.label)], [], pad(entry[0], FILENAME_FIELD_WIDTH)]
        if state.error:
            lines += [[], [("class:error", "✗ " + state.error)]]
        lines += [[], hint_line("Enter to confirm • Esc to cancel")]
        return join_lines(centered(center_each(lines, state.width), 0, state.height))

    def result(self, state: PromptState) -> Optional[str]:
        return state.value
