"""Full-content editor for an existing note."""

from dataclasses import dataclass, replace

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.themes import Theme
from ks.tui.events import Event, KeyEvent, ResizeEvent, Step
from ks.tui.layout import document_lines, join_lines
from ks.tui.screens.base import BaseScreen
from ks.tui.textedit import edit
from ks.tui.widgets import hint_line


@dataclass(frozen=True)
class EditorResult:
    saved: bool
    content: str


@dataclass(frozen=True)
class EditorState:
    buffer: Document
    saved: bool = False
    width: int = 0
    height: int = 0


class EditorScreen(BaseScreen[EditorState, EditorResult]):
    """Ctrl+S saves the buffer; Esc or Ctrl+C leaves without saving."""

    def __init__(self, theme: Theme, filename: str, content: str):
        super().__init__(theme)
        self.filename = filename
        self.content = content

    def init(self) -> Step[EditorState]:
        return Step(EditorState(buffer=Document(self.content, 0)))

    def update(self, state: EditorState, event: Event) -> Step[EditorState]:
        if isinstance(event, ResizeEvent):
            return Step(replace(state, width=event.width, height=event.height))
        if not isinstance(event, KeyEvent):
            return Step(state)
        if event.key == "c-s":
            return Step(replace(state, saved=True), done=True)
        if event.key in ("esc", "c-c"):
            return Step(state, done=True)
        edited = edit(state.buffer, event, multiline=True)
        if edited is None:
            return Step(state)
        return Step(replace(state, buffer=edited))

    def view(self, state: EditorState) -> StyleAndTextTuples:
        body_height = max(3, state.height - 4) if state.height else 0
        lines = [[("class:primary", "Editing: "), ("class:accent", self.filename)], []]
        lines += document_lines(state.buffer, height=body_height, placeholder="Write your note here...")
        lines += [[], hint_line("Ctrl+S: save • Esc: cancel")]
        return join_lines(lines)

    def result(self, state: EditorState) -> EditorResult:
        if state.saved:
            return EditorResult(True, state.buffer.text)
        return EditorResult(False, self.content)
