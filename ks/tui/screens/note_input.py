"""Two-stage note form: filename first, then the note body.

Stages run ``FILENAME -> CONTENT -> DONE``. The screen can also start
directly at ``CONTENT`` when the filename is already known. Leaving the
content stage with a non-empty body goes through ``CONFIRM_DISCARD`` so a
stray Esc never throws text away.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.errors import InvalidFilenameError
from ks.filenames import describe_invalid, random_placeholder, suggest_filename, validate_filename
from ks.themes import Theme
from ks.tui.events import Event, KeyEvent, ResizeEvent, Step
from ks.tui.layout import boxed, center_each, centered, document_lines, join_lines, pad
from ks.tui.screens.base import BaseScreen
from ks.tui.textedit import edit
from ks.tui.widgets import hint_line, yes_no_key, yes_no_line

FILENAME_FIELD_WIDTH = 50


class Stage(Enum):
    FILENAME = "filename"
    CONTENT = "content"
    CONFIRM_DISCARD = "confirm-discard"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class NoteDraft:
    filename: str
    content: str


@dataclass(frozen=True)
class NoteInputState:
    stage: Stage
    filename_field: Document = field(default_factory=Document)
    content: Document = field(default_factory=Document)
    filename: str = ""
    error: str = ""
    discard_on_yes: bool = False
    width: int = 0
    height: int = 0


def check_filename(text: str) -> Optional[str]:
    """Validation message for a typed filename, with the Tab fix hint, or None."""
    name = text.strip()
    if not name:
        return "Filename cannot be empty"
    try:
        validate_filename(name)
    except InvalidFilenameError as e:
        return describe_invalid(e, tab_hint=True)
    return None


def apply_suggestion(entry: Document) -> Optional[Document]:
    """Replace the field with the suggested fix, if a fix exists."""
    suggested = suggest_filename(entry.text.strip())
    if not suggested:
        return None
    return Document(suggested, len(suggested))


class NoteInputScreen(BaseScreen[NoteInputState, Optional[NoteDraft]]):
    """
    Collect a filename and note body.

    Args:
        theme: Active palette
        filename: Already-validated filename; skips straight to the content stage
        verb: Heading for the content stage, e.g. "New Note" or "Append to"
    """

    def __init__(self, theme: Theme, filename: Optional[str] = None, verb: str = "New Note"):
        super().__init__(theme)
        self.filename = filename
        self.verb = verb
        self.placeholder = random_placeholder()

    def init(self) -> Step[NoteInputState]:
        if self.filename:
            return Step(NoteInputState(stage=Stage.CONTENT, filename=self.filename))
        return Step(NoteInputState(stage=Stage.FILENAME))

    def update(self, state: NoteInputState, event: Event) -> Step[NoteInputState]:
        if isinstance(event, ResizeEvent):
            return Step(replace(state, width=event.width, height=event.height))
        if not isinstance(event, KeyEvent):
            return Step(state)
        if state.stage is Stage.FILENAME:
            return self._filename_key(state, event)
        if state.stage is Stage.CONTENT:
            return self._content_key(state, event)
        if state.stage is Stage.CONFIRM_DISCARD:
            return self._discard_key(state, event)
        return Step(state)

    def _filename_key(self, state: NoteInputState, event: KeyEvent) -> Step[NoteInputState]:
        key = event.key
        if key in ("esc", "c-c"):
            return Step(replace(state, stage=Stage.CANCELLED), done=True)
        if key == "enter":
            error = check_filename(state.filename_field.text)
            if error:
                return Step(replace(state, error=error))
            return Step(
                replace(state, stage=Stage.CONTENT, filename=state.filename_field.text.strip(), error="")
            )
        if key == "tab":
            if state.error:
                fixed = apply_suggestion(state.filename_field)
                if fixed is not None:
                    return Step(replace(state, filename_field=fixed, error=""))
            return Step(state)

        edited = edit(state.filename_field, event)
        if edited is None:
            return Step(state)
        return Step(replace(state, filename_field=edited))

    def _content_key(self, state: NoteInputState, event: KeyEvent) -> Step[NoteInputState]:
        key = event.key
        if key == "c-s":
            return Step(replace(state, stage=Stage.DONE), done=True)
        if key in ("esc", "c-c"):
            if not state.content.text:
                return Step(replace(state, stage=Stage.CANCELLED), done=True)
            return Step(replace(state, stage=Stage.CONFIRM_DISCARD, discard_on_yes=False))

        edited = edit(state.content, event, multiline=True)
        if edited is None:
            return Step(state)
        return Step(replace(state, content=edited))

    def _discard_key(self, state: NoteInputState, event: KeyEvent) -> Step[NoteInputState]:
        outcome = yes_no_key(state.discard_on_yes, event.key)
        if outcome.answer is True:
            return Step(replace(state, stage=Stage.CANCELLED), done=True)
        if outcome.answer is False:
            return Step(replace(state, stage=Stage.CONTENT, discard_on_yes=False))
        return Step(replace(state, discard_on_yes=outcome.cursor_on_yes))

    def view(self, state: NoteInputState) -> StyleAndTextTuples:
        if state.stage is Stage.FILENAME:
            return self._filename_view(state)
        if state.stage in (Stage.CONTENT, Stage.CONFIRM_DISCARD):
            return self._content_view(state)
        return []

    def _filename_view(self, state: NoteInputState) -> StyleAndTextTuples:
        entry = document_lines(state.filename_field, style="class:accent", placeholder=self.placeholder)
        lines = [[("class:primary", "Enter filename:")], [], pad(entry[0], FILENAME_FIELD_WIDTH)]
        if state.error:
            lines += [[], [("class:error", "✗ " + state.error)]]
        lines += [[], hint_line("Enter to continue • Esc to cancel")]
        return join_lines(centered(center_each(lines, state.width), 0, state.height))

    def _content_view(self, state: NoteInputState) -> StyleAndTextTuples:
        if state.stage is Stage.CONFIRM_DISCARD:
            question = [
                [("class:warning", "Discard this note?")],
                [],
                yes_no_line(state.discard_on_yes),
                [],
                hint_line("←/→: select • Enter: confirm • Esc: keep editing"),
            ]
            box = boxed(center_each(question, 46), 50, len(question) + 2, style="class:warning")
            return join_lines(centered(box, state.width, state.height))

        body_height = max(3, state.height - 6) if state.height else 0
        width = max(10, state.width - 4) if state.width else 0
        body = document_lines(state.content, height=body_height, placeholder="Write your note here...")
        if width:
            body = [pad(line, width) for line in body]
        lines = [[("class:primary", f"{self.verb}: "), ("class:accent", state.filename)], []]
        lines += body
        lines += [[], hint_line("Ctrl+S to save • Esc to cancel")]
        return join_lines(lines)

    def result(self, state: NoteInputState) -> Optional[NoteDraft]:
        if state.stage is not Stage.DONE:
            return None
        return NoteDraft(state.filename, state.content.text)
