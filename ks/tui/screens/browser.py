"""Note browser: scrollable, filterable note list with a live preview pane.

Modes::

    BROWSING <-> FILTERING          "/" starts a filter, Enter keeps it, Esc drops it
    BROWSING <-> CONFIRMING_DELETE  "d" asks, the yes/no protocol answers
    BROWSING  -> DONE               open / create / rename / delete / quit / cancel

Selection follows the note's name, not its index, so re-sorting or
narrowing the list keeps the same note highlighted whenever it is still
shown. The preview is loaded through the ``LoadPreview`` effect, which the
runner performs synchronously before the next frame is drawn.
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples

from ks.errors import NotesError
from ks.formatting import displayable, format_size, format_time
from ks.models import MatchLocation, NoteRecord, SortMode, sort_notes
from ks.themes import Theme
from ks.tui.events import (
    Effect,
    Event,
    KeyEvent,
    LoadPreview,
    NotificationExpired,
    PreviewLoaded,
    ResizeEvent,
    ScheduleExpiry,
    Step,
)
from ks.tui.layout import Line, boxed, center_each, centered, document_lines, join_lines, side_by_side
from ks.tui.screens.base import BaseScreen
from ks.tui.textedit import edit
from ks.tui.widgets import Notice, Notification, clamp, hint_line, move_cursor, yes_no_key, yes_no_line

DEFAULT_WIDTH, DEFAULT_HEIGHT = 80, 24
ROWS_PER_ITEM = 3
HELP_TEXT = "↑/↓ move • enter open • n new • e rename • d delete • s sort • p preview • / search • q back"


class BrowserAction(str, Enum):
    OPEN = "open"
    CREATE = "create"
    RENAME = "rename"
    DELETE = "delete"
    QUIT = "quit"
    CANCEL = "cancel"


class Mode(Enum):
    BROWSING = "browsing"
    FILTERING = "filtering"
    CONFIRMING_DELETE = "confirming-delete"
    DONE = "done"


@dataclass(frozen=True)
class Preview:
    name: str = ""
    text: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class BrowserState:
    records: Tuple[NoteRecord, ...]
    sort_mode: SortMode
    visible: Tuple[NoteRecord, ...] = ()
    cursor: int = 0
    mode: Mode = Mode.BROWSING
    filter_field: Document = field(default_factory=Document)
    filter_text: str = ""
    show_preview: bool = True
    preview: Preview = Preview()
    confirm_yes: bool = False
    pending_delete: Optional[NoteRecord] = None
    notification: Optional[Notification] = None
    action: Optional[BrowserAction] = None
    selected: Optional[NoteRecord] = None
    width: int = 0
    height: int = 0

    @property
    def current(self) -> Optional[NoteRecord]:
        return self.visible[self.cursor] if self.visible else None


@dataclass(frozen=True)
class BrowserResult:
    action: BrowserAction
    selected: Optional[NoteRecord]
    sort_mode: SortMode
    show_preview: bool = True


def matches_filter(record: NoteRecord, query: str) -> bool:
    return query.lower() in record.name.lower()


def _index_of(records: Sequence[NoteRecord], name: str) -> Optional[int]:
    for i, record in enumerate(records):
        if record.name == name:
            return i
    return None


def refilter(state: BrowserState, records: Optional[Tuple[NoteRecord, ...]] = None, query: Optional[str] = None) -> BrowserState:
    """
    Rebuild the visible list, keeping the highlighted note if it is still shown.

    Args:
        state: Current state
        records: Replacement full record set, already sorted
        query: Replacement filter text

    Returns:
        State with ``visible`` rebuilt and the cursor clamped to it
    """
    records = state.records if records is None else records
    query = state.filter_text if query is None else query
    visible = tuple(r for r in records if matches_filter(r, query))

    cursor = None
    if state.current is not None:
        cursor = _index_of(visible, state.current.name)
    if cursor is None:
        cursor = clamp(state.cursor, len(visible))
    return replace(state, records=records, filter_text=query, visible=visible, cursor=cursor)


def list_title(base: str, mode: SortMode) -> str:
    return f"{base} (sorted by: {mode.value})"


class BrowserScreen(BaseScreen[BrowserState, BrowserResult]):
    """
    Browse notes and pick what to do with them.

    Args:
        theme: Active palette
        records: Notes to show
        sort_mode: Initial sort order
        read_note: Loads a note's text for the preview pane
        notice: Message carried over from the previous action, shown for
            three seconds
        title: List heading, "Notes" or a search description
        locations: For search results, where each note matched
        show_preview: Whether the preview pane starts open
        clock: Monotonic time source for notifications
    """

    def __init__(
        self,
        theme: Theme,
        records: Sequence[NoteRecord],
        sort_mode: SortMode,
        read_note: Callable[[str], str],
        notice: Optional[Notice] = None,
        title: str = "Notes",
        locations: Optional[Mapping[str, MatchLocation]] = None,
        show_preview: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(theme)
        self.records = tuple(records)
        self.sort_mode = sort_mode
        self.read_note = read_note
        self.notice = notice
        self.title = title
        self.locations = dict(locations or {})
        self.show_preview = show_preview
        self.clock = clock

    # -- lifecycle -----------------------------------------------------------

    def init(self) -> Step[BrowserState]:
        records = tuple(sort_notes(self.records, self.sort_mode))
        state = BrowserState(
            records=records,
            sort_mode=self.sort_mode,
            visible=records,
            show_preview=self.show_preview,
        )
        if self.notice is None:
            return Step(state)
        note = Notification.create(self.notice.text, self.notice.level, now=self.clock())
        return Step(replace(state, notification=note), ScheduleExpiry(note.token, note.ttl))

    def perform(self, effect: Effect) -> Optional[Event]:
        if isinstance(effect, LoadPreview):
            try:
                return PreviewLoaded(effect.name, self.read_note(effect.name))
            except NotesError as e:
                return PreviewLoaded(effect.name, error=str(e))
        return super().perform(effect)

    def result(self, state: BrowserState) -> BrowserResult:
        return BrowserResult(
            state.action or BrowserAction.CANCEL, state.selected, state.sort_mode, state.show_preview
        )

    # -- transitions ---------------------------------------------------------

    def update(self, state: BrowserState, event: Event) -> Step[BrowserState]:
        if state.mode is Mode.DONE:
            return Step(state)
        if isinstance(event, ResizeEvent):
            resized = replace(state, width=event.width, height=event.height)
            return self._follow_selection(resized, force=True)
        if isinstance(event, NotificationExpired):
            if state.notification is not None and state.notification.token == event.token:
                return Step(replace(state, notification=None))
            return Step(state)
        if isinstance(event, PreviewLoaded):
            if state.current is not None and state.current.name == event.name:
                return Step(replace(state, preview=Preview(event.name, event.text, event.error)))
            return Step(state)
        if isinstance(event, KeyEvent):
            if state.mode is Mode.CONFIRMING_DELETE:
                return self._confirm_key(state, event)
            if state.mode is Mode.FILTERING:
                return self._filter_key(state, event)
            return self._browse_key(state, event)
        return Step(state)

    def _finish(self, state: BrowserState, action: BrowserAction, selected: Optional[NoteRecord] = None) -> Step[BrowserState]:
        return Step(replace(state, mode=Mode.DONE, action=action, selected=selected), done=True)

    def _follow_selection(self, state: BrowserState, force: bool = False) -> Step[BrowserState]:
        """Ask for the highlighted note's text when the preview shows something else."""
        current = state.current
        if current is None:
            return Step(replace(state, preview=Preview()))
        if state.show_preview and (force or state.preview.name != current.name):
            return Step(state, LoadPreview(current.name))
        return Step(state)

    def _browse_key(self, state: BrowserState, event: KeyEvent) -> Step[BrowserState]:
        key = event.key
        current = state.current

        if key == "c-c":
            return self._finish(state, BrowserAction.QUIT)
        if key == "q":
            return self._finish(state, BrowserAction.CANCEL)
        if key == "esc":
            if state.filter_text:
                return self._follow_selection(refilter(state, query=""))
            return self._finish(state, BrowserAction.CANCEL)
        if key == "n":
            return self._finish(state, BrowserAction.CREATE)
        if key == "enter" and current is not None:
            return self._finish(state, BrowserAction.OPEN, current)
        if key == "e" and current is not None:
            return self._finish(state, BrowserAction.RENAME, current)
        if key == "d" and current is not None:
            return Step(replace(state, mode=Mode.CONFIRMING_DELETE, pending_delete=current, confirm_yes=False))
        if key == "s":
            mode = state.sort_mode.next()
            resorted = tuple(sort_notes(state.records, mode))
            return self._follow_selection(refilter(replace(state, sort_mode=mode), records=resorted))
        if key == "p":
            toggled = replace(state, show_preview=not state.show_preview)
            if state.width > 0 and state.height > 0:
                return self.update(toggled, ResizeEvent(state.width, state.height))
            return Step(toggled)
        if key == "/":
            return Step(
                replace(
                    state,
                    mode=Mode.FILTERING,
                    filter_field=Document(state.filter_text, len(state.filter_text)),
                )
            )
        if key == "x":
            return Step(replace(state, notification=None))

        moved = move_cursor(state.cursor, key, len(state.visible), page=self.per_page(state))
        if moved is None:
            return Step(state)
        return self._follow_selection(replace(state, cursor=moved))

    def _filter_key(self, state: BrowserState, event: KeyEvent) -> Step[BrowserState]:
        key = event.key
        if key == "c-c":
            return self._finish(state, BrowserAction.QUIT)
        if key == "enter":
            return Step(replace(state, mode=Mode.BROWSING))
        if key == "esc":
            cleared = refilter(replace(state, mode=Mode.BROWSING, filter_field=Document()), query="")
            return self._follow_selection(cleared)
        if key in ("up", "down"):
            moved = move_cursor(state.cursor, key, len(state.visible))
            return self._follow_selection(replace(state, cursor=moved))

        edited = edit(state.filter_field, event)
        if edited is None:
            return Step(state)
        narrowed = refilter(replace(state, filter_field=edited), query=edited.text)
        return self._follow_selection(narrowed)

    def _confirm_key(self, state: BrowserState, event: KeyEvent) -> Step[BrowserState]:
        outcome = yes_no_key(state.confirm_yes, event.key)
        if outcome.answer is True:
            return self._finish(state, BrowserAction.DELETE, state.pending_delete)
        if outcome.answer is False:
            return Step(replace(state, mode=Mode.BROWSING, pending_delete=None, confirm_yes=False))
        return Step(replace(state, confirm_yes=outcome.cursor_on_yes))

    # -- rendering -----------------------------------------------------------

    def _size(self, state: BrowserState) -> Tuple[int, int]:
        return state.width or DEFAULT_WIDTH, state.height or DEFAULT_HEIGHT

    def _header_lines(self, state: BrowserState) -> List[Line]:
        lines: List[Line] = [[("class:header", f" {list_title(self.title, state.sort_mode)} ")], []]
        if state.mode is Mode.FILTERING:
            field_line = document_lines(state.filter_field, style="class:accent")[0]
            lines += [[("class:primary", "Search: ")] + field_line, []]
        elif state.filter_text:
            lines += [[("class:muted", f'Filter: "{state.filter_text}" (esc to clear)')], []]
        return lines

    def per_page(self, state: BrowserState) -> int:
        """How many notes fit on one page of the list column."""
        _, height = self._size(state)
        if state.notification is not None:
            height -= 1
        available = height - len(self._header_lines(state)) - 3
        return max(1, available // ROWS_PER_ITEM)

    def describe(self, record: NoteRecord) -> str:
        location = self.locations.get(record.name)
        if location is not None:
            return f"Match in: {location.value}"
        return f"{format_size(record.size_bytes)} • {format_time(record.modified_at)}"

    def _list_lines(self, state: BrowserState) -> List[Line]:
        lines = self._header_lines(state)
        per_page = self.per_page(state)
        page, pages = state.cursor // per_page, max(1, -(-len(state.visible) // per_page))
        start = page * per_page

        for offset, record in enumerate(state.visible[start : start + per_page]):
            if start + offset == state.cursor:
                lines.append([("class:accent", "│ "), ("class:primary", record.name)])
                lines.append([("class:accent", "│ "), ("class:secondary", self.describe(record))])
            else:
                lines.append([("", "  " + record.name)])
                lines.append([("class:muted", "  " + self.describe(record))])
            lines.append([])

        if not state.visible:
            lines.append([("class:muted", "  No notes match.")])
            lines.append([])

        count = len(state.visible)
        status = f"{count} notes" if count == len(state.records) else f"{count} of {len(state.records)} notes"
        if pages > 1:
            status += f" • page {page + 1}/{pages}"
        lines.append([("class:muted", "  " + status)])
        lines.append(hint_line("  " + HELP_TEXT))
        return lines

    def _preview_lines(self, state: BrowserState) -> List[Line]:
        if state.preview.error:
            return [[("class:error", state.preview.error)]]
        return [[("", line.expandtabs(4))] for line in displayable(state.preview.text).splitlines()]

    def _confirm_view(self, state: BrowserState) -> StyleAndTextTuples:
        width, height = self._size(state)
        name = state.pending_delete.name if state.pending_delete else ""
        question = [
            [("class:warning", f"Delete '{name}'?")],
            [],
            yes_no_line(state.confirm_yes),
            [],
            hint_line("←/→: select • Enter: confirm • Esc: cancel"),
        ]
        box = boxed(center_each(question, 46), 50, len(question) + 4, style="class:warning")
        return join_lines(centered(box, width, height))

    def view(self, state: BrowserState) -> StyleAndTextTuples:
        if state.mode is Mode.DONE:
            return []
        if state.mode is Mode.CONFIRMING_DELETE:
            return self._confirm_view(state)

        width, height = self._size(state)
        lines: List[Line] = []
        if state.notification is not None:
            lines.append(state.notification.line())
        body_height = height - len(lines)

        list_lines = self._list_lines(state)
        if state.show_preview:
            list_width = width // 2
            preview = boxed(
                self._preview_lines(state),
                width - list_width - 1,
                body_height,
                style="class:border",
                title="Preview",
            )
            lines += side_by_side(list_lines, preview, list_width)
        else:
            lines += list_lines
        return join_lines(lines[:height])
