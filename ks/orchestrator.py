"""The interactive shell: a menu loop wrapped around a browse loop.

Every screen runs to completion in its own Application; this module looks
at what each one returned and decides which screen comes next, the same
way a post-TUI action dispatch loop does.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from ks.config import save_config
from ks.errors import NotesError
from ks.models import MatchLocation, NoteRecord, SortMode
from ks.storage import NoteStore
from ks.themes import Theme, get_theme
from ks.tui import run_screen
from ks.tui.events import Screen
from ks.tui.screens import (
    BrowserAction,
    BrowserResult,
    BrowserScreen,
    ConfirmScreen,
    EditorScreen,
    MenuOption,
    MenuScreen,
    NoteInputScreen,
    TextPromptScreen,
    ThemePickerScreen,
)
from ks.tui.screens.note_input import check_filename
from ks.tui.widgets import Notice

Launcher = Callable[[Screen], Any]
Listing = Tuple[List[NoteRecord], Dict[str, MatchLocation]]

NO_NOTES = "No notes found."


class NoteShell:
    """
    Interactive session over one notes directory.

    Args:
        store: Note storage
        config: Loaded configuration; the theme choice is written back to it
        theme: Palette handed to every screen
        launch: Runs a screen and returns its result
    """

    def __init__(self, store: NoteStore, config: Dict[str, Any], theme: Theme, launch: Launcher = run_screen):
        self.store = store
        self.config = config
        self.theme = theme
        self.launch = launch
        self.sort_mode = SortMode.parse(config.get("sort"))
        self.show_preview = bool(config.get("show_preview", True))

    def run(self) -> None:
        """Show the menu until the user quits."""
        message = ""
        while True:
            choice = self.launch(MenuScreen(self.theme, message=message))
            message = ""
            logger.debug("Menu choice: {}", choice)

            if choice is MenuOption.NOTES:
                message = self.browse()
            elif choice is MenuOption.NEW_NOTE:
                try:
                    notice = self.create_note()
                except NotesError as e:
                    logger.error("create failed: {}", e)
                    message = str(e)
                    continue
                if notice is not None:
                    message = self.browse(notice)
            elif choice is MenuOption.SEARCH:
                keyword = self.launch(TextPromptScreen(self.theme, "Search notes:", placeholder="keyword"))
                if keyword:
                    message = self.search(keyword)
            elif choice is MenuOption.THEMES:
                self.pick_theme()
            else:
                logger.info("Goodbye!")
                return

    def browse(self, notice: Optional[Notice] = None) -> str:
        """
        Browse every note until the browser is closed.

        Returns:
            A message for the menu, empty if there is nothing to report
        """
        return self._browse_loop(self._list_notes, "Notes", NO_NOTES, notice)

    def search(self, keyword: str, notice: Optional[Notice] = None) -> str:
        """Browse the notes whose name or content contains ``keyword``."""
        return self._browse_loop(
            lambda: self._search_notes(keyword),
            f"Search Results for: {keyword}",
            f"No matches found for '{keyword}'.",
            notice,
        )

    def _list_notes(self) -> Listing:
        return self.store.list_notes(), {}

    def _search_notes(self, keyword: str) -> Listing:
        matches = self.store.search(keyword)
        return [m.note for m in matches], {m.note.name: m.location for m in matches}

    def _browse_loop(
        self, fetch: Callable[[], Listing], title: str, empty_message: str, notice: Optional[Notice]
    ) -> str:
        while True:
            try:
                records, locations = fetch()
            except NotesError as e:
                logger.error("Cannot list notes: {}", e)
                return str(e)
            if not records:
                if notice is not None:
                    return f"{notice.text}. {empty_message}"
                return empty_message

            outcome: BrowserResult = self.launch(
                BrowserScreen(
                    self.theme,
                    records,
                    self.sort_mode,
                    self.store.read_note,
                    notice=notice,
                    title=title,
                    locations=locations,
                    show_preview=self.show_preview,
                )
            )
            self.sort_mode = outcome.sort_mode
            self.show_preview = outcome.show_preview

            if outcome.action in (BrowserAction.QUIT, BrowserAction.CANCEL):
                return ""
            notice = self.handle_action(outcome)

    def handle_action(self, outcome: BrowserResult) -> Optional[Notice]:
        """
        Carry out what the browser asked for.

        Failures are logged and turned into an error notice so the browse
        loop can show them and carry on.

        Returns:
            Notice for the next browser instance, or None if nothing happened
        """
        action, selected = outcome.action, outcome.selected
        try:
            if action is BrowserAction.CREATE:
                return self.create_note()
            if selected is None:
                return None
            if action is BrowserAction.OPEN:
                return self.edit_note(selected.name)
            if action is BrowserAction.RENAME:
                return self.rename_note(selected.name)
            if action is BrowserAction.DELETE:
                self.store.delete_note(selected.name)
                return Notice(f"Deleted '{selected.name}'")
        except NotesError as e:
            logger.error("{} failed: {}", action.value, e)
            return Notice.error(str(e))
        return None

    def edit_note(self, name: str) -> Optional[Notice]:
        content = self.store.read_note(name)
        result = self.launch(EditorScreen(self.theme, name, content))
        if not result.saved:
            return None
        self.store.write_note(name, result.content)
        return Notice(f"Saved changes to '{name}'")

    def create_note(self) -> Optional[Notice]:
        """Ask for a new note, confirming before an existing one is overwritten."""
        draft = self.launch(NoteInputScreen(self.theme))
        if draft is None:
            return None
        if self.store.exists(draft.filename):
            question = f"File '{draft.filename}' already exists. Overwrite it?"
            if not self.launch(ConfirmScreen(self.theme, question)):
                return None
        self.store.write_note(draft.filename, draft.content)
        return Notice(f"Created '{draft.filename}'")

    def rename_note(self, old_name: str) -> Optional[Notice]:
        new_name = self.launch(
            TextPromptScreen(
                self.theme,
                "New filename:",
                initial=old_name,
                validator=check_filename,
                suggest_fixes=True,
            )
        )
        if new_name is None:
            return None
        self.store.rename_note(old_name, new_name)
        return Notice(f"Renamed to '{new_name}'")

    def pick_theme(self) -> None:
        """Switch palettes and remember the choice for the next session."""
        name = self.launch(ThemePickerScreen(self.theme))
        if not name or name == self.theme.name:
            return
        self.theme = get_theme(name)
        self.config["theme"] = name
        save_config(self.config)
        logger.info("Theme set to {}", name)
