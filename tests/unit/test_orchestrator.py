"""Tests for the menu loop and browse loop, driven by a scripted launcher."""

import json
from pathlib import Path

from ks.config import load_config
from ks.models import MatchLocation, SortMode
from ks.orchestrator import NO_NOTES, NoteShell
from ks.storage import NoteStore
from ks.tui.screens import (
    BrowserAction,
    BrowserResult,
    BrowserScreen,
    ConfirmScreen,
    EditorResult,
    EditorScreen,
    MenuOption,
    MenuScreen,
    NoteDraft,
    NoteInputScreen,
    TextPromptScreen,
    ThemePickerScreen,
)
from ks.tui.widgets import NotificationLevel
from tests.unit.fakes import FakeLauncher, make_record

TODO = make_record("todo.txt")


def shell_for(store: NoteStore, theme, launcher: FakeLauncher) -> NoteShell:
    return NoteShell(store, load_config(), theme, launch=launcher)


def closed(sort_mode: SortMode = SortMode.NAME) -> BrowserResult:
    return BrowserResult(BrowserAction.CANCEL, None, sort_mode)


def browsers(launcher: FakeLauncher):
    return launcher.launched(BrowserScreen)


class TestMenuLoop:
    def test_quit(self, store, theme) -> None:
        launcher = FakeLauncher((MenuScreen, MenuOption.QUIT))
        shell_for(store, theme, launcher).run()
        assert launcher.finished

    def test_empty_directory_reports_back_to_menu(self, store, theme) -> None:
        launcher = FakeLauncher((MenuScreen, MenuOption.NOTES), (MenuScreen, MenuOption.QUIT))
        shell_for(store, theme, launcher).run()
        assert launcher.finished
        first, second = launcher.launched(MenuScreen)
        assert first.message == ""
        assert second.message == NO_NOTES

    def test_new_note_from_menu_opens_browser_with_notice(self, store, theme) -> None:
        launcher = FakeLauncher(
            (MenuScreen, MenuOption.NEW_NOTE),
            (NoteInputScreen, NoteDraft("idea.txt", "sail")),
            (BrowserScreen, closed()),
            (MenuScreen, MenuOption.QUIT),
        )
        shell_for(store, theme, launcher).run()
        assert store.read_note("idea.txt") == "sail"
        assert browsers(launcher)[0].notice.text == "Created 'idea.txt'"

    def test_failed_create_from_menu_keeps_session(self, store, theme) -> None:
        (store.notes_dir / "dir.txt").mkdir()
        launcher = FakeLauncher(
            (MenuScreen, MenuOption.NEW_NOTE),
            (NoteInputScreen, NoteDraft("dir.txt", "body")),
            (MenuScreen, MenuOption.QUIT),
        )
        shell_for(store, theme, launcher).run()
        assert launcher.finished
        assert launcher.launched(MenuScreen)[1].message.startswith("Error writing file")
        assert browsers(launcher) == []

    def test_search_prompt_cancelled(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (MenuScreen, MenuOption.SEARCH),
            (TextPromptScreen, None),
            (MenuScreen, MenuOption.QUIT),
        )
        shell_for(sample_store, theme, launcher).run()
        assert launcher.finished
        assert browsers(launcher) == []

    def test_search_from_menu(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (MenuScreen, MenuOption.SEARCH),
            (TextPromptScreen, "boat"),
            (BrowserScreen, closed()),
            (MenuScreen, MenuOption.QUIT),
        )
        shell_for(sample_store, theme, launcher).run()
        (screen,) = browsers(launcher)
        assert screen.title == "Search Results for: boat"
        assert [r.name for r in screen.records] == ["ideas.md"]
        assert screen.locations == {"ideas.md": MatchLocation.CONTENT}

    def test_search_without_matches_reports_to_menu(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (MenuScreen, MenuOption.SEARCH),
            (TextPromptScreen, "zebra"),
            (MenuScreen, MenuOption.QUIT),
        )
        shell_for(sample_store, theme, launcher).run()
        assert launcher.launched(MenuScreen)[1].message == "No matches found for 'zebra'."


class TestBrowseLoop:
    def test_open_and_save_carries_notice_and_sort_mode(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.OPEN, TODO, SortMode.DATE)),
            (EditorScreen, EditorResult(True, "rewritten")),
            (BrowserScreen, closed(SortMode.DATE)),
        )
        shell = shell_for(sample_store, theme, launcher)
        assert shell.browse() == ""

        assert sample_store.read_note("todo.txt") == "rewritten"
        first, second = browsers(launcher)
        assert first.notice is None
        assert second.notice.text == "Saved changes to 'todo.txt'"
        assert second.sort_mode is SortMode.DATE
        assert shell.sort_mode is SortMode.DATE
        editor = launcher.launched(EditorScreen)[0]
        assert editor.content == "call mom\nwater plants\n"

    def test_unsaved_edit_has_no_notice(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.OPEN, TODO, SortMode.NAME)),
            (EditorScreen, EditorResult(False, "call mom\nwater plants\n")),
            (BrowserScreen, closed()),
        )
        shell_for(sample_store, theme, launcher).browse()
        assert browsers(launcher)[1].notice is None

    def test_create_refuses_silent_overwrite(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.CREATE, None, SortMode.NAME)),
            (NoteInputScreen, NoteDraft("todo.txt", "replaced")),
            (ConfirmScreen, False),
            (BrowserScreen, closed()),
        )
        shell_for(sample_store, theme, launcher).browse()
        assert sample_store.read_note("todo.txt") == "call mom\nwater plants\n"
        assert browsers(launcher)[1].notice is None
        assert "already exists" in launcher.launched(ConfirmScreen)[0].question

    def test_create_overwrite_confirmed(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.CREATE, None, SortMode.NAME)),
            (NoteInputScreen, NoteDraft("todo.txt", "replaced")),
            (ConfirmScreen, True),
            (BrowserScreen, closed()),
        )
        shell_for(sample_store, theme, launcher).browse()
        assert sample_store.read_note("todo.txt") == "replaced"

    def test_rename_rebuilds_list(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.RENAME, TODO, SortMode.NAME)),
            (TextPromptScreen, "tasks.txt"),
            (BrowserScreen, closed()),
        )
        shell_for(sample_store, theme, launcher).browse()

        prompt = launcher.launched(TextPromptScreen)[0]
        assert prompt.initial == "todo.txt"
        second = browsers(launcher)[1]
        assert second.notice.text == "Renamed to 'tasks.txt'"
        names = {r.name for r in second.records}
        assert "tasks.txt" in names
        assert "todo.txt" not in names

    def test_rename_onto_existing_note_shows_error(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.RENAME, TODO, SortMode.NAME)),
            (TextPromptScreen, "ideas.md"),
            (BrowserScreen, closed()),
        )
        shell_for(sample_store, theme, launcher).browse()
        notice = browsers(launcher)[1].notice
        assert notice.level is NotificationLevel.ERROR
        assert "already exists" in notice.text
        assert sample_store.read_note("ideas.md") == "build a boat"

    def test_delete_rebuilds_list(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.DELETE, TODO, SortMode.NAME)),
            (BrowserScreen, closed()),
        )
        shell_for(sample_store, theme, launcher).browse()
        second = browsers(launcher)[1]
        assert second.notice.text == "Deleted 'todo.txt'"
        assert {r.name for r in second.records} == {"groceries.txt", "ideas.md"}

    def test_deleting_last_note_reports_deletion_and_empty_list(self, store, theme) -> None:
        store.write_note("only.txt", "x")
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.DELETE, make_record("only.txt"), SortMode.NAME)),
        )
        assert shell_for(store, theme, launcher).browse() == f"Deleted 'only.txt'. {NO_NOTES}"
        assert launcher.finished

    def test_failed_action_keeps_looping(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.OPEN, make_record("gone.txt"), SortMode.NAME)),
            (BrowserScreen, BrowserResult(BrowserAction.QUIT, None, SortMode.NAME)),
        )
        assert shell_for(sample_store, theme, launcher).browse() == ""
        notice = browsers(launcher)[1].notice
        assert notice.level is NotificationLevel.ERROR
        assert notice.text == "Note 'gone.txt' not found."

    def test_preview_state_is_remembered(self, sample_store, theme) -> None:
        launcher = FakeLauncher(
            (BrowserScreen, BrowserResult(BrowserAction.DELETE, TODO, SortMode.NAME, show_preview=False)),
            (BrowserScreen, closed()),
        )
        shell_for(sample_store, theme, launcher).browse()
        assert browsers(launcher)[1].show_preview is False


def test_pick_theme_persists_choice(store, theme, _isolated_config: Path) -> None:
    launcher = FakeLauncher((ThemePickerScreen, "Forest"))
    shell = shell_for(store, theme, launcher)
    shell.pick_theme()

    assert shell.theme.name == "Forest"
    assert json.loads(_isolated_config.read_text())["theme"] == "Forest"


def test_pick_theme_cancelled_writes_nothing(store, theme, _isolated_config: Path) -> None:
    launcher = FakeLauncher((ThemePickerScreen, None))
    shell = shell_for(store, theme, launcher)
    shell.pick_theme()
    assert shell.theme is theme
    assert not _isolated_config.exists()


def test_config_seeds_sort_and_preview(store, theme, _isolated_config: Path) -> None:
    _isolated_config.parent.mkdir(parents=True)
    _isolated_config.write_text(json.dumps({"sort": "size", "show_preview": False}))
    shell = shell_for(store, theme, FakeLauncher())
    assert shell.sort_mode is SortMode.SIZE
    assert shell.show_preview is False
