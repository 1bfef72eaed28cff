"""The modal screens ks shows, one at a time."""

from ks.tui.screens.browser import BrowserAction, BrowserResult, BrowserScreen
from ks.tui.screens.confirm import ConfirmScreen
from ks.tui.screens.editor import EditorResult, EditorScreen
from ks.tui.screens.menu import MenuOption, MenuScreen
from ks.tui.screens.note_input import NoteDraft, NoteInputScreen
from ks.tui.screens.prompt import TextPromptScreen
from ks.tui.screens.theme_picker import ThemePickerScreen

__all__ = [
    "BrowserAction",
    "BrowserResult",
    "BrowserScreen",
    "ConfirmScreen",
    "EditorResult",
    "EditorScreen",
    "MenuOption",
    "MenuScreen",
    "NoteDraft",
    "NoteInputScreen",
    "TextPromptScreen",
    "ThemePickerScreen",
]
