"""Tests for the two-stage note input screen."""

import pytest

from ks.tui.screens import NoteDraft, NoteInputScreen
from ks.tui.screens.note_input import Stage
from tests.unit.fakes import ScreenDriver


def test_filename_then_content_then_save(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme), size=(80, 24))
    driver.type("list.txt").keys("enter")
    assert driver.state.stage is Stage.CONTENT

    driver.type("eggs").keys("enter").type("milk").keys("c-s")
    assert driver.done
    assert driver.result == NoteDraft("list.txt", "eggs\nmilk")


def test_invalid_filename_stays_on_filename_stage(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme)).type("../evil").keys("enter")
    assert driver.state.stage is Stage.FILENAME
    assert "Suggestion: evil" in driver.state.error
    assert "press Tab" in driver.rendered()


def test_tab_applies_suggestion(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme)).type("../evil").keys("enter", "tab")
    assert driver.state.filename_field.text == "evil"
    assert driver.state.error == ""
    driver.keys("enter")
    assert driver.state.filename == "evil"


def test_tab_without_error_does_nothing(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme)).type("ok.txt").keys("tab")
    assert driver.state.filename_field.text == "ok.txt"


def test_empty_filename_is_rejected(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme)).keys("enter")
    assert driver.state.error == "Filename cannot be empty"
    assert not driver.done


@pytest.mark.parametrize("key", ["esc", "c-c"])
def test_cancel_on_filename_stage(theme, key: str) -> None:
    driver = ScreenDriver(NoteInputScreen(theme)).type("x").keys(key)
    assert driver.done
    assert driver.result is None


def test_prefilled_filename_starts_on_content(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme, filename="log.txt", verb="Append to"), size=(80, 24))
    assert driver.state.stage is Stage.CONTENT
    assert "Append to: log.txt" in driver.rendered()
    driver.type("entry").keys("c-s")
    assert driver.result == NoteDraft("log.txt", "entry")


def test_esc_on_empty_content_cancels_immediately(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme, filename="log.txt")).keys("esc")
    assert driver.done
    assert driver.result is None


def test_esc_on_written_content_asks_first_and_defaults_to_keeping(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme, filename="log.txt"), size=(80, 24)).type("draft").keys("esc")
    assert driver.state.stage is Stage.CONFIRM_DISCARD
    assert "Discard this note?" in driver.rendered()

    driver.keys("enter")
    assert driver.state.stage is Stage.CONTENT
    assert driver.state.content.text == "draft"
    assert not driver.done


def test_confirmed_discard_cancels(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme, filename="log.txt")).type("draft").keys("esc", "right", "enter")
    assert driver.done
    assert driver.result is None


def test_discard_prompt_answers_directly(theme) -> None:
    driver = ScreenDriver(NoteInputScreen(theme, filename="log.txt")).type("draft").keys("c-c", "y")
    assert driver.done
    assert driver.result is None


def test_placeholder_shown_for_empty_filename(theme) -> None:
    screen = NoteInputScreen(theme)
    assert screen.placeholder in ScreenDriver(screen).rendered()
