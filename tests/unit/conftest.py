"""Shared test fixtures."""

import os
from pathlib import Path
from typing import Iterator

import pytest

from ks import config as ks_config
from ks.storage import NoteStore
from ks.themes import get_theme
from tests.unit.fakes import SAMPLE_NOTES


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Keep every test away from the real config, log and notes locations."""
    config_file = tmp_path / "config" / "config.json"
    monkeypatch.setattr(ks_config, "CONFIG_FILE", config_file)
    monkeypatch.setattr(ks_config, "DEFAULT_NOTES_DIR", tmp_path / "default-notes")
    monkeypatch.delenv(ks_config.NOTES_DIR_ENV, raising=False)
    yield config_file


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    path = tmp_path / "notes"
    path.mkdir()
    return path


@pytest.fixture
def store(notes_dir: Path) -> NoteStore:
    return NoteStore(notes_dir)


@pytest.fixture
def sample_store(store: NoteStore) -> NoteStore:
    """A store holding SAMPLE_NOTES, oldest first in dict order."""
    for i, (name, content) in enumerate(SAMPLE_NOTES.items()):
        path = store.notes_dir / name
        path.write_text(content, encoding="utf-8")
        stamp = 1_700_000_000 + i * 60
        os.utime(path, (stamp, stamp))
    return store


@pytest.fixture
def theme():
    return get_theme("Ocean")

