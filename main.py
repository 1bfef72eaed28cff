#!/usr/bin/env python3
"""
ks - Keep Simple Notes

A terminal note-taking tool. Run without arguments for the interactive menu
(browse, create, search, rename and delete notes with a live preview), or
use the command flags for one-shot operations:

    ks -w note.txt "My note"       write a note
    ks -a note.txt "More content"  append to a note
    ks -r note.txt                 read (and edit) a note
    ks -d note.txt                 delete a note
    ks -l --sort date              list notes
    ks -s keyword                  search filenames and contents

Requirements:
    - Python 3.9+
    - prompt_toolkit, typer, loguru: pip install -e .

Configuration:
    - Config file: ~/.config/ks/config.json
    - Notes directory: --notes-dir, $KS_NOTES_DIR, config "notes_dir",
      or ~/.local/share/ks
"""

from ks.cli import run

if __name__ == "__main__":
    run()
