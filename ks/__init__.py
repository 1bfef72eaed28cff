"""ks - Keep Simple Notes.

A terminal note-taking tool: write, read, append, rename, delete and search small
text files kept in a single notes directory, plus an interactive full-screen
browser built on prompt_toolkit.
"""

__version__ = "0.1.0"
