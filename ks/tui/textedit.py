"""Pure text editing on immutable prompt_toolkit Documents.

Text fields inside screen state are ``Document`` values; each key press
produces a new Document rather than mutating a Buffer.
"""

from typing import Optional

from prompt_toolkit.document import Document

from ks.tui.events import KeyEvent


def _insert(doc: Document, text: str) -> Document:
    pos = doc.cursor_position
    return Document(doc.text[:pos] + text + doc.text[pos:], pos + len(text))


def _move(doc: Document, offset: int) -> Document:
    return Document(doc.text, doc.cursor_position + offset)


def edit(doc: Document, event: KeyEvent, *, multiline: bool = False) -> Optional[Document]:
    """
    Apply an editing key to a document.

    Args:
        doc: Current field contents and cursor
        event: The key press
        multiline: Whether Enter inserts a newline and up/down move between lines

    Returns:
        The edited document, or None if the key is not an editing key
    """
    key = event.key
    pos = doc.cursor_position

    if key == "paste":
        text = event.data if multiline else event.data.replace("\r", "").replace("\n", "")
        return _insert(doc, text.replace("\r\n", "\n").replace("\r", "\n"))
    if len(key) == 1 and key.isprintable():
        return _insert(doc, key)
    if key == "enter" and multiline:
        return _insert(doc, "\n")
    if key == "tab" and multiline:
        return _insert(doc, "    ")

    if key == "backspace":
        if pos == 0:
            return doc
        return Document(doc.text[: pos - 1] + doc.text[pos:], pos - 1)
    if key == "delete":
        return Document(doc.text[:pos] + doc.text[pos + 1 :], pos)
    if key == "left":
        return Document(doc.text, max(0, pos - 1))
    if key == "right":
        return Document(doc.text, min(len(doc.text), pos + 1))
    if key in ("home", "c-a"):
        return _move(doc, doc.get_start_of_line_position())
    if key in ("end", "c-e"):
        return _move(doc, doc.get_end_of_line_position())
    if key == "c-u":
        start = pos + doc.get_start_of_line_position()
        return Document(doc.text[:start] + doc.text[pos:], start)
    if multiline and key == "up":
        return _move(doc, doc.get_cursor_up_position())
    if multiline and key == "down":
        return _move(doc, doc.get_cursor_down_position())
    return None
