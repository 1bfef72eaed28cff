"""Line-oriented composition of formatted text.

Views build a list of lines, each line a list of ``(style, text)`` fragments,
and join them at the end. These helpers pad, truncate, box and place lines
so views can lay out columns without a widget tree.
"""

from typing import Iterable, List, Sequence

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.formatted_text.utils import fragment_list_width
from prompt_toolkit.utils import get_cwidth

from ks.formatting import displayable

Line = StyleAndTextTuples


def width_of(line: Line) -> int:
    return fragment_list_width(line)


def truncate(line: Line, width: int) -> Line:
    """Cut a line down to at most ``width`` terminal cells."""
    result: Line = []
    used = 0
    for fragment in line:
        style, text = fragment[0], fragment[1]
        if "[SetCursorPosition]" in style:
            result.append((style, text))
            continue
        kept = []
        for char in text:
            cells = get_cwidth(char)
            if used + cells > width:
                break
            kept.append(char)
            used += cells
        if kept:
            result.append((style, "".join(kept)))
        if used >= width and len(kept) < len(text):
            break
    return result


def pad(line: Line, width: int, style: str = "") -> Line:
    """Truncate or right-pad a line to exactly ``width`` cells."""
    line = truncate(line, width)
    missing = width - width_of(line)
    if missing > 0:
        line = line + [(style, " " * missing)]
    return line


def side_by_side(left: Sequence[Line], right: Sequence[Line], left_width: int, gap: int = 1) -> List[Line]:
    """Place two columns next to each other; the left column is padded to ``left_width``."""
    rows = max(len(left), len(right))
    lines = []
    for i in range(rows):
        l = left[i] if i < len(left) else []
        r = right[i] if i < len(right) else []
        lines.append(pad(l, left_width) + [("", " " * gap)] + list(r))
    return lines


def boxed(lines: Sequence[Line], width: int, height: int, style: str = "", title: str = "") -> List[Line]:
    """
    Draw a rounded border of the given outer size around ``lines``.

    Content that does not fit is cut off at the bottom and right edges.
    """
    inner_width = max(0, width - 4)
    inner_height = max(0, height - 2)
    label = f" {title} " if title else ""
    top = "╭─" + label + "─" * max(0, width - 3 - get_cwidth(label)) + "╮"
    result: List[Line] = [[(style, top[: max(width, 0)])]]
    for i in range(inner_height):
        content = lines[i] if i < len(lines) else []
        result.append([(style, "│ ")] + pad(content, inner_width) + [(style, " │")])
    result.append([(style, "╰" + "─" * max(0, width - 2) + "╯")])
    return result


def centered(lines: Sequence[Line], width: int, height: int) -> List[Line]:
    """Centre a block of lines horizontally and vertically in a width x height area."""
    block_width = max((width_of(l) for l in lines), default=0)
    left = max(0, (width - block_width) // 2) if width > 0 else 0
    top = max(0, (height - len(lines)) // 2) if height > 0 else 0
    result: List[Line] = [[] for _ in range(top)]
    for line in lines:
        result.append([("", " " * left)] + list(line) if left else list(line))
    return result


def center_each(lines: Sequence[Line], width: int) -> List[Line]:
    """Centre every line on its own, like a centred paragraph."""
    result = []
    for line in lines:
        left = max(0, (width - width_of(line)) // 2) if width > 0 else 0
        result.append([("", " " * left)] + list(line) if left else list(line))
    return result


def document_lines(
    doc: Document,
    *,
    height: int = 0,
    style: str = "",
    placeholder: str = "",
    show_cursor: bool = True,
) -> List[Line]:
    """
    Render a Document with a visible cursor, scrolled so the cursor row shows.

    Args:
        doc: Text and cursor position
        height: Rows available; 0 means unlimited
        style: Style for the text
        placeholder: Muted hint shown while the document is empty
        show_cursor: Whether to draw the cursor cell

    Returns:
        The visible rows
    """
    if not doc.text and placeholder:
        cursor = [("[SetCursorPosition]", ""), ("class:cursor", " ")] if show_cursor else []
        return [cursor + [("class:placeholder", placeholder)]]

    row, col = doc.cursor_position_row, doc.cursor_position_col
    rows: List[Line] = []
    for i, text in enumerate(displayable(doc.text).split("\n")):
        if show_cursor and i == row:
            under = text[col : col + 1] or " "
            rows.append(
                [
                    (style, text[:col]),
                    ("[SetCursorPosition]", ""),
                    ("class:cursor " + style, under),
                    (style, text[col + 1 :]),
                ]
            )
        else:
            rows.append([(style, text)])

    if height > 0 and len(rows) > height:
        first = min(max(0, row - height + 1), len(rows) - height)
        rows = rows[first : first + height]
    return rows


def join_lines(lines: Iterable[Line]) -> StyleAndTextTuples:
    """Flatten lines into one fragment list separated by newlines."""
    result: StyleAndTextTuples = []
    for i, line in enumerate(lines):
        if i:
            result.append(("", "\n"))
        result.extend(line)
    return result
