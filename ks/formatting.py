"""Human-readable sizes, timestamps and note text."""

import re
from datetime import datetime

TIME_FORMAT = "%Y-%m-%d %H:%M"

_ESCAPED_BYTES = re.compile("[\udc80-\udcff]")


def format_size(size: int) -> str:
    """Format a byte count using 1024-based units, e.g. ``512 B`` or ``1.5 KB``."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def format_time(moment: datetime) -> str:
    return moment.strftime(TIME_FORMAT)


def displayable(text: str) -> str:
    """Swap each surrogate-escaped byte for U+FFFD so the text can be drawn.

    One character is replaced by one character, so cursor columns computed
    on the original text still line up.
    """
    return _ESCAPED_BYTES.sub("\ufffd", text)
