"""Colour palettes.

A ``Theme`` is an immutable value handed to every screen when it is created;
nothing reads a process-wide "current theme".
"""

from dataclasses import asdict, dataclass
from typing import Dict, List

from prompt_toolkit.styles import Style


@dataclass(frozen=True)
class Theme:
    """Named palette of prompt_toolkit style strings, one per style class."""

    name: str
    primary: str
    secondary: str
    accent: str
    error: str
    success: str
    warning: str
    muted: str
    border: str
    header: str
    highlight: str
    selected: str
    unselected: str

    def style(self) -> Style:
        """Build the prompt_toolkit Style that resolves ``class:<field>`` fragments."""
        rules = {key: value for key, value in asdict(self).items() if key != "name"}
        rules["cursor"] = "reverse"
        rules["placeholder"] = self.muted + " italic"
        return Style.from_dict(rules)


def _palette(name: str, primary: str, accent: str, border: str, header: str) -> Theme:
    return Theme(
        name=name,
        primary=f"bold {primary}",
        secondary="#767676",
        accent=f"bold {accent}",
        error="bold #ff0000",
        success="bold #00d787",
        warning="bold #ffaf00",
        muted="#626262",
        border=border,
        header=f"bold {header} bg:#262626",
        highlight="bold #ffff00 bg:#262626",
        selected=f"bold {primary} bg:#262626",
        unselected="#585858",
    )


DEFAULT_THEME_NAME = "Purple (Default)"

THEMES: Dict[str, Theme] = {
    theme.name: theme
    for theme in (
        _palette(DEFAULT_THEME_NAME, "#d75fd7", "#ff87ff", "#5f5fff", "#d75fd7"),
        _palette("Ocean", "#00afff", "#00ffff", "#00afff", "#00ffff"),
        _palette("Forest", "#00af00", "#00ff00", "#00af00", "#00ff00"),
        _palette("Sunset", "#ff8700", "#ffaf00", "#ff8700", "#ffaf00"),
    )
}


def theme_names() -> List[str]:
    return list(THEMES)


def get_theme(name: str) -> Theme:
    """Look up a palette by name, falling back to the default palette."""
    return THEMES.get(name, THEMES[DEFAULT_THEME_NAME])
