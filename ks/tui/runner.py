"""Drive one screen inside a prompt_toolkit Application.

The runner owns the only mutable reference to a screen's state. Key presses,
resizes and timer expiries are funnelled through ``dispatch`` one at a time,
and once the screen reports completion every later event is dropped.
"""

import asyncio
from typing import Optional, Tuple

from loguru import logger
from prompt_toolkit import Application
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.output import Output

from ks.tui.events import (
    Effect,
    Event,
    KeyEvent,
    NotificationExpired,
    R,
    ResizeEvent,
    S,
    ScheduleExpiry,
    Screen,
)

_KEY_NAMES = {
    Keys.ControlM: "enter",
    Keys.ControlJ: "enter",
    Keys.ControlI: "tab",
    Keys.ControlH: "backspace",
    Keys.Escape: "esc",
    Keys.BracketedPaste: "paste",
    "<sigint>": "c-c",
}


def normalize_key(key: str) -> str:
    """Map a prompt_toolkit key to the names screens match on."""
    if key in _KEY_NAMES:
        return _KEY_NAMES[key]
    return key.value if isinstance(key, Keys) else str(key)


class ScreenSession:
    """Live state of one screen while its Application runs."""

    def __init__(self, screen: Screen):
        self.screen = screen
        step = screen.init()
        self.state = step.state
        self.finished = False
        self.app: Optional[Application] = None
        self._initial_effect = step.effect
        self._size: Optional[Tuple[int, int]] = None

    def start(self) -> None:
        """Run the initial effect once the event loop is up."""
        if self._initial_effect is not None:
            self.perform(self._initial_effect)

    def dispatch(self, event: Event) -> None:
        if self.finished:
            logger.debug("Dropping {} for finished {}", event, type(self.screen).__name__)
            return
        step = self.screen.update(self.state, event)
        self.state = step.state
        if step.done:
            self.finished = True
            if self.app is not None and self.app.is_running:
                self.app.exit()
            return
        if step.effect is not None:
            self.perform(step.effect)

    def perform(self, effect: Effect) -> None:
        if isinstance(effect, ScheduleExpiry):
            self.app.create_background_task(self._expire_later(effect))
            return
        follow_up = self.screen.perform(effect)
        if follow_up is not None:
            self.dispatch(follow_up)

    async def _expire_later(self, effect: ScheduleExpiry) -> None:
        await asyncio.sleep(effect.delay)
        self.dispatch(NotificationExpired(effect.token))
        if self.app is not None and self.app.is_running:
            self.app.invalidate()

    def sync_size(self, app: Application) -> None:
        """before_render hook: turn terminal size changes into ResizeEvents."""
        size = app.output.get_size()
        current = (size.columns, size.rows)
        if current != self._size:
            self._size = current
            self.dispatch(ResizeEvent(*current))

    def render(self) -> StyleAndTextTuples:
        return self.screen.view(self.state)


def run_screen(
    screen: Screen[S, R],
    *,
    full_screen: bool = True,
    input: Optional[Input] = None,
    output: Optional[Output] = None,
) -> R:
    """
    Show a screen until it completes and return its result.

    Args:
        screen: The screen to run
        full_screen: Use the alternate screen; False draws inline and erases
            the prompt when done
        input: Alternative input, mainly for tests
        output: Alternative output, mainly for tests

    Returns:
        Whatever ``screen.result`` makes of the final state
    """
    session = ScreenSession(screen)
    kb = KeyBindings()

    # Eager so it wins over the default bindings for specific keys, and so
    # Escape fires without waiting for a Meta sequence.
    @kb.add(Keys.Any, eager=True)
    def _key(event):
        session.dispatch(KeyEvent(normalize_key(event.key_sequence[0].key), event.data))

    # Cursor position reports belong to the renderer, not the screen.
    @kb.add(Keys.CPRResponse, eager=True, save_before=lambda e: False)
    def _cpr(event):
        row, _ = map(int, event.data[2:-1].split(";"))
        event.app.renderer.report_absolute_cursor_row(row)

    window = Window(
        content=FormattedTextControl(session.render, focusable=True, show_cursor=False),
        wrap_lines=False,
        always_hide_cursor=True,
    )
    app = Application(
        layout=Layout(window),
        key_bindings=kb,
        full_screen=full_screen,
        erase_when_done=not full_screen,
        style=screen.theme.style(),
        before_render=session.sync_size,
        input=input,
        output=output,
    )
    app.ttimeoutlen = 0.1
    session.app = app

    logger.debug("Launching {}", type(screen).__name__)
    app.run(pre_run=session.start)
    return screen.result(session.state)
