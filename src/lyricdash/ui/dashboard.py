"""Now-playing dashboard drawn with rich."""

import sys
import time
from typing import IO, Optional

from rich import box
from rich.align import Align
from rich.color import Color, ColorParseError
from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from ..config import DEFAULT_COLOR, PANEL_WIDTH, REFRESH_PER_SECOND
from ..core.engine import SyncEngine
from ..core.models import EngineState
from ..core.probe import PlaybackProbe
from ..utils.logging import get_logger
from .keys import Action, KeyDispatcher, cbreak, read_key

logger = get_logger(__name__)

ERROR_STYLE = Style(color="red")
HELP_ITEMS = (
    ("Play/Pause: ", "p"),
    ("  Next: ", "n"),
    ("  Previous: ", "b"),
    ("  Refresh Lyrics: ", "r"),
    ("  Quit: ", "q"),
)


def parse_color(value: str) -> Color:
    """
    Parse a display color.

    Accepts color names ("green"), terminal indices ("2", "208") and hex
    values ("#00ff88").

    Raises:
        ValueError: If the value is not a color
    """
    value = (value or "").strip()
    spec = f"color({value})" if value.isdigit() else value
    try:
        return Color.parse(spec)
    except ColorParseError as e:
        raise ValueError(f"Invalid color: {value!r}") from e


def render_state(
    state: EngineState, color: str = DEFAULT_COLOR, width: int = PANEL_WIDTH
) -> RenderableType:
    """Build one frame from an engine snapshot."""
    accent = Style(color=parse_color(color))
    label_style = accent + Style(bold=True)

    content = Text()
    if state.last_error is not None:
        content.append(f"Error: {state.last_error.description}", style=ERROR_STYLE)
    else:
        def add_line(label: str, value: str) -> None:
            if value:
                content.append(label, style=label_style)
                content.append(f" {value}\n")

        track = state.current_track
        if track is not None:
            add_line("Title: ", track.title)
            add_line("Artist:", track.artist)
            add_line("Status:", state.displayed_snapshot.status_display)

        if state.fetch_in_flight:
            content.append("\nFetching lyrics...")
        elif state.lyrics_display:
            content.append("\nLyrics:\n")
            content.append(state.lyrics_display)

    panel = Panel(
        content,
        title=Text("Now Playing", style=label_style),
        box=box.ROUNDED,
        border_style=accent,
        padding=(1, 2),
        width=width,
    )

    help_text = Text()
    for label, key in HELP_ITEMS:
        help_text.append(label)
        help_text.append(key, style=accent)

    return Align.center(
        Group(Align.center(panel), Text(""), Align.center(help_text)),
        vertical="middle",
    )


class Dashboard:
    """Full-screen view of the engine state plus keyboard controls."""

    def __init__(
        self,
        engine: SyncEngine,
        probe: PlaybackProbe,
        color: str = DEFAULT_COLOR,
        console: Optional[Console] = None,
        stdin: Optional[IO[str]] = None,
        refresh_per_second: int = REFRESH_PER_SECOND,
    ):
        self.engine = engine
        self.color = color
        self.console = console or Console()
        self.stdin = stdin or sys.stdin
        self.frame_interval = 1.0 / refresh_per_second
        self.dispatcher = KeyDispatcher(engine, probe)

    def render(self) -> RenderableType:
        return render_state(self.engine.snapshot(), self.color)

    def run(self) -> None:
        """Draw until the quit key or Ctrl-C."""
        with Live(
            self.render(), console=self.console, screen=True, auto_refresh=False
        ) as live, cbreak(self.stdin) as interactive:
            if not interactive:
                logger.info("stdin is not a terminal; keyboard controls disabled")
            try:
                while True:
                    if interactive:
                        key = read_key(self.stdin, self.frame_interval)
                        if key and self.dispatcher.dispatch(key) is Action.QUIT:
                            break
                    else:
                        time.sleep(self.frame_interval)
                    live.update(self.render(), refresh=True)
            except KeyboardInterrupt:
                logger.debug("Interrupted")
