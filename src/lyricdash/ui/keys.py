"""Keyboard input for the dashboard."""

import select
import termios
import tty
from contextlib import contextmanager
from enum import Enum
from typing import IO, Iterator, Optional

from ..core.engine import SyncEngine
from ..core.probe import PlaybackProbe
from ..utils.logging import get_logger

logger = get_logger(__name__)


class Action(str, Enum):
    QUIT = "quit"
    PLAY_PAUSE = "play-pause"
    NEXT = "next"
    PREVIOUS = "previous"
    REFRESH = "refresh"


KEY_BINDINGS = {
    "q": Action.QUIT,
    "p": Action.PLAY_PAUSE,
    "n": Action.NEXT,
    "b": Action.PREVIOUS,
    "r": Action.REFRESH,
}

PLAYER_ACTIONS = (Action.PLAY_PAUSE, Action.NEXT, Action.PREVIOUS)


class KeyDispatcher:
    """Turns key presses into playback commands or engine events."""

    def __init__(self, engine: SyncEngine, probe: PlaybackProbe):
        self.engine = engine
        self.probe = probe

    def dispatch(self, key: str) -> Optional[Action]:
        action = KEY_BINDINGS.get(key)
        if action is None:
            return None

        if action in PLAYER_ACTIONS:
            self.probe.control(action.value)
        elif action is Action.REFRESH:
            state = self.engine.snapshot()
            track = state.current_track
            if track is not None and track.is_complete and not state.fetch_in_flight:
                self.engine.request_refresh()
            else:
                logger.debug("Refresh key ignored: no complete track or fetch in flight")
        return action


@contextmanager
def cbreak(stream: IO[str]) -> Iterator[bool]:
    """Put a terminal into cbreak mode; yields False if it is not a tty."""
    try:
        fd = stream.fileno()
        old_attrs = termios.tcgetattr(fd)
    except (termios.error, ValueError, OSError):
        yield False
        return

    tty.setcbreak(fd)
    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_attrs)


def read_key(stream: IO[str], timeout: float) -> Optional[str]:
    """Return one pending character, or None after ``timeout`` seconds."""
    ready, _, _ = select.select([stream], [], [], timeout)
    if not ready:
        return None
    char = stream.read(1)
    return char or None
