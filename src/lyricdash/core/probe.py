"""Playback state from playerctl (any MPRIS player)."""

import subprocess
from typing import List, Optional

from ..config import PLAYERCTL_COMMAND, PROBE_TIMEOUT
from ..exceptions import (
    MalformedOutputError,
    NoActiveSessionError,
    ProbeUnavailableError,
)
from ..utils.logging import get_logger
from .models import PlaybackSnapshot, PlaybackStatus, TrackIdentity

logger = get_logger(__name__)

METADATA_FORMAT = "{{title}}|{{artist}}|{{status}}"
FIELD_SEPARATOR = "|"
NO_PLAYER_MARKERS = ("No players found", "No player could handle this command")
CONTROL_COMMANDS = ("play-pause", "next", "previous")


class PlaybackProbe:
    """Synchronous, stateless view of the active player.

    Every call runs the media-control utility once with a bounded timeout,
    so a hung player can never stall the polling loop for longer than
    ``timeout`` seconds.
    """

    def __init__(
        self,
        command: str = PLAYERCTL_COMMAND,
        player: Optional[str] = None,
        timeout: float = PROBE_TIMEOUT,
    ):
        self.command = command
        self.player = player
        self.timeout = timeout

    def _base_args(self) -> List[str]:
        args = [self.command]
        if self.player:
            args += ["-p", self.player]
        return args

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            self._base_args() + list(args),
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )

    def probe(self) -> PlaybackSnapshot:
        """
        Query the current track and status.

        Raises:
            ProbeUnavailableError: utility missing, timed out or failed
            NoActiveSessionError: no player reports a track
            MalformedOutputError: output is not exactly three fields
        """
        try:
            result = self._run("metadata", "--format", METADATA_FORMAT)
        except subprocess.TimeoutExpired as e:
            raise ProbeUnavailableError(
                f"{self.command} timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise ProbeUnavailableError(f"Cannot run {self.command}: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            if any(marker in stderr for marker in NO_PLAYER_MARKERS):
                raise NoActiveSessionError(stderr)
            raise ProbeUnavailableError(
                f"{self.command} exited with status {result.returncode}"
            )

        return parse_metadata(result.stdout or "")

    def control(self, command: str) -> bool:
        """Send a fire-and-forget playback command. Returns success."""
        if command not in CONTROL_COMMANDS:
            raise ValueError(f"Unknown playback command: {command}")
        try:
            result = self._run(command)
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.warning(f"Playback command '{command}' failed: {e}")
            return False
        if result.returncode != 0:
            logger.warning(
                f"Playback command '{command}' exited with status {result.returncode}"
            )
            return False
        logger.debug(f"Playback command '{command}' sent")
        return True


def parse_metadata(output: str) -> PlaybackSnapshot:
    """Parse ``title|artist|status`` into a snapshot."""
    output = output.strip()
    if not output:
        raise NoActiveSessionError("no song playing")

    parts = output.split(FIELD_SEPARATOR)
    if len(parts) != 3:
        raise MalformedOutputError(f"Expected 3 fields, got {len(parts)}")

    title, artist, status_text = (part.strip() for part in parts)
    return PlaybackSnapshot(
        identity=TrackIdentity.create(artist=artist, title=title),
        status=PlaybackStatus.from_text(status_text),
        status_text=status_text,
    )
