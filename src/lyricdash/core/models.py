"""Data models for playback state, lyric results and engine state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure reasons reported by the probe and the lyric provider."""

    PROBE_UNAVAILABLE = "probe_unavailable"
    NO_ACTIVE_SESSION = "no_active_session"
    MALFORMED_OUTPUT = "malformed_output"
    SEARCH_FAILED = "search_failed"
    PAGE_FETCH_FAILED = "page_fetch_failed"
    PARSE_FAILED = "parse_failed"
    NOT_FOUND = "not_found"

    @property
    def description(self) -> str:
        return _ERROR_DESCRIPTIONS[self]


_ERROR_DESCRIPTIONS = {
    ErrorKind.PROBE_UNAVAILABLE: "can't get metadata",
    ErrorKind.NO_ACTIVE_SESSION: "no song playing",
    ErrorKind.MALFORMED_OUTPUT: "unexpected metadata format",
    ErrorKind.SEARCH_FAILED: "Error fetching lyrics",
    ErrorKind.PAGE_FETCH_FAILED: "Error fetching lyrics page",
    ErrorKind.PARSE_FAILED: "Error parsing lyrics",
    ErrorKind.NOT_FOUND: "No lyrics found",
}


class PlaybackStatus(str, Enum):
    """Playback status as reported by the media-control utility."""

    PLAYING = "Playing"
    PAUSED = "Paused"
    STOPPED = "Stopped"
    UNKNOWN = "Unknown"

    @classmethod
    def from_text(cls, text: str) -> "PlaybackStatus":
        """Map free-text status to a known value, UNKNOWN otherwise."""
        normalized = (text or "").strip().lower()
        for status in cls:
            if status.value.lower() == normalized:
                return status
        return cls.UNKNOWN


@dataclass(frozen=True)
class TrackIdentity:
    """The (artist, title) pair used to detect track changes."""

    artist: str
    title: str

    @classmethod
    def create(cls, artist: str, title: str) -> "TrackIdentity":
        return cls(artist=(artist or "").strip(), title=(title or "").strip())

    @property
    def is_complete(self) -> bool:
        """Both artist and title are known."""
        return bool(self.artist and self.title)

    @property
    def query(self) -> str:
        """Search query for lyric lookups."""
        return f"{self.artist} {self.title}"

    def __str__(self) -> str:
        return f"{self.artist} - {self.title}"


@dataclass(frozen=True)
class PlaybackSnapshot:
    """One poll of the media-control utility. Replaced, never mutated."""

    identity: Optional[TrackIdentity] = None
    status: PlaybackStatus = PlaybackStatus.UNKNOWN
    status_text: str = ""

    @property
    def status_display(self) -> str:
        return self.status_text or self.status.value


class LyricResultKind(str, Enum):
    TEXT = "text"
    NOT_FOUND = "not_found"
    FETCH_ERROR = "fetch_error"


@dataclass(frozen=True)
class LyricResult:
    """Outcome of a single lyric fetch attempt."""

    kind: LyricResultKind
    lyrics: Optional[str] = None
    reason: Optional[ErrorKind] = None
    detail: str = ""

    @classmethod
    def text(cls, lyrics: str) -> "LyricResult":
        return cls(kind=LyricResultKind.TEXT, lyrics=lyrics)

    @classmethod
    def not_found(cls) -> "LyricResult":
        return cls(kind=LyricResultKind.NOT_FOUND, reason=ErrorKind.NOT_FOUND)

    @classmethod
    def fetch_error(cls, reason: ErrorKind, detail: str = "") -> "LyricResult":
        return cls(kind=LyricResultKind.FETCH_ERROR, reason=reason, detail=detail)

    @property
    def is_text(self) -> bool:
        return self.kind is LyricResultKind.TEXT

    @property
    def placeholder(self) -> Optional[str]:
        """Text shown in the lyrics area when this result carries no lyrics."""
        if self.is_text:
            return None
        return (self.reason or ErrorKind.NOT_FOUND).description


class EnginePhase(str, Enum):
    IDLE = "idle"
    TRACK_KNOWN = "track_known"
    FETCH_PENDING = "fetch_pending"


@dataclass(frozen=True)
class EngineState:
    """Everything the dashboard needs to draw one frame.

    Owned by the sync engine thread; every transition produces a new
    instance via ``dataclasses.replace``.
    """

    current_track: Optional[TrackIdentity] = None
    displayed_snapshot: PlaybackSnapshot = field(default_factory=PlaybackSnapshot)
    lyrics: Optional[str] = None
    fetch_in_flight: bool = False
    fetch_track: Optional[TrackIdentity] = None
    last_error: Optional[ErrorKind] = None
    placeholder: Optional[str] = None

    def __post_init__(self) -> None:
        if self.fetch_in_flight and self.fetch_track is None:
            raise ValueError("fetch_in_flight requires fetch_track")

    @property
    def phase(self) -> EnginePhase:
        if self.fetch_in_flight:
            return EnginePhase.FETCH_PENDING
        if self.current_track is not None:
            return EnginePhase.TRACK_KNOWN
        return EnginePhase.IDLE

    @property
    def lyrics_display(self) -> Optional[str]:
        return self.lyrics if self.lyrics is not None else self.placeholder
