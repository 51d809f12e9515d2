"""Custom exceptions for lyricdash."""

from .core.models import ErrorKind


class LyricDashError(Exception):
    """Base exception for lyricdash."""
    pass

class ConfigError(LyricDashError):
    """Invalid configuration value."""
    pass

class EngineError(LyricDashError):
    """Sync engine could not be started or stopped."""
    pass

class ProbeError(LyricDashError):
    """Error querying playback state from the media-control utility."""

    kind = ErrorKind.PROBE_UNAVAILABLE

class ProbeUnavailableError(ProbeError):
    """Media-control utility could not be invoked."""

    kind = ErrorKind.PROBE_UNAVAILABLE

class NoActiveSessionError(ProbeError):
    """No player is reporting a track."""

    kind = ErrorKind.NO_ACTIVE_SESSION

class MalformedOutputError(ProbeError):
    """Utility output could not be split into title, artist and status."""

    kind = ErrorKind.MALFORMED_OUTPUT

class LyricsError(LyricDashError):
    """Error fetching or processing lyrics."""

    kind = ErrorKind.PARSE_FAILED

class SearchFailedError(LyricsError):
    """Search request failed."""

    kind = ErrorKind.SEARCH_FAILED

class PageFetchFailedError(LyricsError):
    """Lyrics page request failed."""

    kind = ErrorKind.PAGE_FETCH_FAILED

class ParseFailedError(LyricsError):
    """Search response or lyrics page could not be parsed."""

    kind = ErrorKind.PARSE_FAILED
