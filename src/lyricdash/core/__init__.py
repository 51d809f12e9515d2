"""Core functionality modules.

Only the data models are imported eagerly; the probe, provider and engine
modules pull in subprocess and HTTP machinery and are imported on demand.
"""

from .models import (
    EngineState,
    ErrorKind,
    LyricResult,
    PlaybackSnapshot,
    PlaybackStatus,
    TrackIdentity,
)

__all__ = [
    "EngineState",
    "ErrorKind",
    "LyricResult",
    "PlaybackSnapshot",
    "PlaybackStatus",
    "TrackIdentity",
]
