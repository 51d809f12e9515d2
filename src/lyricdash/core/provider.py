"""Lyric provider contract."""

from abc import ABC, abstractmethod

from .models import LyricResult, TrackIdentity


class LyricProvider(ABC):
    """Looks up lyrics for one track.

    Implementations do network work and run on the engine's fetch worker,
    never on the polling path. ``fetch`` reports every expected failure
    through the returned ``LyricResult`` instead of raising.
    """

    name = "provider"

    @abstractmethod
    def fetch(self, query: TrackIdentity) -> LyricResult:
        """Return raw lyric text, NOT_FOUND or FETCH_ERROR for ``query``."""
