"""Test configuration and fixtures.

Provides reusable fixtures for:
- Fake playback probes and lyric providers
- A deferred executor that holds lyric fetches until a test releases them
- Genius search responses and lyric pages
"""

import logging
import os
import queue
from concurrent.futures import Executor, Future
from typing import Dict, List, Optional

import pytest

from lyricdash.core.engine import SyncEngine
from lyricdash.core.models import (
    LyricResult,
    PlaybackSnapshot,
    PlaybackStatus,
    TrackIdentity,
)
from lyricdash.core.provider import LyricProvider


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)


# =============================================================================
# Test doubles
# =============================================================================


def make_snapshot(title: str, artist: str, status: str = "Playing") -> PlaybackSnapshot:
    return PlaybackSnapshot(
        identity=TrackIdentity.create(artist=artist, title=title),
        status=PlaybackStatus.from_text(status),
        status_text=status,
    )


class FakeProbe:
    """Returns (or raises) queued outcomes; repeats the last one when empty."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.last = None
        self.calls = 0
        self.commands: List[str] = []
        self.control_result = True

    def queue(self, *outcomes) -> None:
        self.outcomes.extend(outcomes)

    def probe(self) -> PlaybackSnapshot:
        self.calls += 1
        if self.outcomes:
            self.last = self.outcomes.pop(0)
        if self.last is None:
            raise AssertionError("FakeProbe has no outcome configured")
        if isinstance(self.last, Exception):
            raise self.last
        return self.last

    def control(self, command: str) -> bool:
        self.commands.append(command)
        return self.control_result


class FakeProvider(LyricProvider):
    """Returns a configured result per track, TEXT("lyrics") by default."""

    name = "fake"

    def __init__(self, results: Optional[Dict[TrackIdentity, LyricResult]] = None):
        self.results = results or {}
        self.default = LyricResult.text("lyrics")
        self.calls: List[TrackIdentity] = []

    def fetch(self, query: TrackIdentity) -> LyricResult:
        self.calls.append(query)
        result = self.results.get(query, self.default)
        if isinstance(result, Exception):
            raise result
        return result


class DeferredExecutor(Executor):
    """Holds submitted work until ``run_pending`` is called."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_pending(self) -> int:
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            future.set_result(fn(*args, **kwargs))
        return len(pending)


def drain(engine: SyncEngine) -> list:
    """Apply every queued event, in order, through ``engine.handle``."""
    handled = []
    while True:
        try:
            event = engine._events.get_nowait()
        except queue.Empty:
            return handled
        engine.handle(event)
        handled.append(event)


# =============================================================================
# Engine fixtures
# =============================================================================


@pytest.fixture
def drain_events():
    """drain_events(engine) applies all queued events and returns them."""
    return drain


@pytest.fixture
def snapshot_of():
    """Factory for probe snapshots: snapshot_of(title, artist, status)."""
    return make_snapshot


@pytest.fixture
def track_a():
    return TrackIdentity.create("Artist X", "Song A")


@pytest.fixture
def track_b():
    return TrackIdentity.create("Artist Y", "Song B")


@pytest.fixture
def fake_probe():
    return FakeProbe()


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def executor():
    return DeferredExecutor()


@pytest.fixture
def engine(fake_probe, fake_provider, executor):
    return SyncEngine(fake_probe, fake_provider, poll_interval=0.01, executor=executor)


# =============================================================================
# Genius fixtures
# =============================================================================


@pytest.fixture
def genius_search_response():
    return {
        "response": {
            "sections": [
                {"type": "top_hit", "hits": []},
                {
                    "type": "song",
                    "hits": [
                        {"result": {"url": "https://genius.com/artists/Artist-x"}},
                        {"result": {"url": "https://genius.com/Artist-x-song-a-lyrics"}},
                        {"result": {"url": "https://genius.com/Artist-x-song-b-lyrics"}},
                    ],
                },
            ]
        }
    }


@pytest.fixture
def genius_lyrics_page():
    return (
        "<html><head><title>Artist X - Song A Lyrics | Genius Lyrics</title></head>"
        "<body>"
        '<div data-lyrics-container="true">'
        '<div class="LyricsHeader__Container-sc-1">12 Contributors</div>'
        "[Verse 1]<br/>First line<br/>Second line"
        "</div>"
        '<div data-lyrics-container="true">[Chorus]<br>Sing it</div>'
        "</body></html>"
    )


@pytest.fixture(autouse=True)
def reset_lyricdash_logger():
    """Drop handlers that setup_logging attached during a test."""
    yield
    logger = logging.getLogger("lyricdash")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
