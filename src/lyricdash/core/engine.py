"""Playback polling and lyric synchronization.

The engine owns one ``EngineState`` and changes it from a single thread.
Ticks, manual refreshes and fetch completions all arrive as events on one
queue and are applied in the order they are taken off it. Lyric fetches
run on a single-worker executor and report back by posting a
``FetchCompleted`` event, so the worker never touches engine state.

State transitions live in the ``apply_*`` functions below. They are pure:
given a state and an input they return the next state and, when a fetch
has to start, the track to fetch for.
"""

import queue
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple, Union

from ..config import POLL_INTERVAL
from ..exceptions import EngineError, ProbeError
from ..utils.logging import get_logger
from .models import (
    EngineState,
    ErrorKind,
    LyricResult,
    PlaybackSnapshot,
    TrackIdentity,
)
from .normalize import normalize_lyrics
from .probe import PlaybackProbe
from .provider import LyricProvider

logger = get_logger(__name__)

STALE_PLACEHOLDER = "Track changed while fetching lyrics. Press r to refresh."


# ----------------------
# Events
# ----------------------
@dataclass(frozen=True)
class Tick:
    """Time to poll the player."""


@dataclass(frozen=True)
class ManualRefresh:
    """User asked to fetch lyrics for the current track again."""


@dataclass(frozen=True)
class FetchCompleted:
    """A lyric fetch finished for ``for_track``."""

    result: LyricResult
    for_track: TrackIdentity


@dataclass(frozen=True)
class _Shutdown:
    pass


Event = Union[Tick, ManualRefresh, FetchCompleted]
Transition = Tuple[EngineState, Optional[TrackIdentity]]


# ----------------------
# Transitions
# ----------------------
def _begin_fetch(state: EngineState, track: TrackIdentity, **changes) -> Transition:
    return (
        replace(
            state,
            current_track=track,
            fetch_in_flight=True,
            fetch_track=track,
            lyrics=None,
            placeholder=None,
            **changes,
        ),
        track,
    )


def apply_probe_success(state: EngineState, snapshot: PlaybackSnapshot) -> Transition:
    identity = snapshot.identity
    if identity == state.current_track:
        return replace(state, displayed_snapshot=snapshot, last_error=None), None

    if state.fetch_in_flight:
        # One fetch at a time. The in-flight result will be discarded as
        # stale and this track gets no lyrics until a manual refresh.
        return (
            replace(
                state,
                current_track=identity,
                displayed_snapshot=snapshot,
                last_error=None,
            ),
            None,
        )

    return _begin_fetch(state, identity, displayed_snapshot=snapshot, last_error=None)


def apply_probe_failure(state: EngineState, kind: ErrorKind) -> EngineState:
    if state.last_error == kind:
        return state
    return replace(state, last_error=kind)


def apply_manual_refresh(state: EngineState) -> Transition:
    track = state.current_track
    if track is None or not track.is_complete or state.fetch_in_flight:
        return state, None
    return _begin_fetch(state, track)


def apply_fetch_completed(
    state: EngineState, result: LyricResult, for_track: TrackIdentity
) -> EngineState:
    if for_track != state.current_track:
        return replace(
            state,
            fetch_in_flight=False,
            fetch_track=None,
            placeholder=STALE_PLACEHOLDER,
        )

    if result.is_text:
        return replace(
            state,
            lyrics=result.lyrics,
            placeholder=None,
            fetch_in_flight=False,
            fetch_track=None,
        )

    return replace(
        state,
        lyrics=None,
        placeholder=result.placeholder,
        fetch_in_flight=False,
        fetch_track=None,
    )


# ----------------------
# Engine
# ----------------------
class SyncEngine:
    """Single-writer owner of ``EngineState``.

    ``start()`` runs the loop on a background thread; the loop is also the
    timer, waiting on the event queue until the next tick is due. ``handle()``
    is the one place state changes and can be driven directly.
    """

    def __init__(
        self,
        probe: PlaybackProbe,
        provider: LyricProvider,
        poll_interval: float = POLL_INTERVAL,
        normalizer: Callable[[str], str] = normalize_lyrics,
        executor: Optional[Executor] = None,
    ):
        self.probe = probe
        self.provider = provider
        self.poll_interval = poll_interval
        self.normalizer = normalizer

        self._state = EngineState()
        self._events: "queue.Queue[Union[Event, _Shutdown]]" = queue.Queue()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="lyricdash-fetch"
        )
        self._thread: Optional[threading.Thread] = None

    # -- read side -------------------------------------------------------
    def snapshot(self) -> EngineState:
        """Current state. Immutable, safe to read from any thread."""
        return self._state

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # -- write side ------------------------------------------------------
    def post(self, event: Event) -> None:
        self._events.put(event)

    def request_refresh(self) -> None:
        self.post(ManualRefresh())

    def handle(self, event: Event) -> EngineState:
        """Apply one event and start a fetch if the transition asks for one."""
        fetch_for: Optional[TrackIdentity] = None

        if isinstance(event, Tick):
            new_state, fetch_for = self._poll()
        elif isinstance(event, ManualRefresh):
            new_state, fetch_for = apply_manual_refresh(self._state)
            if fetch_for is None:
                logger.debug("Manual refresh ignored: no complete track or fetch in flight")
        elif isinstance(event, FetchCompleted):
            new_state = apply_fetch_completed(self._state, event.result, event.for_track)
            self._log_completion(event)
        else:
            raise TypeError(f"Unknown event: {event!r}")

        self._state = new_state
        if fetch_for is not None:
            self._start_fetch(fetch_for)
        return new_state

    def _poll(self) -> Transition:
        try:
            snapshot = self.probe.probe()
        except ProbeError as e:
            logger.debug(f"Probe failed ({e.kind.value}): {e}")
            return apply_probe_failure(self._state, e.kind), None

        if snapshot.identity != self._state.current_track:
            logger.info(f"Track changed: {snapshot.identity}")
        return apply_probe_success(self._state, snapshot)

    def _log_completion(self, event: FetchCompleted) -> None:
        if event.for_track != self._state.current_track:
            logger.info(f"Discarding stale lyrics for {event.for_track}")
        elif event.result.is_text:
            logger.info(f"Lyrics ready for {event.for_track}")
        else:
            logger.info(f"No lyrics for {event.for_track}: {event.result.placeholder}")

    # -- fetching --------------------------------------------------------
    def _start_fetch(self, track: TrackIdentity) -> None:
        logger.info(f"Fetching lyrics for {track}")
        try:
            self._executor.submit(self._fetch, track)
        except RuntimeError as e:
            # Executor already shut down; still resolve the pending fetch.
            self.post(
                FetchCompleted(LyricResult.fetch_error(ErrorKind.SEARCH_FAILED, str(e)), track)
            )

    def _fetch(self, track: TrackIdentity) -> None:
        try:
            result = self.provider.fetch(track)
            if result.is_text:
                result = LyricResult.text(self.normalizer(result.lyrics or ""))
        except Exception as e:
            logger.exception(f"Lyric provider {self.provider.name} crashed for {track}")
            result = LyricResult.fetch_error(ErrorKind.PARSE_FAILED, str(e))
        self.post(FetchCompleted(result, track))

    # -- loop ------------------------------------------------------------
    def run(self) -> None:
        """Process events until ``stop()``; a Tick fires every poll interval."""
        next_tick = time.monotonic()
        while True:
            timeout = max(0.0, next_tick - time.monotonic())
            try:
                event = self._events.get(timeout=timeout)
            except queue.Empty:
                event = Tick()

            if isinstance(event, _Shutdown):
                break

            try:
                self.handle(event)
            except Exception:
                logger.exception(f"Error while handling {event!r}")

            if isinstance(event, Tick):
                next_tick = time.monotonic() + self.poll_interval

        logger.debug("Sync engine loop stopped")

    def start(self) -> None:
        if self.running:
            raise EngineError("Sync engine is already running")
        self._thread = threading.Thread(
            target=self.run, name="lyricdash-engine", daemon=True
        )
        try:
            self._thread.start()
        except RuntimeError as e:
            self._thread = None
            raise EngineError(f"Cannot start sync engine: {e}") from e
        logger.info(f"Sync engine started (poll every {self.poll_interval}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the loop. An in-flight fetch is abandoned, not awaited."""
        if self._thread is not None:
            self._events.put(_Shutdown())
            self._thread.join(timeout)
            self._thread = None
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
