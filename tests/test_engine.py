"""Test the sync engine event handling."""

import pytest

from lyricdash.core.engine import FetchCompleted, ManualRefresh, STALE_PLACEHOLDER, Tick
from lyricdash.core.models import ErrorKind, LyricResult, PlaybackStatus
from lyricdash.exceptions import NoActiveSessionError, ProbeUnavailableError


def test_track_change_fetches_and_applies_normalized_lyrics(
    engine, fake_probe, fake_provider, executor, drain_events, track_a, snapshot_of
):
    snapshot = snapshot_of("Song A", "Artist X", "Playing")
    fake_probe.queue(snapshot, snapshot)
    fake_provider.results[track_a] = LyricResult.text("Intro...[Chorus]...outro")

    engine.handle(Tick())
    assert engine.snapshot().fetch_in_flight
    assert len(executor.pending) == 1

    engine.handle(Tick())
    assert len(executor.pending) == 1

    executor.run_pending()
    assert fake_provider.calls == [track_a]
    assert fake_provider.calls[0].query == "Artist X Song A"

    events = drain_events(engine)
    state = engine.snapshot()

    assert [type(e) for e in events] == [FetchCompleted]
    assert "\n[Chorus]\n" in state.lyrics
    assert not state.fetch_in_flight
    assert state.displayed_snapshot.status is PlaybackStatus.PLAYING


def test_track_change_during_fetch_discards_stale_result(
    engine, fake_probe, fake_provider, executor, drain_events, track_a, track_b, snapshot_of
):
    fake_probe.queue(snapshot_of("Song A", "Artist X"), snapshot_of("Song B", "Artist Y"))

    engine.handle(Tick())
    engine.handle(Tick())
    assert engine.snapshot().current_track == track_b
    assert len(executor.pending) == 1

    executor.run_pending()
    drain_events(engine)

    state = engine.snapshot()
    assert state.current_track == track_b
    assert state.lyrics is None
    assert state.placeholder == STALE_PLACEHOLDER
    assert not state.fetch_in_flight

    # Same identity keeps coming back: no fetch until the user asks.
    engine.handle(Tick())
    assert executor.pending == []
    assert fake_provider.calls == [track_a]

    engine.handle(ManualRefresh())
    executor.run_pending()
    drain_events(engine)

    assert fake_provider.calls == [track_a, track_b]
    assert engine.snapshot().lyrics == "lyrics"


def test_rapid_changes_only_apply_lyrics_for_current_track(
    engine, fake_probe, fake_provider, executor, drain_events, track_a, snapshot_of
):
    fake_probe.queue(
        snapshot_of("Song A", "Artist X"),
        snapshot_of("Song B", "Artist Y"),
        snapshot_of("Song C", "Artist Z"),
    )
    fake_provider.results[track_a] = LyricResult.text("lyrics for A")

    for _ in range(3):
        engine.handle(Tick())
    executor.run_pending()
    drain_events(engine)

    state = engine.snapshot()
    assert state.current_track.title == "Song C"
    assert state.lyrics is None


def test_changing_back_before_completion_applies_result(
    engine, fake_probe, fake_provider, executor, drain_events, track_a, snapshot_of
):
    fake_probe.queue(
        snapshot_of("Song A", "Artist X"),
        snapshot_of("Song B", "Artist Y"),
        snapshot_of("Song A", "Artist X"),
    )
    fake_provider.results[track_a] = LyricResult.text("lyrics for A")

    for _ in range(3):
        engine.handle(Tick())
    executor.run_pending()
    drain_events(engine)

    assert engine.snapshot().lyrics == "lyrics for A"


def test_probe_failures_keep_track_and_clear_on_success(
    engine, fake_probe, executor, drain_events, track_a, snapshot_of
):
    snapshot = snapshot_of("Song A", "Artist X")
    fake_probe.queue(snapshot)
    engine.handle(Tick())
    executor.run_pending()
    drain_events(engine)
    assert engine.snapshot().lyrics == "lyrics"

    fake_probe.queue(
        ProbeUnavailableError("gone"),
        NoActiveSessionError("idle"),
        ProbeUnavailableError("gone"),
        snapshot,
    )
    expected_errors = [
        ErrorKind.PROBE_UNAVAILABLE,
        ErrorKind.NO_ACTIVE_SESSION,
        ErrorKind.PROBE_UNAVAILABLE,
    ]
    for expected in expected_errors:
        state = engine.handle(Tick())
        assert state.last_error is expected
        assert state.current_track == track_a
        assert state.lyrics == "lyrics"

    state = engine.handle(Tick())
    assert state.last_error is None
    assert state.current_track == track_a
    assert state.lyrics == "lyrics"
    assert executor.pending == []


def test_fetch_in_flight_clears_once_per_fetch(
    engine, fake_probe, executor, drain_events, snapshot_of
):
    fake_probe.queue(
        snapshot_of("Song A", "Artist X"),
        snapshot_of("Song B", "Artist Y"),
        snapshot_of("Song B", "Artist Y"),
    )
    states = [engine.snapshot()]

    for _ in range(3):
        states.append(engine.handle(Tick()))
    fetches = executor.run_pending()
    for event in drain_events(engine):
        states.append(engine.snapshot())
    states.append(engine.handle(ManualRefresh()))
    fetches += executor.run_pending()
    drain_events(engine)
    states.append(engine.snapshot())

    cleared = sum(
        1 for before, after in zip(states, states[1:])
        if before.fetch_in_flight and not after.fetch_in_flight
    )
    assert fetches == 2
    assert cleared == 2


def test_manual_refresh_ignored_while_fetching(
    engine, fake_probe, executor, snapshot_of
):
    fake_probe.queue(snapshot_of("Song A", "Artist X"))
    engine.handle(Tick())

    before = engine.snapshot()
    assert engine.handle(ManualRefresh()) is before
    assert len(executor.pending) == 1


def test_manual_refresh_without_track_does_nothing(engine, executor):
    assert engine.handle(ManualRefresh()).current_track is None
    assert executor.pending == []


def test_request_refresh_posts_event(engine):
    engine.request_refresh()
    assert isinstance(engine._events.get_nowait(), ManualRefresh)


@pytest.mark.parametrize(
    "result,placeholder",
    [
        (LyricResult.not_found(), "No lyrics found"),
        (LyricResult.fetch_error(ErrorKind.SEARCH_FAILED), "Error fetching lyrics"),
        (LyricResult.fetch_error(ErrorKind.PAGE_FETCH_FAILED), "Error fetching lyrics page"),
    ],
)
def test_missing_lyrics_show_placeholder(
    engine, fake_probe, fake_provider, executor, drain_events, track_a, snapshot_of,
    result, placeholder,
):
    fake_probe.queue(snapshot_of("Song A", "Artist X"))
    fake_provider.results[track_a] = result

    engine.handle(Tick())
    executor.run_pending()
    drain_events(engine)

    state = engine.snapshot()
    assert state.lyrics is None
    assert state.lyrics_display == placeholder
    assert state.last_error is None


def test_provider_crash_still_completes_fetch(
    engine, fake_probe, fake_provider, executor, drain_events, track_a, snapshot_of
):
    fake_probe.queue(snapshot_of("Song A", "Artist X"))
    fake_provider.results[track_a] = RuntimeError("selector changed")

    engine.handle(Tick())
    executor.run_pending()
    drain_events(engine)

    state = engine.snapshot()
    assert not state.fetch_in_flight
    assert state.placeholder == "Error parsing lyrics"


def test_unknown_event_rejected(engine):
    with pytest.raises(TypeError):
        engine.handle(object())
