from __future__ import annotations

import asyncio
from contextlib import suppress

import pytest

from srtsync.config.settings import Settings
from srtsync.domain.entries import Entry
from srtsync.domain.session import Session
from srtsync.exceptions import ClockUnavailableError, PlaybackError
from srtsync.renderers.base import RecordingRenderer
from srtsync.services.poller import PlaybackController, SyncPoller

PRIMARY = (Entry(0.0, 2.0, "hello"), Entry(2.0, 4.0, "world"))
SECONDARY = (Entry(0.0, 2.0, "你好"), Entry(2.0, 4.0, "世界"))


class FakeClock:
    def __init__(self, t: float = 0.0, *, ready: bool = True) -> None:
        self.t = t
        self.ready = ready
        self.seeks: list[float] = []

    def current_time(self) -> float:
        if not self.ready:
            raise ClockUnavailableError()
        return self.t

    def seek_to(self, seconds: float) -> None:
        if not self.ready:
            raise ClockUnavailableError()
        self.seeks.append(seconds)
        self.t = seconds


class MemoryStore:
    def __init__(self, progress: dict[str, int] | None = None) -> None:
        self.progress = dict(progress or {})
        self.saved: list[tuple[str, float]] = []

    def get_progress(self, video_id: str) -> int:
        return self.progress.get(video_id, 0)

    def save_progress(self, video_id: str, seconds: float) -> None:
        self.saved.append((video_id, seconds))
        self.progress[video_id] = int(seconds)


def _settings(**overrides) -> Settings:
    settings = Settings()
    settings.poll_interval = 0.001
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def test_tick_resolves_both_tracks_and_publishes() -> None:
    renderer = RecordingRenderer()
    poller = SyncPoller(FakeClock(2.5), PRIMARY, SECONDARY, renderer=renderer)

    state = poller.tick()

    assert state is not None
    assert state.primary.text == "world"
    assert state.secondary.text == "世界"
    assert state.current_time == 2.5
    assert renderer.states == [state]
    assert poller.latest is state


def test_empty_secondary_always_resolves_to_none() -> None:
    state = SyncPoller(FakeClock(1.0), PRIMARY).tick()

    assert state.primary.text == "hello"
    assert state.secondary is None


def test_unready_clock_skips_tick() -> None:
    renderer = RecordingRenderer()
    poller = SyncPoller(FakeClock(ready=False), PRIMARY, renderer=renderer)

    assert poller.tick() is None
    assert poller.latest is None
    assert renderer.states == []


def test_missing_clock_skips_tick() -> None:
    assert SyncPoller(None, PRIMARY).tick() is None


def test_latest_state_is_overwritten() -> None:
    clock = FakeClock(0.5)
    poller = SyncPoller(clock, PRIMARY)
    poller.tick()
    clock.t = 3.0

    poller.tick()

    assert poller.latest.primary.text == "world"


def test_run_loops_until_stopped() -> None:
    renderer = RecordingRenderer()
    clock = FakeClock()
    poller = SyncPoller(clock, PRIMARY, renderer=renderer, interval=0)

    def _advance(state) -> None:
        clock.t += 1.0
        if clock.t >= 3.0:
            poller.stop()

    poller.on_state = _advance
    asyncio.run(poller.run())

    assert [s.current_time for s in renderer.states] == [0.0, 1.0, 2.0]
    assert poller.running is False


def test_controller_restores_progress_above_threshold() -> None:
    store = MemoryStore({"vid": 42})
    clock = FakeClock()

    async def scenario() -> None:
        controller = PlaybackController(store, settings=_settings())
        task = controller.start(Session("vid", PRIMARY), clock)
        controller.stop()
        with suppress(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert clock.seeks == [42.0]


@pytest.mark.parametrize("saved", [0, 10])
def test_controller_does_not_seek_at_or_below_threshold(saved: int) -> None:
    clock = FakeClock()

    async def scenario() -> None:
        controller = PlaybackController(MemoryStore({"vid": saved}), settings=_settings())
        task = controller.start(Session("vid", PRIMARY), clock)
        controller.stop()
        with suppress(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert clock.seeks == []


def test_controller_defers_seek_until_clock_is_ready() -> None:
    clock = FakeClock(ready=False)

    async def scenario() -> None:
        controller = PlaybackController(MemoryStore({"vid": 30}), settings=_settings())
        task = controller.start(Session("vid", PRIMARY), clock)
        assert clock.seeks == []
        clock.ready = True
        controller.poller.tick()
        controller.stop()
        with suppress(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert clock.seeks == [30.0]


def test_controller_saves_progress_every_interval() -> None:
    store = MemoryStore()
    clock = FakeClock()

    async def scenario() -> None:
        controller = PlaybackController(store, settings=_settings())
        task = controller.start(Session("vid", PRIMARY), clock)
        for t in (1.0, 4.9, 5.0, 7.0, 10.5, 12.0):
            clock.t = t
            controller.poller.tick()
        controller.stop()
        with suppress(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert store.saved == [("vid", 5.0), ("vid", 10.5)]


def test_starting_a_new_session_stops_the_previous_poller() -> None:
    clock = FakeClock(1.0)
    first_renderer = RecordingRenderer()
    second_renderer = RecordingRenderer()

    async def scenario() -> tuple:
        controller = PlaybackController(settings=_settings())
        first_task = controller.start(Session("one", PRIMARY), clock, first_renderer)
        first_poller = controller.poller
        await asyncio.sleep(0)
        second_task = controller.start(Session("two", SECONDARY), clock, second_renderer)
        await asyncio.gather(first_task, return_exceptions=True)
        published_before = len(first_renderer.states)
        await asyncio.sleep(0.01)
        controller.stop()
        await asyncio.gather(second_task, return_exceptions=True)
        return first_task, first_poller, published_before

    first_task, first_poller, published_before = asyncio.run(scenario())

    assert first_task.done()
    assert first_poller.running is False
    assert len(first_renderer.states) == published_before
    assert second_renderer.states
    assert second_renderer.states[0].primary.text == "你好"


@pytest.mark.parametrize(
    ("code", "fragment"),
    [(100, "not found"), (101, "does not allow"), (150, "does not allow"), (5, "error code 5")],
)
def test_player_errors_raise_playback_error(code: int, fragment: str) -> None:
    controller = PlaybackController(settings=_settings())

    with pytest.raises(PlaybackError) as excinfo:
        controller.report_player_error(code)

    assert fragment in str(excinfo.value)
    assert controller.poller is None
