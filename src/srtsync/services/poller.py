"""
Playback-clock polling for SRTSync.

A SyncPoller samples the player clock at a fixed cadence, resolves the
active primary/secondary entries and publishes the latest pair. A
PlaybackController owns at most one poller at a time and handles progress
restore/save around it.

Responsibilities:
- Run on a single asyncio loop; one periodic task per session
- Treat an unready clock as a skipped tick
- Keep only the newest state (no queueing)

Does NOT:
- Parse or segment subtitles (done once per load, before polling)
- Render anything itself (renderers receive SyncState)
"""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence

from srtsync.config.settings import Settings
from srtsync.domain.contracts import PlaybackClock, PreferenceStore, SubtitleRenderer
from srtsync.domain.entries import Entry
from srtsync.domain.session import Session, SyncState
from srtsync.exceptions import ClockUnavailableError, PlaybackError
from srtsync.services.resolver import find_active
from srtsync.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 0.1

PLAYER_ERROR_MESSAGES = {
    100: "Video not found; check that the URL is correct.",
    101: "The video owner does not allow playback outside the original site.",
    150: "The video owner does not allow playback outside the original site.",
}

StateListener = Callable[[SyncState], None]


class SyncPoller:
    def __init__(
        self,
        clock: PlaybackClock | None,
        primary_subs: Sequence[Entry],
        secondary_subs: Sequence[Entry] = (),
        *,
        renderer: SubtitleRenderer | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_state: StateListener | None = None,
    ) -> None:
        self.clock = clock
        self.primary_subs = primary_subs
        self.secondary_subs = secondary_subs
        self.renderer = renderer
        self.interval = interval
        self.on_state = on_state
        self.latest: SyncState | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> SyncState | None:
        """Sample the clock once. Returns None when the sample was skipped."""
        if self.clock is None:
            return None
        try:
            t = self.clock.current_time()
        except ClockUnavailableError:
            log.debug("Clock not ready; skipping tick")
            return None

        state = SyncState(
            primary=find_active(self.primary_subs, t) if self.primary_subs else None,
            secondary=find_active(self.secondary_subs, t) if self.secondary_subs else None,
            current_time=t,
        )
        self.latest = state
        if self.renderer is not None:
            self.renderer.render(state)
        if self.on_state is not None:
            self.on_state(state)
        return state

    async def run(self) -> None:
        self._running = True
        try:
            while self._running:
                self.tick()
                await asyncio.sleep(self.interval)
        finally:
            self._running = False

    def stop(self) -> None:
        self._running = False


class PlaybackController:
    """
    Drives one session's poller at a time.

    Starting a new session stops the previous poller first, so two sessions
    never publish to the renderer concurrently.
    """

    def __init__(
        self,
        store: PreferenceStore | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.store = store
        self.session: Session | None = None
        self.poller: SyncPoller | None = None
        self._task: asyncio.Task | None = None
        self._clock: PlaybackClock | None = None
        self._pending_seek: float | None = None
        self._last_saved = 0.0

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def start(
        self,
        session: Session,
        clock: PlaybackClock,
        renderer: SubtitleRenderer | None = None,
    ) -> asyncio.Task:
        """Replace any running session and start polling. Needs a running event loop."""
        self.stop()

        self.session = session
        self._clock = clock
        self._last_saved = 0.0
        self._pending_seek = self._resume_position(session.video_id)
        self._apply_pending_seek()

        self.poller = SyncPoller(
            clock,
            session.primary_subs,
            session.secondary_subs,
            renderer=renderer,
            interval=self.settings.poll_interval,
            on_state=self._on_state,
        )
        self._task = asyncio.get_running_loop().create_task(self.poller.run())
        log.info(
            "Polling started for %s (%d primary, %d secondary entries)",
            session.video_id,
            len(session.primary_subs),
            len(session.secondary_subs),
        )
        return self._task

    def stop(self) -> None:
        if self.poller is not None:
            self.poller.stop()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if self.session is not None:
            log.debug("Polling stopped for %s", self.session.video_id)
        self.poller = None
        self._task = None
        self._clock = None
        self._pending_seek = None

    def report_player_error(self, code: int) -> None:
        """Stop polling and raise PlaybackError for a player error code."""
        self.stop()
        message = PLAYER_ERROR_MESSAGES.get(code, f"Player reported error code {code}.")
        raise PlaybackError(message)

    def _resume_position(self, video_id: str) -> float | None:
        if self.store is None:
            return None
        saved = self.store.get_progress(video_id)
        if saved > self.settings.resume_threshold_seconds:
            return float(saved)
        return None

    def _apply_pending_seek(self) -> None:
        if self._pending_seek is None or self._clock is None:
            return
        try:
            self._clock.seek_to(self._pending_seek)
        except ClockUnavailableError:
            log.debug("Clock not ready; deferring resume seek")
            return
        log.info("Resumed playback at %.0fs", self._pending_seek)
        self._last_saved = self._pending_seek
        self._pending_seek = None

    def _on_state(self, state: SyncState) -> None:
        if self._pending_seek is not None:
            self._apply_pending_seek()
            return
        if self.store is None or self.session is None:
            return
        t = state.current_time
        if t < self._last_saved:
            self._last_saved = t
        if t > 0 and t - self._last_saved >= self.settings.progress_save_interval:
            self.store.save_progress(self.session.video_id, t)
            self._last_saved = t
