from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from srtsync.domain.session import SyncState

if TYPE_CHECKING:
    from srtsync.services.playlist import PlaylistItem
    from srtsync.services.preferences import Preferences


class PlaybackClock(Protocol):
    """External player. `current_time` raises ClockUnavailableError until ready."""

    def current_time(self) -> float: ...

    def seek_to(self, seconds: float) -> None: ...


class SubtitleRenderer(Protocol):
    def render(self, state: SyncState) -> None: ...


class PlaylistSource(Protocol):
    def fetch(self) -> list[PlaylistItem]: ...

    def read_subtitle(self, ref: str | None) -> str | None: ...


class PreferenceStore(Protocol):
    def load(self) -> Preferences: ...

    def save(self, prefs: Preferences) -> None: ...

    def get_progress(self, video_id: str) -> int: ...

    def save_progress(self, video_id: str, seconds: float) -> None: ...
