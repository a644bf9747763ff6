from __future__ import annotations

from dataclasses import dataclass, field

from srtsync.domain.entries import Entry


@dataclass(frozen=True)
class Session:
    """One loaded video with its display-ready subtitle tracks."""

    video_id: str
    primary_subs: tuple[Entry, ...]
    secondary_subs: tuple[Entry, ...] = ()
    stats: str = ""
    step_timings: dict[str, float] = field(default_factory=dict)

    @property
    def is_bilingual(self) -> bool:
        return bool(self.secondary_subs)


@dataclass(frozen=True)
class SyncState:
    """The resolved pair published to the renderer for one clock sample."""

    primary: Entry | None
    secondary: Entry | None
    current_time: float
