from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Entry:
    """A single timed caption unit. Times are seconds from media start."""

    start: float
    end: float
    text: str

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "text": self.text}


Track = Sequence[Entry]


@dataclass(frozen=True)
class AlignedTracks:
    """Two tracks whose paired region shares identical slot boundaries."""

    primary_subs: tuple[Entry, ...]
    secondary_subs: tuple[Entry, ...]
