from __future__ import annotations

import time
from typing import Callable

from srtsync.exceptions import ClockUnavailableError


class SimulatedClock:
    """
    Stand-in player clock that advances with wall time.

    Reports ClockUnavailableError for `ready_after` seconds after creation,
    mimicking a player that is still initializing.
    """

    def __init__(
        self,
        *,
        speed: float = 1.0,
        ready_after: float = 0.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.speed = speed
        self._timer = timer
        self._created = timer()
        self._ready_after = ready_after
        # media time 0 is the moment the clock becomes ready
        self._anchor_wall = self._created + ready_after
        self._anchor_media = 0.0

    def _ready(self) -> bool:
        return self._timer() - self._created >= self._ready_after

    def current_time(self) -> float:
        if not self._ready():
            raise ClockUnavailableError()
        return self._anchor_media + (self._timer() - self._anchor_wall) * self.speed

    def seek_to(self, seconds: float) -> None:
        if not self._ready():
            raise ClockUnavailableError()
        self._anchor_wall = self._timer()
        self._anchor_media = max(0.0, seconds)
