from __future__ import annotations

from srtsync.domain.entries import Entry, Track


def find_active(subs: Track, t: float) -> Entry | None:
    """
    Binary-search the entry active at time `t`.

    `subs` must be sorted by start and non-overlapping. Intervals are
    half-open, [start, end), so a time on a shared boundary resolves to
    the later entry and a time equal to the last end resolves to None.
    """
    lo, hi = 0, len(subs) - 1
    while lo <= hi:
        mid = (lo + hi) // 2
        entry = subs[mid]
        if t < entry.start:
            hi = mid - 1
        elif t >= entry.end:
            lo = mid + 1
        else:
            return entry
    return None
