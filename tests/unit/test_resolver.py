from __future__ import annotations

import pytest

from srtsync.domain.entries import Entry
from srtsync.services.resolver import find_active


def test_gap_between_entries_resolves_to_none() -> None:
    subs = [Entry(0.0, 2.0, "a"), Entry(3.0, 5.0, "b")]

    assert find_active(subs, 2.5) is None


def test_inside_each_entry_returns_that_entry() -> None:
    subs = [Entry(float(i), i + 0.8, f"line {i}") for i in range(9)]

    for entry in subs:
        assert find_active(subs, entry.start + 0.4) is entry


def test_outside_the_track_returns_none() -> None:
    subs = [Entry(1.0, 2.0, "a"), Entry(2.0, 3.0, "b")]

    assert find_active(subs, 0.5) is None
    assert find_active(subs, 3.5) is None
    assert find_active([], 1.0) is None


def test_shared_boundary_resolves_to_later_entry() -> None:
    subs = [Entry(0.0, 2.0, "a"), Entry(2.0, 4.0, "b")]

    assert find_active(subs, 0.0).text == "a"
    assert find_active(subs, 2.0).text == "b"
    assert find_active(subs, 4.0) is None


def test_does_not_mutate_input() -> None:
    subs = [Entry(0.0, 1.0, "a"), Entry(1.0, 2.0, "b")]
    snapshot = list(subs)

    find_active(subs, 1.5)

    assert subs == snapshot


@pytest.mark.parametrize("t", [0.0, 0.05, 123.45, 499.9, 999.95])
def test_large_contiguous_track(t: float) -> None:
    subs = [Entry(i * 0.1, (i + 1) * 0.1, str(i)) for i in range(10_000)]

    found = find_active(subs, t)

    assert found is not None
    assert found.start <= t < found.end
