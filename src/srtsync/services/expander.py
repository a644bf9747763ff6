from __future__ import annotations

from typing import Iterable

from srtsync.domain.entries import Entry
from srtsync.services.segmenter import MAX_CHUNK_CHARS, chunks_of, ratios_of


def expand_entry(entry: Entry, *, max_chars: int = MAX_CHUNK_CHARS) -> list[Entry]:
    """Split one entry into chunk-sized entries spanning the same time range."""
    chunks = chunks_of(entry.text, max_chars)
    if len(chunks) <= 1:
        return [entry]

    ratios = ratios_of(chunks)
    duration = entry.end - entry.start
    return [
        Entry(
            start=entry.start + ratios[i] * duration,
            end=entry.start + ratios[i + 1] * duration,
            text=chunk,
        )
        for i, chunk in enumerate(chunks)
    ]


def expand_entries(entries: Iterable[Entry], *, max_chars: int = MAX_CHUNK_CHARS) -> list[Entry]:
    expanded: list[Entry] = []
    for entry in entries:
        expanded.extend(expand_entry(entry, max_chars=max_chars))
    return expanded
