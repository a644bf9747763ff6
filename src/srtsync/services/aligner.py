"""
Bilingual track alignment.

Pairs primary and secondary entries block by block and re-slices each pair
onto one shared set of time slots, so both lines switch at the same moment.

Notes:
- The primary entry's window is the time source for every pair.
- The track with more chunks in a block supplies the slot boundaries;
  the other track shows whichever of its chunks is in effect at each
  slot's midpoint.
- Pairing is positional. Tracks authored with different block boundaries
  will drift; no fuzzy matching is attempted.
"""

from __future__ import annotations

from typing import Sequence

from srtsync.domain.entries import AlignedTracks, Entry
from srtsync.services.expander import expand_entry
from srtsync.services.segmenter import MAX_CHUNK_CHARS, chunk_at, chunks_of, ratios_of
from srtsync.utils.logging import get_logger

log = get_logger(__name__)


def _align_block(
    primary: Entry,
    secondary: Entry,
    *,
    max_chars: int,
) -> tuple[list[Entry], list[Entry]]:
    start = primary.start
    duration = primary.end - primary.start

    p_chunks = chunks_of(primary.text, max_chars)
    s_chunks = chunks_of(secondary.text, max_chars)
    p_ratios = ratios_of(p_chunks)
    s_ratios = ratios_of(s_chunks)

    primary_is_master = len(p_chunks) >= len(s_chunks)
    if primary_is_master:
        master_chunks, master_ratios = p_chunks, p_ratios
        other_chunks, other_ratios = s_chunks, s_ratios
    else:
        master_chunks, master_ratios = s_chunks, s_ratios
        other_chunks, other_ratios = p_chunks, p_ratios

    primary_out: list[Entry] = []
    secondary_out: list[Entry] = []
    for j, master_text in enumerate(master_chunks):
        r_mid = (master_ratios[j] + master_ratios[j + 1]) / 2
        slot_start = start + master_ratios[j] * duration
        slot_end = start + master_ratios[j + 1] * duration
        other_text = chunk_at(other_chunks, other_ratios, r_mid)

        if primary_is_master:
            p_text, s_text = master_text, other_text
        else:
            p_text, s_text = other_text, master_text
        primary_out.append(Entry(start=slot_start, end=slot_end, text=p_text))
        secondary_out.append(Entry(start=slot_start, end=slot_end, text=s_text))
    return primary_out, secondary_out


def align_entries(
    primary_entries: Sequence[Entry],
    secondary_entries: Sequence[Entry],
    *,
    max_chars: int = MAX_CHUNK_CHARS,
) -> AlignedTracks:
    primary_subs: list[Entry] = []
    secondary_subs: list[Entry] = []
    paired = min(len(primary_entries), len(secondary_entries))

    for primary, secondary in zip(primary_entries[:paired], secondary_entries[:paired]):
        p_slots, s_slots = _align_block(primary, secondary, max_chars=max_chars)
        primary_subs.extend(p_slots)
        secondary_subs.extend(s_slots)

    # Primary blocks past the end of the secondary track stand alone.
    for primary in primary_entries[paired:]:
        primary_subs.extend(expand_entry(primary, max_chars=max_chars))

    if len(primary_entries) != len(secondary_entries):
        log.info(
            "Track length mismatch: primary=%d secondary=%d blocks; aligned first %d",
            len(primary_entries),
            len(secondary_entries),
            paired,
        )
    return AlignedTracks(
        primary_subs=tuple(primary_subs),
        secondary_subs=tuple(secondary_subs),
    )
