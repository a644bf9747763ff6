"""
SRT parsing for SRTSync.

Turns raw time-coded caption text into an ordered list of Entry objects.

Responsibilities:
- Tolerate CRLF/CR line endings, a leading BOM and loosely formatted timecodes
- Drop malformed blocks instead of failing the whole file
- Render entries back to SRT for export

Does NOT:
- Sort, de-duplicate or fix overlapping entries (structural parse only)
- Read files (callers hand in text)
"""

from __future__ import annotations

import re
from typing import Iterable

from srtsync.domain.entries import Entry
from srtsync.utils.logging import get_logger

log = get_logger(__name__)

TIMECODE_SEPARATOR = "-->"
BLOCK_SPLIT_RE = re.compile(r"\n(?:[ \t]*\n)+")
TIMECODE_PATTERN = r"\d+:\d{2}:\d{2}[,.:]\d{1,3}"
TIMING_LINE_RE = re.compile(rf"({TIMECODE_PATTERN})\s*-->\s*({TIMECODE_PATTERN})")
TIMECODE_RE = re.compile(r"^(\d+):(\d{2}):(\d{2})[,.:](\d{1,3})$")


def tc_to_sec(tc: str) -> float:
    """
    Convert `H:MM:SS,mmm` to seconds.

    The fractional part is right-padded to milliseconds, so `0:00:01,5`
    is 1.5 seconds. `,`, `.` and `:` are accepted before the fraction.
    """
    match = TIMECODE_RE.match(tc.strip())
    if not match:
        raise ValueError(f"Invalid timecode: {tc!r}")
    hours, minutes, seconds, frac = match.groups()
    millis = int(frac.ljust(3, "0"))
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + millis / 1000


def format_srt_time(seconds: float) -> str:
    # seconds -> "HH:MM:SS,mmm"
    if seconds < 0:
        seconds = 0.0
    total_ms = int(round(seconds * 1000))
    hh, rem = divmod(total_ms, 3_600_000)
    mm, rem = divmod(rem, 60_000)
    ss, ms = divmod(rem, 1000)
    return f"{hh:02d}:{mm:02d}:{ss:02d},{ms:03d}"


def _normalize_newlines(raw: str) -> str:
    text = raw.lstrip("\ufeff")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _parse_block(block: str) -> Entry | None:
    lines = block.strip().split("\n")
    timing_idx = next(
        (i for i, line in enumerate(lines) if TIMECODE_SEPARATOR in line),
        None,
    )
    if timing_idx is None:
        return None

    match = TIMING_LINE_RE.search(lines[timing_idx])
    if not match:
        log.debug("Skipping block with unparsable timing line: %r", lines[timing_idx])
        return None

    start = tc_to_sec(match.group(1))
    end = tc_to_sec(match.group(2))
    if end < start:
        log.debug("Skipping block whose end precedes its start: %r", lines[timing_idx])
        return None

    text = " ".join(lines[timing_idx + 1 :]).strip()
    if not text:
        return None
    return Entry(start=start, end=end, text=text)


def parse_srt(raw: str) -> list[Entry]:
    """Parse SRT text into entries, preserving block order."""
    text = _normalize_newlines(raw).strip()
    if not text:
        return []

    entries: list[Entry] = []
    blocks = BLOCK_SPLIT_RE.split(text)
    for block in blocks:
        entry = _parse_block(block)
        if entry is not None:
            entries.append(entry)

    dropped = len(blocks) - len(entries)
    if dropped:
        log.debug("Dropped %d malformed SRT block(s)", dropped)
    return entries


def render_srt(entries: Iterable[Entry]) -> str:
    lines: list[str] = []
    for idx, entry in enumerate(entries, start=1):
        lines.append(str(idx))
        lines.append(f"{format_srt_time(entry.start)} --> {format_srt_time(entry.end)}")
        lines.append(entry.text)
        lines.append("")
    if not lines:
        return ""
    return "\n".join(lines).strip() + "\n"
