"""
Caption text segmentation.

Splits one entry's text into display-sized chunks and describes each chunk's
share of the text as cumulative character ratios, so time can be
redistributed proportionally.

Split order: sentences, then the whitespace/CJK punctuation nearest the
midpoint, then a hard cut at the character limit.
"""

from __future__ import annotations

import re
from typing import Sequence

MAX_CHUNK_CHARS = 100

_MISSING_SPACE_RE = re.compile(r"([.!?])([A-Z])")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+|(?<=[。！？])")
_BREAK_CHAR_RE = re.compile(r"[\s，、；。！？]")


def split_sentences(text: str) -> list[str]:
    spaced = _MISSING_SPACE_RE.sub(r"\1 \2", text)
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(spaced) if s.strip()]


def _natural_break(text: str) -> tuple[str, str] | None:
    # Nearest break to the midpoint wins; left side is checked first on ties.
    mid = len(text) // 2
    for offset in range(mid + 1):
        for pos in (mid - offset, mid + offset):
            if pos <= 0 or pos >= len(text):
                continue
            if _BREAK_CHAR_RE.match(text[pos]):
                left = text[: pos + 1].strip()
                right = text[pos + 1 :].strip()
                if left and right:
                    return left, right
    return None


def split_long(text: str, max_chars: int = MAX_CHUNK_CHARS) -> list[str]:
    """Recursively halve `text` until every piece fits within `max_chars`."""
    if len(text) <= max_chars:
        return [text]
    halves = _natural_break(text)
    if halves is None:
        halves = (text[:max_chars], text[max_chars:])
    left, right = halves
    return split_long(left, max_chars) + split_long(right, max_chars)


def chunks_of(text: str, max_chars: int = MAX_CHUNK_CHARS) -> list[str]:
    chunks: list[str] = []
    for sentence in split_sentences(text):
        chunks.extend(split_long(sentence, max_chars))
    return chunks or [text]


def ratios_of(chunks: Sequence[str]) -> list[float]:
    """
    Cumulative character-ratio boundaries for `chunks`.

    Returns len(chunks) + 1 values, starting at 0.0 and ending at 1.0.
    """
    total = sum(len(chunk) for chunk in chunks) or 1
    ratios = [0.0]
    acc = 0
    for chunk in chunks:
        acc += len(chunk)
        ratios.append(acc / total)
    return ratios


def chunk_at(chunks: Sequence[str], ratios: Sequence[float], r: float) -> str:
    """Return the chunk whose [ratios[i], ratios[i + 1]) interval holds `r`."""
    for i, chunk in enumerate(chunks):
        if ratios[i] <= r < ratios[i + 1]:
            return chunk
    return chunks[-1] if chunks else ""
