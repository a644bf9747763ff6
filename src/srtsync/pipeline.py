"""
Session loading for SRTSync.

Turns a video URL plus one or two subtitle documents into a display-ready
Session:

1) Parse the primary (and optional secondary) SRT text
2) Align both tracks, or expand the primary track alone
3) Record step timings and a summary line

Responsibilities:
- Validate that the required inputs are present
- Run the pure subtitle stages once, before any polling starts

Does NOT:
- Poll the playback clock (services.poller does)
- Decide where subtitle text comes from beyond files and playlists
"""

from __future__ import annotations

import re
from pathlib import Path

from srtsync.config.settings import Settings
from srtsync.domain.contracts import PlaylistSource
from srtsync.domain.session import Session
from srtsync.exceptions import InputError
from srtsync.services.aligner import align_entries
from srtsync.services.expander import expand_entries
from srtsync.services.playlist import PlaylistItem
from srtsync.services.srt import parse_srt
from srtsync.utils.logging import get_logger
from srtsync.utils.timing import StepTimer

log = get_logger(__name__)

VIDEO_ID_PATTERNS = (
    re.compile(r"[?&]v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"/embed/([a-zA-Z0-9_-]{11})"),
    re.compile(r"/shorts/([a-zA-Z0-9_-]{11})"),
)


def extract_video_id(url: str) -> str | None:
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def read_subtitle_file(path: str | Path) -> str:
    p = Path(path).expanduser()
    try:
        return p.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise InputError(f"Subtitle file not found: {p}") from exc
    except UnicodeDecodeError as exc:
        raise InputError(f"Subtitle file is not UTF-8 text: {p}") from exc


class SessionLoader:
    """
    Builds Sessions from raw subtitle text.

    Each load produces a brand-new Session; nothing is carried over from a
    previous one.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def build_session(
        self,
        video_id: str,
        primary_text: str,
        secondary_text: str | None = None,
    ) -> Session:
        max_chars = self.settings.max_chunk_chars
        timer = StepTimer()

        with timer.step("parse_primary"):
            raw_primary = parse_srt(primary_text)
        if not raw_primary:
            raise InputError("Primary subtitles contain no parsable entries.")

        if secondary_text:
            with timer.step("parse_secondary"):
                raw_secondary = parse_srt(secondary_text)
            with timer.step("align"):
                aligned = align_entries(raw_primary, raw_secondary, max_chars=max_chars)
            primary_subs = aligned.primary_subs
            secondary_subs = aligned.secondary_subs
            stats = (
                f"primary: {len(primary_subs)} lines | "
                f"secondary: {len(secondary_subs)} lines (aligned)"
            )
        else:
            with timer.step("expand"):
                primary_subs = tuple(expand_entries(raw_primary, max_chars=max_chars))
            secondary_subs = ()
            stats = f"primary: {len(raw_primary)} blocks -> {len(primary_subs)} lines"

        log.info("Loaded %s: %s", video_id, stats)
        return Session(
            video_id=video_id,
            primary_subs=primary_subs,
            secondary_subs=secondary_subs,
            stats=stats,
            step_timings=timer.as_dict(),
        )

    def load_files(
        self,
        url: str,
        primary_path: str | Path | None,
        secondary_path: str | Path | None = None,
    ) -> Session:
        if not url:
            raise InputError("A video URL is required.")
        if not primary_path:
            raise InputError("A primary subtitle file is required.")
        video_id = extract_video_id(url)
        if not video_id:
            raise InputError(f"Could not find a video id in URL: {url}")

        primary_text = read_subtitle_file(primary_path)
        secondary_text = read_subtitle_file(secondary_path) if secondary_path else None
        return self.build_session(video_id, primary_text, secondary_text)

    def load_playlist_item(self, item: PlaylistItem, source: PlaylistSource) -> Session:
        video_id = extract_video_id(item.url)
        if not video_id:
            raise InputError(f"Could not find a video id in URL: {item.url}")

        primary_text = source.read_subtitle(item.primary)
        if not primary_text:
            raise InputError(f"Primary subtitle file not available: {item.primary}")
        secondary_text = source.read_subtitle(item.secondary)
        return self.build_session(video_id, primary_text, secondary_text)
