"""
Playlist catalog loading.

A playlist is a JSON array of records pointing at a playable URL and the
subtitle files that go with it:

    [{"url": "...", "primary": "ep1.en.srt", "secondary": "ep1.zh.srt",
      "playlist": "Season 1", "title": "Episode 1"}]

Subtitle references are resolved relative to the playlist file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ValidationError

from srtsync.exceptions import ConfigurationError
from srtsync.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_GROUP = "Other"


class PlaylistItem(BaseModel):
    url: str
    primary: str | None = None
    secondary: str | None = None
    playlist: str | None = None
    title: str | None = None


class JsonPlaylistSource:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    @property
    def root(self) -> Path:
        return self.path.parent

    def fetch(self) -> list[PlaylistItem]:
        """Load playlist records, keeping only those with a primary subtitle."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Playlist not found: {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Playlist is not valid JSON: {self.path}: {exc}") from exc
        if not isinstance(raw, list):
            raise ConfigurationError(f"Playlist must be a JSON array: {self.path}")

        items: list[PlaylistItem] = []
        for idx, record in enumerate(raw):
            try:
                item = PlaylistItem.model_validate(record)
            except ValidationError as exc:
                log.warning("Skipping playlist record %d: %s", idx, exc.errors()[0]["msg"])
                continue
            if not item.primary:
                continue
            items.append(item)
        return items

    def read_subtitle(self, ref: str | None) -> str | None:
        """Return subtitle text for `ref`, or None when it is absent."""
        if not ref:
            return None
        path = (self.root / ref).expanduser()
        try:
            return path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            log.warning("Subtitle file not found: %s", path)
            return None


def group_playlist(items: Iterable[PlaylistItem]) -> dict[str, list[PlaylistItem]]:
    """Group items by their playlist label, preserving first-seen order."""
    groups: dict[str, list[PlaylistItem]] = {}
    for item in items:
        groups.setdefault(item.playlist or DEFAULT_GROUP, []).append(item)
    return groups


def default_group(groups: dict[str, list[PlaylistItem]], active_video_id: str | None = None) -> str | None:
    """Pick the group holding the active video, else the first group."""
    if active_video_id:
        for name, items in groups.items():
            if any(active_video_id in item.url for item in items):
                return name
    return next(iter(groups), None)
