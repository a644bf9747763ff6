"""
Display preferences and playback progress persistence.

Saved JSON is merged over the defaults field by field, so preferences written
by an older version still pick up newly added defaults.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Literal, get_args

from pydantic import BaseModel, Field, ValidationError

from srtsync.utils.logging import get_logger

log = get_logger(__name__)

SubtitleMode = Literal["off", "primary", "both", "secondary"]
AspectRatio = Literal["16:9", "4:3", "21:9", "9:16"]

PROGRESS_MIN_SECONDS = 5.0


class SubtitleStyle(BaseModel):
    font_size: int = Field(default=22, ge=8, le=96)
    color: str = "#ffffff"
    background_color: str = "rgba(0,0,0,0.78)"


def _default_secondary_style() -> SubtitleStyle:
    return SubtitleStyle(font_size=17, color="#fde08d", background_color="rgba(0,0,0,0.65)")


class SubtitleStyles(BaseModel):
    primary: SubtitleStyle = Field(default_factory=SubtitleStyle)
    secondary: SubtitleStyle = Field(default_factory=_default_secondary_style)


class VideoSettings(BaseModel):
    width: int = Field(default=100, ge=10, le=100, description="Player width in percent.")
    aspect_ratio: AspectRatio = "16:9"


class Preferences(BaseModel):
    video_settings: VideoSettings = Field(default_factory=VideoSettings)
    subtitle_styles: SubtitleStyles = Field(default_factory=SubtitleStyles)
    subtitle_mode: SubtitleMode = "both"
    progress: dict[str, int] = Field(default_factory=dict)


def _merge_section(default: BaseModel, saved: Any) -> dict[str, Any]:
    merged = default.model_dump()
    if isinstance(saved, dict):
        merged.update({k: v for k, v in saved.items() if k in merged})
    return merged


def merge_preferences(saved: Any) -> Preferences:
    """
    Merge saved overrides over defaults, one field at a time.

    Unknown keys are ignored. A section that fails validation falls back
    to its defaults without discarding the other sections.
    """
    defaults = Preferences()
    if not isinstance(saved, dict):
        return defaults

    video_raw = _merge_section(defaults.video_settings, saved.get("video_settings"))
    styles_saved = saved.get("subtitle_styles")
    if not isinstance(styles_saved, dict):
        styles_saved = {}
    primary_raw = _merge_section(defaults.subtitle_styles.primary, styles_saved.get("primary"))
    secondary_raw = _merge_section(defaults.subtitle_styles.secondary, styles_saved.get("secondary"))

    try:
        video_settings = VideoSettings.model_validate(video_raw)
    except ValidationError:
        log.warning("Ignoring invalid saved video settings")
        video_settings = defaults.video_settings
    try:
        primary = SubtitleStyle.model_validate(primary_raw)
    except ValidationError:
        log.warning("Ignoring invalid saved primary subtitle style")
        primary = defaults.subtitle_styles.primary
    try:
        secondary = SubtitleStyle.model_validate(secondary_raw)
    except ValidationError:
        log.warning("Ignoring invalid saved secondary subtitle style")
        secondary = defaults.subtitle_styles.secondary

    mode = saved.get("subtitle_mode", defaults.subtitle_mode)
    if mode not in get_args(SubtitleMode):
        mode = defaults.subtitle_mode

    progress: dict[str, int] = {}
    saved_progress = saved.get("progress")
    if isinstance(saved_progress, dict):
        for video_id, seconds in saved_progress.items():
            if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
                continue
            # json accepts NaN, Infinity and 1e999
            if isinstance(seconds, float) and not math.isfinite(seconds):
                continue
            if seconds >= 0:
                progress[str(video_id)] = int(seconds)

    return Preferences(
        video_settings=video_settings,
        subtitle_styles=SubtitleStyles(primary=primary, secondary=secondary),
        subtitle_mode=mode,
        progress=progress,
    )


class JsonPreferenceStore:
    """Preferences kept in a single JSON file, keyed by video id for progress."""

    def __init__(self, path: str | Path, *, min_progress_seconds: float = PROGRESS_MIN_SECONDS) -> None:
        self.path = Path(path).expanduser()
        self.min_progress_seconds = min_progress_seconds
        self._prefs: Preferences | None = None

    def load(self) -> Preferences:
        if self._prefs is not None:
            return self._prefs
        saved: Any = None
        if self.path.exists():
            try:
                saved = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                log.warning("Could not read preferences from %s: %s", self.path, exc)
        self._prefs = merge_preferences(saved)
        return self._prefs

    def save(self, prefs: Preferences) -> None:
        self._prefs = prefs
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(prefs.model_dump(), indent=2), encoding="utf-8")
        except OSError as exc:
            log.warning("Could not write preferences to %s: %s", self.path, exc)

    def get_progress(self, video_id: str) -> int:
        return self.load().progress.get(video_id, 0)

    def save_progress(self, video_id: str, seconds: float) -> None:
        """Persist whole seconds for `video_id`; ignored below the minimum position."""
        if not video_id or seconds < self.min_progress_seconds:
            return
        prefs = self.load()
        progress = {**prefs.progress, video_id: int(math.floor(seconds))}
        self.save(prefs.model_copy(update={"progress": progress}))

    def update(self, **fields: Any) -> Preferences:
        prefs = Preferences.model_validate({**self.load().model_dump(), **fields})
        self.save(prefs)
        return prefs
