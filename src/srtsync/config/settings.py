from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration for SRTSync.

    All settings are loaded from environment variables with the
    `SRTSYNC_` prefix and optional `.env` support.
    """

    model_config = SettingsConfigDict(
        env_prefix="SRTSYNC_",
        env_file=".env",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Segmentation
    # ------------------------------------------------------------------
    max_chunk_chars: int = Field(
        default=100,
        gt=0,
        description="Maximum characters per displayed subtitle chunk.",
    )

    # ------------------------------------------------------------------
    # Playback sync
    # ------------------------------------------------------------------
    poll_interval: float = Field(
        default=0.1,
        gt=0,
        description="Seconds between playback clock samples.",
    )
    resume_threshold_seconds: float = Field(
        default=10.0,
        description="Saved positions above this are restored with a seek on start.",
    )
    progress_min_seconds: float = Field(
        default=5.0,
        description="Positions below this are never persisted.",
    )
    progress_save_interval: float = Field(
        default=5.0,
        gt=0,
        description="Playback seconds between progress saves.",
    )

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    prefs_path: str = Field(
        default="~/.srtsync/prefs.json",
        description="JSON file holding display preferences and playback progress.",
    )
    playlist_path: str | None = Field(
        default=None,
        description="playlist.json listing media and subtitle files.",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )

    def to_public_dict(self) -> dict:
        """Return settings suitable for logging or CLI display."""
        return {
            "max_chunk_chars": self.max_chunk_chars,
            "poll_interval": self.poll_interval,
            "resume_threshold_seconds": self.resume_threshold_seconds,
            "progress_min_seconds": self.progress_min_seconds,
            "progress_save_interval": self.progress_save_interval,
            "prefs_path": self.prefs_path,
            "playlist_path": self.playlist_path,
            "log_level": self.log_level,
        }
