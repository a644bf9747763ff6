from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    CONFIG = "config"
    INPUT = "input"
    PLAYBACK = "playback"
    RUNTIME = "runtime"


DEFAULT_EXIT_CODES: dict[ErrorCategory, int] = {
    ErrorCategory.RUNTIME: 1,
    ErrorCategory.CONFIG: 2,
    ErrorCategory.INPUT: 3,
    ErrorCategory.PLAYBACK: 4,
}


@dataclass
class SrtSyncError(Exception):
    """Base exception for SRTSync with standardized categories."""

    message: str
    category: ErrorCategory = ErrorCategory.RUNTIME
    exit_code: int | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.exit_code is None:
            self.exit_code = DEFAULT_EXIT_CODES.get(self.category, 1)

    def label(self) -> str:
        return {
            ErrorCategory.CONFIG: "Configuration error",
            ErrorCategory.INPUT: "Input error",
            ErrorCategory.PLAYBACK: "Playback error",
            ErrorCategory.RUNTIME: "Runtime error",
        }.get(self.category, "Error")


class ConfigurationError(SrtSyncError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIG,
            exit_code=exit_code,
        )


class InputError(SrtSyncError):
    """Raised when required inputs (video URL, primary subtitles) are absent or unusable."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.INPUT,
            exit_code=exit_code,
        )


class PlaybackError(SrtSyncError):
    """Raised when the player reports an unrecoverable error."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PLAYBACK,
            exit_code=exit_code,
        )


class ClockUnavailableError(SrtSyncError):
    """Raised by a playback clock that cannot report a time yet."""

    def __init__(self, message: str = "Playback clock not ready.") -> None:
        super().__init__(message, category=ErrorCategory.PLAYBACK)
