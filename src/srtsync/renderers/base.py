from __future__ import annotations

from dataclasses import dataclass, field

from srtsync.domain.session import SyncState
from srtsync.services.preferences import SubtitleMode, SubtitleStyle, SubtitleStyles


@dataclass(frozen=True)
class RenderedLine:
    track: str
    text: str
    style: SubtitleStyle


def visible_lines(
    state: SyncState,
    *,
    mode: SubtitleMode = "both",
    styles: SubtitleStyles | None = None,
) -> list[RenderedLine]:
    """
    Lines to draw for `state`, filtered by subtitle mode.

    Top to bottom: the secondary line stacks above the primary one.
    Mode "off" draws nothing.
    """
    styles = styles or SubtitleStyles()
    lines: list[RenderedLine] = []
    if mode in ("both", "secondary") and state.secondary is not None:
        lines.append(RenderedLine("secondary", state.secondary.text, styles.secondary))
    if mode in ("both", "primary") and state.primary is not None:
        lines.append(RenderedLine("primary", state.primary.text, styles.primary))
    return lines


@dataclass
class RecordingRenderer:
    """Keeps every published state; for headless runs and tests."""

    states: list[SyncState] = field(default_factory=list)

    def render(self, state: SyncState) -> None:
        self.states.append(state)

    @property
    def latest(self) -> SyncState | None:
        return self.states[-1] if self.states else None
