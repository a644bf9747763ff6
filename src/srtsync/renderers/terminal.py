from __future__ import annotations

import re

import typer

from srtsync.domain.session import SyncState
from srtsync.renderers.base import visible_lines
from srtsync.services.preferences import SubtitleMode, SubtitleStyles
from srtsync.services.srt import format_srt_time

_HEX_COLOR_RE = re.compile(r"^#([0-9a-fA-F]{6})$")


def _hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    match = _HEX_COLOR_RE.match(color.strip())
    if not match:
        return None
    value = match.group(1)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class TerminalRenderer:
    """Echo the active subtitle pair whenever it changes."""

    def __init__(
        self,
        *,
        mode: SubtitleMode = "both",
        styles: SubtitleStyles | None = None,
        color: bool = True,
    ) -> None:
        self.mode = mode
        self.styles = styles or SubtitleStyles()
        self.color = color
        self._last: tuple[str, ...] | None = None

    def render(self, state: SyncState) -> None:
        lines = visible_lines(state, mode=self.mode, styles=self.styles)
        key = tuple(line.text for line in lines)
        if key == self._last:
            return
        self._last = key
        if not lines:
            return
        stamp = format_srt_time(state.current_time)
        for line in lines:
            text = line.text
            if self.color:
                text = typer.style(text, fg=_hex_to_rgb(line.style.color))
            typer.echo(f"[{stamp}] {text}")
