from .base import RecordingRenderer, RenderedLine, visible_lines
from .terminal import TerminalRenderer

__all__ = ["RecordingRenderer", "RenderedLine", "TerminalRenderer", "visible_lines"]
