from __future__ import annotations

import inspect
from pathlib import Path
from typing import Callable

import pytest
import typer.testing


def _patch_clirunner() -> None:
    if "mix_stderr" in inspect.signature(typer.testing.CliRunner).parameters:
        return

    class PatchedCliRunner(typer.testing.CliRunner):
        def __init__(self, *args, **kwargs):  # noqa: ANN002, ANN003
            kwargs.pop("mix_stderr", None)
            super().__init__(*args, **kwargs)

    typer.testing.CliRunner = PatchedCliRunner


_patch_clirunner()


PRIMARY_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:03,000\n"
    "Hello world.\n"
    "\n"
    "2\n"
    "00:00:04,000 --> 00:00:06,000\n"
    "Bye. See you.\n"
)

SECONDARY_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:03,000\n"
    "你好，世界。\n"
    "\n"
    "2\n"
    "00:00:04,000 --> 00:00:06,000\n"
    "再见。\n"
)


@pytest.fixture
def write_srt(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SRTSYNC_PREFS_PATH", str(tmp_path / "prefs.json"))
    monkeypatch.delenv("SRTSYNC_PLAYLIST_PATH", raising=False)
    monkeypatch.delenv("SRTSYNC_MAX_CHUNK_CHARS", raising=False)


@pytest.fixture
def primary_srt() -> str:
    return PRIMARY_SRT


@pytest.fixture
def secondary_srt() -> str:
    return SECONDARY_SRT
