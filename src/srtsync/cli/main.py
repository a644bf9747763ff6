from __future__ import annotations

import asyncio
import json
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Iterator

import typer

from srtsync.config.settings import Settings
from srtsync.domain.entries import Entry
from srtsync.domain.session import Session
from srtsync.exceptions import ClockUnavailableError, ConfigurationError, InputError, SrtSyncError
from srtsync.pipeline import SessionLoader, read_subtitle_file
from srtsync.renderers.terminal import TerminalRenderer
from srtsync.services.aligner import align_entries
from srtsync.services.clock import SimulatedClock
from srtsync.services.expander import expand_entries
from srtsync.services.playlist import JsonPlaylistSource, default_group, group_playlist
from srtsync.services.poller import PlaybackController
from srtsync.services.preferences import JsonPreferenceStore, Preferences
from srtsync.services.resolver import find_active
from srtsync.services.srt import format_srt_time, parse_srt, render_srt
from srtsync.utils.logging import configure_logging, get_logger

app = typer.Typer(add_completion=False)
log = get_logger(__name__)


@contextmanager
def _reported_errors() -> Iterator[None]:
    try:
        yield
    except SrtSyncError as err:
        typer.echo(f"{err.label()}: {err.message}", err=True)
        raise typer.Exit(code=err.exit_code)


def _load_settings(log_level: str | None = None, max_chars: int | None = None) -> Settings:
    settings = Settings()
    if max_chars is not None:
        if max_chars <= 0:
            raise typer.BadParameter("--max-chars must be positive.")
        settings.max_chunk_chars = max_chars
    configure_logging(log_level or settings.log_level)
    return settings


def _read_srt(path: Path) -> list[Entry]:
    return parse_srt(read_subtitle_file(path))


def _write_or_echo(content: str, out: Path | None) -> None:
    if out is None:
        typer.echo(content, nl=False)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(content, encoding="utf-8")
    typer.echo(f"Wrote {out}")


def _playlist_source(settings: Settings, playlist: str | None) -> JsonPlaylistSource:
    path = playlist or settings.playlist_path
    if not path:
        raise ConfigurationError("No playlist configured. Pass --playlist or set SRTSYNC_PLAYLIST_PATH.")
    return JsonPlaylistSource(path)


def _session_end(session: Session) -> float:
    ends = [e.end for e in session.primary_subs] + [e.end for e in session.secondary_subs]
    return max(ends, default=0.0)


async def _play_session(
    controller: PlaybackController,
    session: Session,
    clock: SimulatedClock,
    renderer: TerminalRenderer,
    *,
    until: float,
) -> None:
    task = controller.start(session, clock, renderer)
    try:
        while not task.done():
            with suppress(ClockUnavailableError):
                if clock.current_time() >= until:
                    break
            await asyncio.sleep(controller.settings.poll_interval)
    finally:
        controller.stop()
        with suppress(asyncio.CancelledError):
            await task


@app.command()
def config() -> None:
    """Print resolved config."""
    s = Settings()
    typer.echo(json.dumps(s.to_public_dict(), indent=2))


@app.command()
def parse(
    subtitle: Path = typer.Argument(..., help="SRT file to parse."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Print parsed entries as JSON."""
    _load_settings(log_level)
    with _reported_errors():
        entries = _read_srt(subtitle)
    typer.echo(json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False))


@app.command()
def expand(
    subtitle: Path = typer.Argument(..., help="SRT file to reflow."),
    out: Path = typer.Option(None, help="Write the expanded SRT here instead of stdout."),
    max_chars: int = typer.Option(None, help="Maximum characters per chunk (overrides config)."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Split long entries into screen-sized lines with proportional timing."""
    settings = _load_settings(log_level, max_chars)
    with _reported_errors():
        entries = _read_srt(subtitle)
        if not entries:
            raise InputError(f"No parsable entries in {subtitle}")
    expanded = expand_entries(entries, max_chars=settings.max_chunk_chars)
    log.info("Expanded %d blocks into %d lines", len(entries), len(expanded))
    _write_or_echo(render_srt(expanded), out)


@app.command()
def align(
    primary: Path = typer.Argument(..., help="Primary-language SRT."),
    secondary: Path = typer.Argument(..., help="Secondary-language SRT."),
    out_dir: Path = typer.Option(None, help="Directory for the two aligned SRT files."),
    max_chars: int = typer.Option(None, help="Maximum characters per chunk (overrides config)."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Align two tracks onto shared time slots."""
    settings = _load_settings(log_level, max_chars)
    with _reported_errors():
        primary_entries = _read_srt(primary)
        secondary_entries = _read_srt(secondary)
        if not primary_entries:
            raise InputError(f"No parsable entries in {primary}")
    aligned = align_entries(primary_entries, secondary_entries, max_chars=settings.max_chunk_chars)

    if out_dir is None:
        payload = {
            "primary": [e.to_dict() for e in aligned.primary_subs],
            "secondary": [e.to_dict() for e in aligned.secondary_subs],
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    _write_or_echo(render_srt(aligned.primary_subs), out_dir / f"{primary.stem}.aligned.srt")
    _write_or_echo(render_srt(aligned.secondary_subs), out_dir / f"{secondary.stem}.aligned.srt")


@app.command()
def find(
    subtitle: Path = typer.Argument(..., help="Primary SRT."),
    seconds: float = typer.Argument(..., help="Playback time in seconds."),
    secondary: Path = typer.Option(None, help="Secondary SRT for bilingual lookup."),
    max_chars: int = typer.Option(None, help="Maximum characters per chunk (overrides config)."),
) -> None:
    """Show which lines are on screen at a given time."""
    settings = _load_settings(None, max_chars)
    loader = SessionLoader(settings)
    with _reported_errors():
        primary_text = read_subtitle_file(subtitle)
        secondary_text = read_subtitle_file(secondary) if secondary is not None else None
        session = loader.build_session("local", primary_text, secondary_text)

    stamp = format_srt_time(seconds)
    active = find_active(session.primary_subs, seconds)
    typer.echo(f"[{stamp}] primary: {active.text if active else '(none)'}")
    if session.is_bilingual:
        active_secondary = find_active(session.secondary_subs, seconds)
        typer.echo(f"[{stamp}] secondary: {active_secondary.text if active_secondary else '(none)'}")


@app.command()
def playlist(
    path: str = typer.Option(None, "--playlist", help="playlist.json (overrides config)."),
    active: str = typer.Option(None, help="Video id to pick the default group."),
) -> None:
    """List playlist entries grouped by playlist label."""
    settings = _load_settings()
    with _reported_errors():
        items = _playlist_source(settings, path).fetch()
    groups = group_playlist(items)
    selected = default_group(groups, active)

    index = 0
    for name, group_items in groups.items():
        marker = "*" if name == selected else " "
        typer.echo(f"{marker} {name}")
        for item in group_items:
            bilingual = "bilingual" if item.secondary else "single"
            typer.echo(f"    {index}\t{item.title or item.url}\t{bilingual}")
            index += 1


@app.command()
def prefs(
    mode: str = typer.Option(None, help="Subtitle mode: off, primary, both, secondary."),
    aspect_ratio: str = typer.Option(None, help="Aspect ratio: 16:9, 4:3, 21:9, 9:16."),
    width: int = typer.Option(None, help="Player width in percent."),
    reset: bool = typer.Option(False, help="Restore default display settings."),
) -> None:
    """Show or change saved display preferences."""
    settings = _load_settings()
    store = JsonPreferenceStore(settings.prefs_path, min_progress_seconds=settings.progress_min_seconds)
    current = store.load()

    if reset:
        current = Preferences(progress=current.progress)
        store.save(current)
    updates: dict = {}
    if mode is not None:
        updates["subtitle_mode"] = mode
    if aspect_ratio is not None or width is not None:
        video = current.video_settings.model_dump()
        if aspect_ratio is not None:
            video["aspect_ratio"] = aspect_ratio
        if width is not None:
            video["width"] = width
        updates["video_settings"] = video
    if updates:
        try:
            current = store.update(**updates)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

    typer.echo(json.dumps(current.model_dump(exclude={"progress"}), indent=2))


@app.command()
def play(
    url: str = typer.Argument(None, help="Video URL (used as the progress key)."),
    primary: Path = typer.Option(None, help="Primary SRT file."),
    secondary: Path = typer.Option(None, help="Secondary SRT file."),
    item: int = typer.Option(None, help="Play playlist entry by index instead of files."),
    playlist_path: str = typer.Option(None, "--playlist", help="playlist.json (overrides config)."),
    speed: float = typer.Option(1.0, help="Simulated playback speed."),
    duration: float = typer.Option(None, help="Stop after this many media seconds."),
    color: bool = typer.Option(True, help="Color subtitle lines using saved styles."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Play subtitles against a simulated clock, printing lines as they change."""
    settings = _load_settings(log_level)
    if speed <= 0:
        raise typer.BadParameter("--speed must be positive.")

    loader = SessionLoader(settings)
    with _reported_errors():
        if item is not None:
            source = _playlist_source(settings, playlist_path)
            items = source.fetch()
            if not 0 <= item < len(items):
                raise InputError(f"Playlist has no entry {item} ({len(items)} entries).")
            session = loader.load_playlist_item(items[item], source)
        else:
            session = loader.load_files(url, primary, secondary)

    store = JsonPreferenceStore(settings.prefs_path, min_progress_seconds=settings.progress_min_seconds)
    preferences = store.load()
    renderer = TerminalRenderer(
        mode=preferences.subtitle_mode,
        styles=preferences.subtitle_styles,
        color=color,
    )
    controller = PlaybackController(store, settings=settings)
    clock = SimulatedClock(speed=speed)
    until = duration if duration is not None else _session_end(session)

    typer.echo(f"▶ {session.video_id}  {session.stats}")
    try:
        asyncio.run(_play_session(controller, session, clock, renderer, until=until))
    except KeyboardInterrupt:
        typer.echo("Stopped.")


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
