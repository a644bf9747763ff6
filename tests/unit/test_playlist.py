from __future__ import annotations

import json

import pytest

from srtsync.exceptions import ConfigurationError
from srtsync.services.playlist import (
    DEFAULT_GROUP,
    JsonPlaylistSource,
    PlaylistItem,
    default_group,
    group_playlist,
)


def _write_playlist(tmp_path, records) -> JsonPlaylistSource:
    path = tmp_path / "playlist.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return JsonPlaylistSource(path)


def test_fetch_keeps_only_records_with_primary(tmp_path) -> None:
    source = _write_playlist(
        tmp_path,
        [
            {"url": "https://youtu.be/aaaaaaaaaaa", "primary": "a.srt", "playlist": "S1"},
            {"url": "https://youtu.be/bbbbbbbbbbb"},
            {"title": "no url", "primary": "c.srt"},
            {"url": "https://youtu.be/ccccccccccc", "primary": "c.srt", "secondary": "c.zh.srt"},
        ],
    )

    items = source.fetch()

    assert [item.primary for item in items] == ["a.srt", "c.srt"]
    assert items[1].secondary == "c.zh.srt"


@pytest.mark.parametrize("content", ["{broken", '{"url": "x"}'])
def test_fetch_rejects_unusable_files(tmp_path, content) -> None:
    path = tmp_path / "playlist.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        JsonPlaylistSource(path).fetch()


def test_fetch_missing_file_is_a_configuration_error(tmp_path) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        JsonPlaylistSource(tmp_path / "missing.json").fetch()

    assert excinfo.value.exit_code == 2


def test_read_subtitle_resolves_relative_to_playlist(tmp_path) -> None:
    (tmp_path / "subs").mkdir()
    (tmp_path / "subs" / "a.srt").write_text("\ufeff1\n00:00:01,000 --> 00:00:02,000\nHi\n", encoding="utf-8")
    source = _write_playlist(tmp_path, [])

    text = source.read_subtitle("subs/a.srt")

    assert text.startswith("1\n")
    assert source.read_subtitle("subs/missing.srt") is None
    assert source.read_subtitle(None) is None


def test_group_playlist_preserves_first_seen_order() -> None:
    items = [
        PlaylistItem(url="u1", primary="1.srt", playlist="B"),
        PlaylistItem(url="u2", primary="2.srt"),
        PlaylistItem(url="u3", primary="3.srt", playlist="A"),
        PlaylistItem(url="u4", primary="4.srt", playlist="B"),
    ]

    groups = group_playlist(items)

    assert list(groups) == ["B", DEFAULT_GROUP, "A"]
    assert [item.url for item in groups["B"]] == ["u1", "u4"]


def test_default_group_prefers_the_active_video() -> None:
    groups = group_playlist(
        [
            PlaylistItem(url="https://youtu.be/aaaaaaaaaaa", primary="a.srt", playlist="First"),
            PlaylistItem(url="https://youtu.be/bbbbbbbbbbb", primary="b.srt", playlist="Second"),
        ]
    )

    assert default_group(groups, "bbbbbbbbbbb") == "Second"
    assert default_group(groups, "zzzzzzzzzzz") == "First"
    assert default_group(groups) == "First"
    assert default_group({}) is None
