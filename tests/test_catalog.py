"""Tests for the alert sound catalog."""

from pathlib import Path

import pytest

from sounds import catalog
from sounds.catalog import SYNTH_SOUNDS, build_catalog, discover_file_sounds
from synth.renderer import render


_BUILTIN_ORDER = [
    "ask-hit",
    "bid-hit",
    "market-crossed-up",
    "market-crossed-down",
    "rvol-tick-close",
    "rvol-tick-pace",
    "alert-fallback-beep",
]


def test_builtin_order():
    assert [s.key for s in SYNTH_SOUNDS] == _BUILTIN_ORDER


@pytest.mark.parametrize("sound", SYNTH_SOUNDS, ids=lambda s: s.key)
def test_builtin_sounds_render(sound):
    assert sound.source == catalog.SYNTH
    assert sound.file_path is None
    out = render(sound.notes)
    assert len(out) > 0
    assert abs(int(out.min())) <= round(0.95 * 32767)
    assert int(out.max()) <= round(0.95 * 32767)


def test_missing_directory_yields_nothing(tmp_path: Path):
    assert discover_file_sounds(tmp_path / "nope") == []


def test_discovery_filters_and_sorts(tmp_path: Path):
    for name in ("b.MP3", "A.wav", "notes.txt", "c.mpeg", "d.wave"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "sub.wav").mkdir()

    found = discover_file_sounds(tmp_path)

    assert [s.key for s in found] == ["A.wav", "b.MP3", "c.mpeg", "d.wave"]
    assert found[1].title == "File sound (mp3)"
    assert found[0].file_path == tmp_path / "A.wav"
    assert all(s.source == catalog.FILE for s in found)


def test_build_catalog_appends_files_after_builtins(tmp_path: Path):
    (tmp_path / "cash.mp3").write_bytes(b"")
    sounds, order = build_catalog(tmp_path)
    assert order == _BUILTIN_ORDER + ["cash.mp3"]
    assert sounds["cash.mp3"].file_path == tmp_path / "cash.mp3"


def test_file_colliding_with_builtin_key_is_prefixed(monkeypatch, tmp_path: Path):
    clash = catalog.SoundDef(
        key="ask-hit",
        title="File sound (wav)",
        description="",
        source=catalog.FILE,
        file_path=tmp_path / "ask-hit",
    )
    monkeypatch.setattr(catalog, "discover_file_sounds", lambda _dir: [clash])

    sounds, order = build_catalog(tmp_path)

    assert order[-1] == "file:ask-hit"
    assert sounds["file:ask-hit"].key == "file:ask-hit"
    assert sounds["ask-hit"].source == catalog.SYNTH
