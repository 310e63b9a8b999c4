"""Tests for the preview command-line entry point."""

from pathlib import Path

import pytest
import yaml

import main as preview
from audio.playback import FallbackPlayer, PlayerNotFoundError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    sounds_dir = tmp_path / "sounds"
    sounds_dir.mkdir()
    (sounds_dir / "cash.mp3").write_bytes(b"")
    cfg = {
        "preview": {"gap_ms": 0, "sounds_dir": str(sounds_dir)},
        "playback": {"temp_dir": str(tmp_path)},
        "metrics": {"enabled": True, "file": str(tmp_path / "metrics.jsonl"), "flush_interval": 100},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg))
    return path


@pytest.fixture
def played(monkeypatch) -> list:
    calls: list = []

    def _play(self, path):
        calls.append(("file", str(path)))
        return "fake"

    def _play_samples(self, samples):
        calls.append(("samples", len(samples)))
        return "fake"

    monkeypatch.setattr(FallbackPlayer, "play", _play)
    monkeypatch.setattr(FallbackPlayer, "play_samples", _play_samples)
    return calls


def test_list_prints_catalog(config_file: Path, played, capsys):
    assert preview.main(["--config", str(config_file), "--list"]) == 0
    out = capsys.readouterr().out
    assert "- ask-hit [synth]: Ask hit (existing)" in out
    assert "- cash.mp3 [file]: File sound (mp3)" in out
    assert "path:" in out
    assert played == []


def test_plays_requested_sounds_in_order(config_file: Path, played, capsys):
    code = preview.main(["--config", str(config_file), "bid-hit", "cash.mp3"])
    assert code == 0
    assert played[0][0] == "samples"
    assert played[1] == ("file", str(config_file.parent / "sounds" / "cash.mp3"))
    out = capsys.readouterr().out
    assert "[PLAY] bid-hit :: Bid hit (existing)" in out
    assert out.rstrip().endswith("Done.")

    lines = (config_file.parent / "metrics.jsonl").read_text().splitlines()
    assert len(lines) == 2


def test_no_play_skips_playback(config_file: Path, played):
    assert preview.main(["--config", str(config_file), "--no-play"]) == 0
    assert played == []


def test_unknown_key_exits_with_usage_error(config_file: Path, played, capsys):
    assert preview.main(["--config", str(config_file), "no-such-sound"]) == preview.EXIT_USAGE
    assert "Unknown sound key: no-such-sound" in capsys.readouterr().err


def test_negative_gap_rejected(config_file: Path, played):
    assert preview.main(["--config", str(config_file), "--gap-ms", "-1"]) == preview.EXIT_USAGE


def test_playback_failure_exit_code(config_file: Path, monkeypatch, capsys):
    def _fail(self, samples):
        raise PlayerNotFoundError(["aplay", "paplay"])

    monkeypatch.setattr(FallbackPlayer, "play_samples", _fail)
    assert preview.main(["--config", str(config_file), "ask-hit"]) == preview.EXIT_PLAYBACK
    assert "install one of: aplay, paplay" in capsys.readouterr().err


def test_missing_config_exits(tmp_path: Path):
    with pytest.raises(SystemExit) as exc_info:
        preview.main(["--config", str(tmp_path / "missing.yaml")])
    assert exc_info.value.code == 1


def test_invalid_gap_in_config_falls_back_to_default():
    assert preview._config_gap_ms({"gap_ms": "soon"}) == 180
    assert preview._config_gap_ms({}) == 180
