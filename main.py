"""Alert tone preview — entry point.

Lists the alert sound catalog or plays sounds one after another through
whatever command-line audio player the host provides.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import yaml

from audio.playback import FallbackPlayer, PlaybackError
from sounds.catalog import SoundDef, build_catalog
from sounds.metrics import MetricsLogger
from synth.renderer import EmptyInputError, render

log = logging.getLogger(__name__)

EXIT_USAGE = 2
EXIT_SYNTH = 3
EXIT_PLAYBACK = 4

_DEFAULT_GAP_MS = 180
_DEFAULT_SOUNDS_DIR = "web/sounds"


def load_config(path: str | None = None) -> dict:
    """Load preview config from YAML file."""
    if path is None:
        path = str(Path(__file__).parent / "config.yaml")

    config_path = Path(path)
    if not config_path.exists():
        print(f"Config file not found: {path}")
        sys.exit(1)
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _config_gap_ms(preview_cfg: dict) -> int:
    try:
        return int(preview_cfg.get("gap_ms", _DEFAULT_GAP_MS))
    except (TypeError, ValueError):
        return _DEFAULT_GAP_MS


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview trading alert sounds")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    parser.add_argument("--list", action="store_true", help="List available sounds and exit")
    parser.add_argument("--gap-ms", type=int, default=None,
                        help="Silence gap between sounds in milliseconds (overrides config)")
    parser.add_argument("--no-play", action="store_true",
                        help="Print descriptions but skip audio playback")
    parser.add_argument("--sounds-dir", type=str, default=None,
                        help="Directory to scan for .wav/.mp3 sound files (overrides config)")
    parser.add_argument("sounds", nargs="*", help="Sound keys to play (default: all)")
    return parser.parse_args(argv)


def print_catalog(sounds: dict[str, SoundDef], order: list[str]) -> None:
    print("Available sounds:")
    for key in order:
        s = sounds[key]
        print(f"- {s.key} [{s.source}]: {s.title}")
        if s.file_path is not None:
            print(f"    path: {s.file_path}")


def play_sound(sound: SoundDef, player: FallbackPlayer) -> str:
    """Render (if needed) and play one catalog entry. Returns the player used."""
    if sound.file_path is not None:
        return player.play(sound.file_path)
    return player.play_samples(render(sound.notes))


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    args = parse_args(argv)
    config = load_config(args.config)

    preview_cfg = config.get("preview") or {}
    gap_ms = args.gap_ms if args.gap_ms is not None else _config_gap_ms(preview_cfg)
    if gap_ms < 0:
        print("--gap-ms must be >= 0", file=sys.stderr)
        return EXIT_USAGE
    sounds_dir = args.sounds_dir or preview_cfg.get("sounds_dir", _DEFAULT_SOUNDS_DIR)

    try:
        sounds, default_order = build_catalog(sounds_dir)
    except OSError as e:
        print(f"Failed to build sound catalog: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.list:
        print_catalog(sounds, default_order)
        return 0

    order = args.sounds or default_order
    player = FallbackPlayer(config.get("playback"))
    metrics = MetricsLogger(config.get("metrics"))

    try:
        for key in order:
            sound = sounds.get(key)
            if sound is None:
                print(f"Unknown sound key: {key} (run with --list)", file=sys.stderr)
                return EXIT_USAGE

            print(f"\033[32m[PLAY] {sound.key} :: {sound.title}\033[0m")
            print(f"       {sound.description}")
            if sound.file_path is not None:
                print(f"       file: {sound.file_path}")

            if not args.no_play:
                start = time.monotonic()
                try:
                    used = play_sound(sound, player)
                except EmptyInputError as e:
                    print(f"Failed to synthesize {sound.key!r}: {e}", file=sys.stderr)
                    metrics.log("sound_failed", key=sound.key, stage="synth", error=str(e))
                    return EXIT_SYNTH
                except (PlaybackError, OSError) as e:
                    print(f"\033[31mAudio playback failed for {sound.key!r}: {e}\033[0m", file=sys.stderr)
                    metrics.log("sound_failed", key=sound.key, stage="playback", error=str(e))
                    return EXIT_PLAYBACK
                metrics.log(
                    "sound_played",
                    key=sound.key,
                    source=sound.source,
                    player=used,
                    elapsed_s=round(time.monotonic() - start, 3),
                )

            time.sleep(gap_ms / 1000)
    finally:
        metrics.flush()

    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
