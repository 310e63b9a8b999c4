"""Play audio files through whichever external player is installed.

Each format family has an ordered chain of candidate programs. Candidates
missing from PATH are skipped; the first one that runs and exits 0 wins.
Calls block until the player exits; there is no timeout.
"""

import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import numpy as np

from audio.wav import temp_wav

log = logging.getLogger(__name__)

PATH_TOKEN = "{path}"

WAVE = "wave"
COMPRESSED = "compressed"

_FAMILIES: dict[str, str] = {
    ".wav": WAVE,
    ".wave": WAVE,
    ".mp3": COMPRESSED,
    ".mpeg": COMPRESSED,
}


# ── Errors ──────────────────────────────────────────────────────────

class PlaybackError(RuntimeError):
    """Base class for playback dispatch failures."""


class UnsupportedFormatError(PlaybackError):
    def __init__(self, path: str | Path, ext: str):
        super().__init__(f"unsupported audio file extension {ext!r} for {path}")
        self.path = str(path)
        self.ext = ext


class PlayerNotFoundError(PlaybackError):
    def __init__(self, candidates: list[str]):
        super().__init__(
            f"no supported audio player found (install one of: {', '.join(candidates)})"
        )
        self.candidates = candidates


class PlaybackFailedError(PlaybackError):
    def __init__(self, attempted: list[str], last_error: BaseException | None):
        super().__init__(f"audio playback failed via {', '.join(attempted)}: {last_error}")
        self.attempted = attempted
        self.last_error = last_error


# ── Candidates ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class PlayerCommand:
    name: str
    args: tuple[str, ...] = (PATH_TOKEN,)

    def argv(self, path: str | Path) -> list[str]:
        return [self.name, *(str(path) if a == PATH_TOKEN else a for a in self.args)]


_FFPLAY = PlayerCommand("ffplay", ("-nodisp", "-autoexit", "-loglevel", "quiet", PATH_TOKEN))

WAVE_PLAYERS: tuple[PlayerCommand, ...] = (
    PlayerCommand("aplay", ("-q", PATH_TOKEN)),
    PlayerCommand("paplay", (PATH_TOKEN,)),
    _FFPLAY,
    PlayerCommand("afplay", (PATH_TOKEN,)),
)

COMPRESSED_PLAYERS: tuple[PlayerCommand, ...] = (
    _FFPLAY,
    PlayerCommand("afplay", (PATH_TOKEN,)),
    PlayerCommand("mpg123", ("-q", PATH_TOKEN)),
    PlayerCommand("mpg321", ("-q", PATH_TOKEN)),
    PlayerCommand("play", ("-q", PATH_TOKEN)),
)


@dataclass(frozen=True)
class Attempt:
    """Outcome of running one installed candidate."""

    name: str
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def classify(path: str | Path) -> str:
    """Return the format family of *path* or raise UnsupportedFormatError."""
    ext = Path(path).suffix.lower()
    family = _FAMILIES.get(ext)
    if family is None:
        raise UnsupportedFormatError(path, ext)
    return family


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def _is_windows() -> bool:
    return sys.platform.startswith("win")


def attempts(candidates: Iterable[PlayerCommand], path: str | Path) -> Iterator[Attempt]:
    """Run each installed candidate in order, yielding one Attempt per run."""
    for cmd in candidates:
        if not command_exists(cmd.name):
            log.debug("Player %s not installed, skipping", cmd.name)
            continue
        try:
            subprocess.run(cmd.argv(path), check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            log.info("Player %s failed: %s", cmd.name, e)
            yield Attempt(cmd.name, e)
        else:
            yield Attempt(cmd.name)


def run_first_available(candidates: Iterable[PlayerCommand], path: str | Path) -> str:
    """Play *path* with the first candidate that exists and exits 0.

    Returns the name of the player that succeeded. Only the last failure is
    reported when several installed players fail.
    """
    candidates = list(candidates)
    attempted: list[str] = []
    last_error: BaseException | None = None

    for attempt in attempts(candidates, path):
        if attempt.ok:
            return attempt.name
        attempted.append(attempt.name)
        last_error = attempt.error

    if not attempted:
        raise PlayerNotFoundError([c.name for c in candidates])
    raise PlaybackFailedError(attempted, last_error) from last_error


def play_with_powershell(path: str | Path) -> None:
    """Windows fallback: play a WAV file via System.Media.SoundPlayer."""
    quoted = str(path).replace("'", "''")
    script = f"(New-Object Media.SoundPlayer '{quoted}').PlaySync();"
    try:
        subprocess.run(["powershell", "-NoProfile", "-Command", script], check=True)
    except (subprocess.CalledProcessError, OSError) as e:
        raise PlaybackFailedError(["powershell"], e) from e


def _load_candidates(entries: list | None, default: tuple[PlayerCommand, ...]) -> tuple[PlayerCommand, ...]:
    """Build a candidate chain from config, or return *default*."""
    if not entries:
        return default
    chain: list[PlayerCommand] = []
    for entry in entries:
        name = entry.get("name") if isinstance(entry, dict) else None
        if not name:
            log.warning("Ignoring player entry without a name: %r", entry)
            continue
        args = entry.get("args")
        chain.append(PlayerCommand(str(name), tuple(str(a) for a in args) if args else (PATH_TOKEN,)))
    return tuple(chain) or default


class FallbackPlayer:
    """Dispatches audio files to external players with format-aware fallback."""

    def __init__(self, playback_config: dict | None = None):
        cfg = playback_config or {}
        self._chains: dict[str, tuple[PlayerCommand, ...]] = {
            WAVE: _load_candidates(cfg.get("wave_players"), WAVE_PLAYERS),
            COMPRESSED: _load_candidates(cfg.get("compressed_players"), COMPRESSED_PLAYERS),
        }
        self._temp_dir = cfg.get("temp_dir") or None

    def candidates(self, family: str) -> tuple[PlayerCommand, ...]:
        return self._chains[family]

    def play(self, path: str | Path) -> str:
        """Play an existing audio file. Returns the name of the player used."""
        family = classify(path)
        if family == WAVE:
            return self._play_wave(path)
        return run_first_available(self._chains[COMPRESSED], path)

    def play_samples(self, samples: np.ndarray) -> str:
        """Encode *samples* to a temporary WAV file, play it, then delete it."""
        with temp_wav(samples, directory=self._temp_dir) as path:
            return self._play_wave(path)

    def _play_wave(self, path: str | Path) -> str:
        try:
            return run_first_available(self._chains[WAVE], path)
        except (PlayerNotFoundError, PlaybackFailedError) as e:
            if not _is_windows():
                raise
            log.info("%s; falling back to PowerShell SoundPlayer", e)
        play_with_powershell(path)
        return "powershell"
