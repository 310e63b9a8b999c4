"""Alert sound catalog: built-in synthesized tones plus files on disk."""

import logging
from dataclasses import dataclass
from pathlib import Path

from synth.oscillator import Waveform
from synth.renderer import Note

log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".wav", ".wave", ".mp3", ".mpeg"})

SYNTH = "synth"
FILE = "file"


@dataclass(frozen=True)
class SoundDef:
    key: str
    title: str
    description: str
    source: str = SYNTH
    notes: tuple[Note, ...] = ()
    file_path: Path | None = None


_SINE, _SQUARE, _GLASS, _ROUND = Waveform.SINE, Waveform.SQUARE, Waveform.GLASS, Waveform.ROUND

SYNTH_SOUNDS: tuple[SoundDef, ...] = (
    SoundDef(
        key="ask-hit",
        title="Ask hit (existing)",
        description="Clean bright high ping. Existing at_ask-style hit.",
        notes=(Note(659.26, 0.00, 0.20, 0.32, _SINE),),
    ),
    SoundDef(
        key="bid-hit",
        title="Bid hit (existing)",
        description="Lower darker ping. Existing at_bid-style hit.",
        notes=(Note(493.88, 0.00, 0.20, 0.34, _SINE),),
    ),
    SoundDef(
        key="market-crossed-up",
        title="Market crossed up (new)",
        description=(
            "Starts with two jolting ask-hit accents, then 4 glassy bright rising tones "
            "(crossing upward continuation)."
        ),
        notes=(
            Note(1318.52, 0.00, 0.08, 0.40, _SQUARE),
            Note(1567.98, 0.10, 0.08, 0.38, _SQUARE),
            Note(659.26, 0.00, 0.56, 0.44, _SINE),
            Note(830.60, 0.36, 0.48, 0.26, _GLASS),
            Note(987.76, 0.60, 0.48, 0.24, _GLASS),
            Note(1174.66, 0.84, 0.51, 0.23, _GLASS),
            Note(1396.91, 1.08, 0.54, 0.22, _GLASS),
        ),
    ),
    SoundDef(
        key="market-crossed-down",
        title="Market crossed down (new)",
        description=(
            "Starts with two jolting bid-hit accents, then 4 dark round dropping tones "
            "(crossing downward continuation)."
        ),
        notes=(
            Note(246.94, 0.00, 0.08, 0.40, _SQUARE),
            Note(220.00, 0.10, 0.08, 0.38, _SQUARE),
            Note(493.88, 0.00, 0.56, 0.46, _SINE),
            Note(392.00, 0.36, 0.48, 0.30, _ROUND),
            Note(329.63, 0.60, 0.48, 0.28, _ROUND),
            Note(293.66, 0.84, 0.51, 0.27, _ROUND),
            Note(246.94, 1.08, 0.54, 0.26, _ROUND),
        ),
    ),
    SoundDef(
        key="rvol-tick-close",
        title="RVOL tick (close)",
        description="Short descending square tick used for RVOL close alerts.",
        notes=(
            Note(1600.00, 0.000, 0.020, 0.06, _SQUARE),
            Note(1200.00, 0.008, 0.016, 0.05, _SQUARE),
        ),
    ),
    SoundDef(
        key="rvol-tick-pace",
        title="RVOL tick (pace)",
        description="Higher short descending square tick used for RVOL pace alerts.",
        notes=(
            Note(2400.00, 0.000, 0.020, 0.06, _SQUARE),
            Note(1800.00, 0.008, 0.016, 0.05, _SQUARE),
        ),
    ),
    SoundDef(
        key="alert-fallback-beep",
        title="Alert fallback beep",
        description="Sine beep fallback when file-based alert audio is unavailable.",
        notes=(Note(880.00, 0.00, 0.15, 0.10, _SINE),),
    ),
)


def is_supported_audio(path: str | Path) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def discover_file_sounds(sound_dir: str | Path) -> list[SoundDef]:
    """List playable audio files directly inside *sound_dir*.

    A missing directory yields no sounds; any other read error propagates.
    """
    sound_dir = Path(sound_dir)
    try:
        entries = list(sound_dir.iterdir())
    except FileNotFoundError:
        log.debug("Sounds directory %s does not exist", sound_dir)
        return []

    found: list[SoundDef] = []
    for entry in entries:
        if entry.is_dir() or not is_supported_audio(entry):
            continue
        ext = entry.suffix.lower().lstrip(".")
        found.append(SoundDef(
            key=entry.name,
            title=f"File sound ({ext})",
            description="Static alert file served by /sounds/<filename>.",
            source=FILE,
            file_path=entry,
        ))

    found.sort(key=lambda s: s.key.lower())
    return found


def build_catalog(sound_dir: str | Path) -> tuple[dict[str, SoundDef], list[str]]:
    """Merge built-in sounds with files from *sound_dir*.

    Returns ``(sounds_by_key, default_order)``. A file whose name clashes
    with a built-in key is registered as ``file:<name>``.
    """
    sounds = {s.key: s for s in SYNTH_SOUNDS}
    order = [s.key for s in SYNTH_SOUNDS]

    for sound in discover_file_sounds(sound_dir):
        key = sound.key
        if key in sounds:
            key = f"file:{key}"
        sounds[key] = SoundDef(
            key=key,
            title=sound.title,
            description=sound.description,
            source=sound.source,
            file_path=sound.file_path,
        )
        order.append(key)

    return sounds, order
