"""Mix timed notes into a normalized 16-bit PCM buffer."""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from synth import envelope, oscillator
from synth.oscillator import Waveform

log = logging.getLogger(__name__)

SAMPLE_RATE = 44100
TAIL_PAD_S = 0.05
PEAK_CEILING = 0.95
INT16_SCALE = 32767.0


class EmptyInputError(ValueError):
    """Raised when render() is called without any notes."""


@dataclass(frozen=True)
class Note:
    freq_hz: float
    start_s: float
    dur_s: float
    amp: float
    wave: Waveform | str = Waveform.SINE

    @property
    def end_s(self) -> float:
        return self.start_s + self.dur_s


def _frames(seconds: float) -> int:
    """Number of whole samples needed to cover *seconds*.

    The product is rounded to 6 decimals first so float noise like
    2646.0000000000005 does not add a sample.
    """
    return math.ceil(round(seconds * SAMPLE_RATE, 6))


def _offset(seconds: float) -> int:
    return math.floor(round(seconds * SAMPLE_RATE, 6))


def mix(notes: Sequence[Note]) -> np.ndarray:
    """Sum all notes into a float64 buffer without normalization."""
    if not notes:
        raise EmptyInputError("no notes supplied")

    end_s = max(n.end_s for n in notes) + TAIL_PAD_S
    frame_count = _frames(end_s)
    buf = np.zeros(frame_count, dtype=np.float64)

    for note in notes:
        start_i = _offset(note.start_s)
        if start_i >= frame_count:
            continue
        n_frames = min(_frames(note.dur_s), frame_count - start_i)
        if n_frames <= 0:
            continue

        t = np.arange(n_frames, dtype=np.float64) / SAMPLE_RATE
        omega = 2.0 * math.pi * note.freq_hz
        voice = oscillator.sample(note.wave, omega * t) * envelope.gain(t, note.dur_s)
        buf[start_i:start_i + n_frames] += note.amp * voice

    return buf


def normalize_scale(buf: np.ndarray) -> float:
    """Scale factor that keeps the peak at or below 0.95. Never boosts."""
    peak = float(np.max(np.abs(buf))) if len(buf) else 0.0
    if peak > PEAK_CEILING:
        return PEAK_CEILING / peak
    return 1.0


def quantize(buf: np.ndarray, scale: float = 1.0) -> np.ndarray:
    """Clamp to [-1, 1] and truncate to int16."""
    return (np.clip(buf * scale, -1.0, 1.0) * INT16_SCALE).astype(np.int16)


def render(notes: Sequence[Note]) -> np.ndarray:
    """Render *notes* into an int16 mono buffer at 44.1 kHz."""
    buf = mix(notes)
    scale = normalize_scale(buf)
    if scale != 1.0:
        log.debug("Attenuating mix by %.4f to stay under %.2f peak", scale, PEAK_CEILING)
    return quantize(buf, scale)
