"""Waveform oscillators used by the tone renderer."""

from __future__ import annotations

import enum

import numpy as np


class Waveform(enum.Enum):
    SINE = "sine"
    SQUARE = "square"
    GLASS = "glass"
    ROUND = "round"

    @classmethod
    def parse(cls, tag: "str | Waveform | None") -> "Waveform":
        """Map a tag to a waveform. Unknown tags play as a plain sine."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).lower())
        except ValueError:
            return cls.SINE


def _sine(phase):
    return np.sin(phase)


def _square(phase):
    # Hard edge, no band-limiting
    return np.where(np.sin(phase) >= 0.0, 1.0, -1.0)


def _glass(phase):
    # Bright/glassy with stronger upper partials
    return 0.70 * np.sin(phase) + 0.22 * np.sin(2.0 * phase) + 0.08 * np.sin(3.0 * phase)


def _round(phase):
    # Darker: mostly fundamental plus a mild sub-octave and 1.5x overtone
    return 0.84 * np.sin(phase) + 0.10 * np.sin(0.5 * phase) + 0.06 * np.sin(1.5 * phase)


_OSCILLATORS = {
    Waveform.SINE: _sine,
    Waveform.SQUARE: _square,
    Waveform.GLASS: _glass,
    Waveform.ROUND: _round,
}


def sample(kind: "Waveform | str", phase):
    """Evaluate the oscillator for *kind* at *phase* (radians).

    *phase* may be a float or a numpy array; the result has the same shape.
    """
    fn = _OSCILLATORS.get(Waveform.parse(kind), _sine)
    return fn(np.asarray(phase, dtype=np.float64))[()]
