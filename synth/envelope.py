"""Attack/decay gain envelope applied to every note."""

import numpy as np

ATTACK_S = 0.003
_DECAY_RATE = 6.9  # e^-6.9 ~= 0.001 at note end
_MIN_DECAY_S = 1e-6


def gain(t, duration: float):
    """Return the envelope gain at elapsed time *t* of a note lasting *duration*.

    Linear 3 ms attack into an exponential fall that reaches ~0.001 at the
    end of the note. Zero outside ``[0, duration]``. Accepts a float or a
    numpy array for *t*.
    """
    t = np.asarray(t, dtype=np.float64)
    remain = max(_MIN_DECAY_S, duration - ATTACK_S)
    x = (t - ATTACK_S) / remain

    attack = np.maximum(0.0, t / ATTACK_S)
    # Clamp x so attack samples never feed exp() a huge positive argument
    decay = np.maximum(0.0, np.exp(-_DECAY_RATE * np.maximum(x, 0.0)))
    out = np.where(t < ATTACK_S, attack, decay)
    out = np.where((t < 0.0) | (t > duration), 0.0, out)
    return out[()]
