"""Canonical 16-bit mono PCM WAV encoding.

Layout: RIFF header, 16-byte ``fmt `` chunk, ``data`` chunk with raw
little-endian int16 samples.
"""

import contextlib
import logging
import struct
import tempfile
from pathlib import Path
from typing import Iterator

import numpy as np

from synth.renderer import SAMPLE_RATE

log = logging.getLogger(__name__)

CHANNELS = 1
BITS_PER_SAMPLE = 16
_BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
_FMT_CHUNK_SIZE = 16
_PCM_FORMAT = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
HEADER_SIZE = _HEADER.size  # 44


def encode_wav(samples: np.ndarray) -> bytes:
    """Encode int16 mono samples as WAV bytes."""
    data = np.asarray(samples, dtype="<i2").tobytes()
    byte_rate = SAMPLE_RATE * CHANNELS * _BYTES_PER_SAMPLE
    block_align = CHANNELS * _BYTES_PER_SAMPLE

    header = _HEADER.pack(
        b"RIFF",
        36 + len(data),
        b"WAVE",
        b"fmt ",
        _FMT_CHUNK_SIZE,
        _PCM_FORMAT,
        CHANNELS,
        SAMPLE_RATE,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        len(data),
    )
    return header + data


def write_wav(path: str | Path, samples: np.ndarray) -> Path:
    """Encode *samples* and write them to *path*. I/O errors propagate."""
    path = Path(path)
    path.write_bytes(encode_wav(samples))
    return path


@contextlib.contextmanager
def temp_wav(samples: np.ndarray, directory: str | None = None) -> Iterator[Path]:
    """Write *samples* to a temporary WAV file that is removed on exit.

    Removal is best-effort: a failed unlink is logged, never raised.
    """
    with tempfile.NamedTemporaryFile(
        prefix="alert-tone-", suffix=".wav", dir=directory, delete=False,
    ) as f:
        tmp_path = Path(f.name)

    try:
        write_wav(tmp_path, samples)
        yield tmp_path
    finally:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Could not remove temporary file %s: %s", tmp_path, e)
