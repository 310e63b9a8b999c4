"""Procedural tone synthesis: oscillators, envelope and note renderer."""

from synth.oscillator import Waveform
from synth.renderer import SAMPLE_RATE, EmptyInputError, Note, render

__all__ = ["Waveform", "SAMPLE_RATE", "EmptyInputError", "Note", "render"]
