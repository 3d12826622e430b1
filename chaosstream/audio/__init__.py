"""Audio path: peak normalization and per-channel WAV export."""

from chaosstream.audio.normalize import normalize
