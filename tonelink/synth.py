"""
Tone synthesis - sine tones and silence as int16 PCM.
"""

import numpy as np

INT16_MIN = -32768
INT16_MAX = 32767


def _num_samples(duration: float, sample_rate: int) -> int:
    return max(0, int(duration * sample_rate))


def to_int16(values: np.ndarray) -> np.ndarray:
    """
    Convert float samples to int16.

    Values are clamped to the int16 range first (saturating), then truncated
    toward zero.
    """
    clipped = np.clip(values, INT16_MIN, INT16_MAX)
    return np.trunc(clipped).astype(np.int16)


def tone(frequency: float, duration: float, amplitude: float, sample_rate: int) -> np.ndarray:
    """
    Generate a sine tone.

    Every call starts at phase 0; consecutive tones are not phase-continuous.

    Args:
        frequency: Tone frequency (Hz)
        duration: Length in seconds
        amplitude: Peak value in int16 units
        sample_rate: Sample rate (Hz)

    Returns:
        floor(duration * sample_rate) int16 samples
    """
    n = _num_samples(duration, sample_rate)
    i = np.arange(n, dtype=np.float64)
    return to_int16(amplitude * np.sin(2 * np.pi * frequency * i / sample_rate))


def silence(duration: float, sample_rate: int) -> np.ndarray:
    """Generate floor(duration * sample_rate) zero samples."""
    return np.zeros(_num_samples(duration, sample_rate), dtype=np.int16)
