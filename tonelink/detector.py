"""
Spectral detection - single-bin DFT correlation against target frequencies.
"""

from typing import Iterable, Optional

import numpy as np

from . import MIN_MAGNITUDE


def magnitude(samples: np.ndarray, target_freq: float, sample_rate: int) -> float:
    """
    Normalized correlation magnitude of samples at one frequency.

    real = sum(s[n] * cos(w*n)), imag = -sum(s[n] * sin(w*n)),
    result = sqrt(real^2 + imag^2) / N

    Args:
        samples: Input samples (int16 scale)
        target_freq: Frequency to test (Hz)
        sample_rate: Sample rate (Hz)

    Returns:
        Magnitude >= 0, or 0.0 for an empty buffer
    """
    samples = np.asarray(samples, dtype=np.float64)
    n = len(samples)
    if n == 0:
        return 0.0

    angle = 2 * np.pi * target_freq * np.arange(n) / sample_rate
    real = np.dot(samples, np.cos(angle))
    imag = -np.dot(samples, np.sin(angle))
    return float(np.hypot(real, imag) / n)


def detect_one(
    samples: np.ndarray,
    target_freq: float,
    sample_rate: int,
    min_magnitude: float = MIN_MAGNITUDE,
) -> Optional[float]:
    """Return target_freq if its magnitude exceeds min_magnitude, else None."""
    if magnitude(samples, target_freq, sample_rate) > min_magnitude:
        return target_freq
    return None


def detect_best(
    samples: np.ndarray,
    candidates: Iterable[float],
    sample_rate: int,
    min_magnitude: float = MIN_MAGNITUDE,
) -> Optional[float]:
    """
    Pick the strongest candidate frequency.

    Candidates are tested in ascending order and a later one only replaces the
    current best when strictly stronger, so the lower frequency wins ties.

    Args:
        samples: Input samples
        candidates: Frequencies to test (Hz)
        sample_rate: Sample rate (Hz)
        min_magnitude: Minimum magnitude that counts as a tone

    Returns:
        Best frequency, or None if no candidate clears the threshold
    """
    samples = np.asarray(samples, dtype=np.float64)
    best_freq = None
    best_magnitude = min_magnitude

    for freq in sorted(set(candidates)):
        mag = magnitude(samples, freq, sample_rate)
        if mag > best_magnitude:
            best_magnitude = mag
            best_freq = freq

    return best_freq
