"""
ToneLink Encoder - Turns text into a framed sequence of tones.
"""

import logging
from pathlib import Path
from typing import List, Union

import numpy as np

from .config import Config, FrequencyTable, TimingConfig
from .errors import EmptyInputError, EmptyTableError
from .synth import tone, silence
from .wav import write_wav

# Module-level logger
_logger = logging.getLogger(__name__)

TextLike = Union[bytes, bytearray, str]


def _as_bytes(text: TextLike) -> bytes:
    if isinstance(text, str):
        # One byte per character, matching the CHAR_ table keys
        return text.encode("latin-1")
    return bytes(text)


class FrameEncoder:
    """
    Frame encoder for ToneLink audio generation.

    A frame is: optional start tone, one tone window per mapped byte, a
    silent placeholder window per unmapped byte, optional end tone. Every
    tone is followed by the inter-tone silence.
    """

    def __init__(self, table: FrequencyTable, timing: TimingConfig = TimingConfig()):
        """
        Initialize encoder.

        Args:
            table: Byte to frequency table
            timing: Frame timing parameters
        """
        self.table = table
        self.timing = timing

    @classmethod
    def from_config(cls, config: Config) -> "FrameEncoder":
        return cls(config.table, config.timing)

    def _tone(self, frequency: float, duration: float) -> np.ndarray:
        t = self.timing
        return tone(frequency, duration, t.amplitude, t.sample_rate)

    def _silence(self, duration: float) -> np.ndarray:
        return silence(duration, self.timing.sample_rate)

    def encode(self, text: TextLike) -> np.ndarray:
        """
        Encode text to int16 samples.

        Args:
            text: Bytes to encode (str is taken one byte per character)

        Returns:
            Read-only int16 waveform

        Raises:
            EmptyInputError: if text is empty
            EmptyTableError: if the frequency table is empty
        """
        data = _as_bytes(text)
        if not data:
            raise EmptyInputError()
        if not self.table:
            raise EmptyTableError()

        t = self.timing
        parts: List[np.ndarray] = []

        if t.start_tone_enabled:
            parts.append(self._tone(t.start_tone_freq, t.sync_tone_duration))
            parts.append(self._silence(t.silence_duration))

        unmapped = 0
        for byte in data:
            freq = self.table.get(byte)
            if freq is not None:
                parts.append(self._tone(freq, t.tone_duration))
                if t.silence_duration > 0:
                    parts.append(self._silence(t.silence_duration))
            else:
                # Placeholder keeps the decoder's fixed windows aligned
                unmapped += 1
                parts.append(self._silence(t.tone_duration + t.silence_duration))

        if t.end_tone_enabled:
            parts.append(self._tone(t.end_tone_freq, t.sync_tone_duration))
            parts.append(self._silence(t.silence_duration))

        if unmapped == len(data):
            _logger.warning("No byte of the input is in the frequency table; frame carries no data")
        elif unmapped:
            _logger.debug(f"{unmapped} of {len(data)} bytes not in frequency table, encoded as silence")

        samples = np.concatenate(parts) if parts else np.zeros(0, dtype=np.int16)
        samples.flags.writeable = False
        _logger.debug(
            f"Encoded {len(data)} bytes into {len(samples)} samples "
            f"({len(samples) / t.sample_rate:.2f}s)"
        )
        return samples

    def encode_to_file(self, text: TextLike, output_path: Union[str, Path]) -> np.ndarray:
        """
        Encode text and save it as a WAV file.

        Args:
            text: Bytes to encode
            output_path: Output WAV file path

        Returns:
            The encoded samples
        """
        samples = self.encode(text)
        if self.timing.bits_per_sample != 16:
            _logger.warning(
                f"Configured bit depth {self.timing.bits_per_sample} is not supported, "
                "writing 16-bit samples"
            )
        write_wav(output_path, samples, self.timing.sample_rate)
        return samples


def encode(text: TextLike, table: FrequencyTable, timing: TimingConfig = TimingConfig()) -> np.ndarray:
    """Encode text with the given table and timing. See FrameEncoder.encode."""
    return FrameEncoder(table, timing).encode(text)
