"""
ToneLink Decoder - Recovers text from a captured tone frame.

The decoder walks the buffer in fixed windows:

    SEEK_START -> DECODE_DATA -> DONE

A missing start tone is not fatal; decoding starts at the current position
and returns whatever characters are found.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .config import Config, FrequencyTable, TimingConfig
from .detector import detect_one, detect_best
from .errors import ContainerFormatError, EmptyTableError, TimingError
from .wav import read_wav

# Module-level logger
_logger = logging.getLogger(__name__)


class DecoderState(Enum):
    SEEK_START = "seek_start"
    DECODE_DATA = "decode_data"
    DONE = "done"


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of one decode call."""

    text: str
    start_tone_detected: bool
    end_tone_detected: bool
    windows: int
    cursor: int

    def __str__(self) -> str:
        return self.text


class FrameDecoder:
    """
    Frame decoder using correlation-based tone detection.
    """

    def __init__(self, table: FrequencyTable, timing: TimingConfig = TimingConfig()):
        """
        Initialize decoder.

        Args:
            table: Byte to frequency table
            timing: Frame timing parameters (must match the encoder's)

        Raises:
            EmptyTableError: if the table is empty
        """
        if not table:
            raise EmptyTableError("Frequency table is empty; cannot decode")

        self.table = table
        self.timing = timing
        self.candidates = table.frequencies

    @classmethod
    def from_config(cls, config: Config) -> "FrameDecoder":
        return cls(config.table, config.timing)

    def _matches(self, window: np.ndarray, target: float, sample_rate: int) -> bool:
        detected = detect_one(window, target, sample_rate, self.timing.magnitude_threshold)
        return detected is not None and abs(detected - target) < self.timing.frequency_tolerance

    def decode_frame(self, waveform: np.ndarray, sample_rate: Optional[int] = None) -> DecodeResult:
        """
        Decode one frame.

        Args:
            waveform: Mono int16 samples
            sample_rate: Rate of the waveform (default: the configured rate)

        Returns:
            DecodeResult with the recovered text and sync status

        Raises:
            TimingError: if one tone window spans no samples at this rate
        """
        samples = np.asarray(waveform)
        if samples.ndim != 1:
            raise ValueError(f"Expected mono samples, got array of shape {samples.shape}")

        t = self.timing
        rate = t.sample_rate if sample_rate is None else sample_rate
        data_window = t.samples_for(t.tone_duration, rate)
        sync_window = t.samples_for(t.sync_tone_duration, rate)
        gap = t.samples_for(t.silence_duration, rate)
        # End-tone test span; never reaches past the current symbol
        end_window = min(sync_window, data_window)
        total = len(samples)

        if data_window == 0:
            raise TimingError(
                f"tone_duration ({t.tone_duration:g}s) is shorter than one sample at {rate} Hz"
            )

        cursor = 0
        state = DecoderState.SEEK_START
        start_detected = False
        end_detected = False
        windows = 0
        out = bytearray()

        # SEEK_START
        if t.start_tone_enabled:
            if cursor + sync_window <= total:
                if self._matches(samples[cursor:cursor + sync_window], t.start_tone_freq, rate):
                    start_detected = True
                    cursor += sync_window + gap
                    _logger.debug(f"Start tone {t.start_tone_freq:g} Hz detected")
                else:
                    _logger.warning(
                        f"Start tone ({t.start_tone_freq:g} Hz) not detected at the beginning; "
                        "proceeding with decoding, results might be inaccurate"
                    )
            else:
                _logger.warning(
                    "Not enough audio to detect the start tone; attempting to decode anyway"
                )
        state = DecoderState.DECODE_DATA

        # DECODE_DATA
        while cursor + data_window <= total:
            if t.end_tone_enabled and cursor + sync_window <= total:
                if self._matches(samples[cursor:cursor + end_window], t.end_tone_freq, rate):
                    end_detected = True
                    cursor += sync_window + gap
                    _logger.debug(f"End tone {t.end_tone_freq:g} Hz detected at sample {cursor}")
                    break

            window = samples[cursor:cursor + data_window]
            windows += 1
            detected = detect_best(window, self.candidates, rate, t.magnitude_threshold)
            if detected is not None:
                byte = self.table.lookup(detected, t.frequency_tolerance)
                if byte is not None:
                    out.append(byte)
                else:
                    _logger.debug(f"Detected {detected:g} Hz matches no table entry")
            cursor += data_window + gap

        state = DecoderState.DONE
        if t.end_tone_freq > 0 and not end_detected:
            _logger.info(
                "Reached end of audio data, or remaining data too short. "
                "End tone was not detected."
            )

        _logger.debug(f"Decoder {state.value}: {len(out)} characters from {windows} windows")
        return DecodeResult(
            text=out.decode("latin-1"),
            start_tone_detected=start_detected,
            end_tone_detected=end_detected,
            windows=windows,
            cursor=cursor,
        )

    def decode(self, waveform: np.ndarray, sample_rate: Optional[int] = None) -> str:
        """Decode one frame and return only the text."""
        return self.decode_frame(waveform, sample_rate).text


def decode(waveform: np.ndarray, table: FrequencyTable, timing: TimingConfig = TimingConfig()) -> str:
    """Decode a waveform with the given table and timing. See FrameDecoder.decode_frame."""
    return FrameDecoder(table, timing).decode(waveform)


def decode_file(file_path: Union[str, Path], config: Config) -> DecodeResult:
    """
    Decode a ToneLink frame from a WAV file.

    A sample rate or bit depth that differs from the configuration is logged
    and decoding continues with the file's own sample rate.

    Args:
        file_path: Path to WAV file
        config: Loaded configuration

    Returns:
        DecodeResult

    Raises:
        ContainerFormatError: if the file is malformed or holds no samples
        EmptyTableError: if the configuration has no character table
    """
    decoder = FrameDecoder.from_config(config)
    samples, info = read_wav(file_path)

    timing = config.timing
    if info.sample_rate != timing.sample_rate:
        _logger.warning(
            f"WAV sample rate ({info.sample_rate}) differs from configured rate "
            f"({timing.sample_rate}); results may be inaccurate"
        )
    if info.bits_per_sample != timing.bits_per_sample:
        _logger.warning(
            f"Configured for {timing.bits_per_sample}-bit audio but WAV file is "
            f"{info.bits_per_sample}-bit"
        )
    if len(samples) == 0:
        raise ContainerFormatError(f"Audio buffer of '{file_path}' is empty; cannot decode")

    return decoder.decode_frame(samples, sample_rate=info.sample_rate)
