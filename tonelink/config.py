"""
ToneLink configuration: timing parameters, the character/frequency table,
and the INI-style loader.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from . import (
    SAMPLE_RATE,
    BITS_PER_SAMPLE,
    FULL_SCALE,
    TONE_DURATION,
    SILENCE_DURATION,
    SYNC_TONE_DURATION,
    AMPLITUDE_SCALE,
    START_TONE_FREQ,
    END_TONE_FREQ,
    FREQ_TOLERANCE,
    MIN_MAGNITUDE,
    DEFAULT_OUTPUT_WAV,
)
from .errors import ConfigLoadError

# Module-level logger
_logger = logging.getLogger(__name__)


class FrequencyTable:
    """
    Bidirectional byte <-> frequency table.

    Entries are kept sorted by frequency (ascending, then by byte value) so
    that reverse lookups resolve overlapping frequencies to the lowest one.
    Instances are immutable once built.
    """

    def __init__(self, mapping: Optional[Dict[int, float]] = None):
        """
        Build the table.

        Args:
            mapping: byte value (0-255) -> frequency in Hz
        """
        forward: Dict[int, float] = {}
        for byte, freq in (mapping or {}).items():
            if isinstance(byte, str):
                if len(byte) != 1:
                    raise ValueError(f"Character key must be a single character, got {byte!r}")
                byte = ord(byte)
            if not 0 <= byte <= 255:
                raise ValueError(f"Byte value must be 0-255, got {byte}")
            if freq <= 0:
                raise ValueError(f"Frequency must be positive, got {freq} for byte {byte}")
            forward[byte] = float(freq)

        self._forward = forward
        self._entries: Tuple[Tuple[float, int], ...] = tuple(
            sorted((freq, byte) for byte, freq in forward.items())
        )

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, float]]) -> "FrequencyTable":
        """Build from (byte, frequency) pairs; later pairs override earlier ones."""
        mapping: Dict[int, float] = {}
        for byte, freq in pairs:
            mapping[byte] = freq
        return cls(mapping)

    def __len__(self) -> int:
        return len(self._forward)

    def __bool__(self) -> bool:
        return bool(self._forward)

    def __contains__(self, byte: int) -> bool:
        return byte in self._forward

    def __getitem__(self, byte: int) -> float:
        return self._forward[byte]

    def __iter__(self) -> Iterator[int]:
        return iter(self._forward)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return self._forward == other._forward

    def __hash__(self) -> int:
        return hash(self._entries)

    def get(self, byte: int) -> Optional[float]:
        return self._forward.get(byte)

    @property
    def frequencies(self) -> List[float]:
        """Distinct frequencies in ascending order."""
        seen: List[float] = []
        for freq, _ in self._entries:
            if not seen or seen[-1] != freq:
                seen.append(freq)
        return seen

    def lookup(self, frequency: float, tolerance: float) -> Optional[int]:
        """
        Reverse lookup.

        Args:
            frequency: Detected frequency (Hz)
            tolerance: Maximum allowed absolute difference (Hz), exclusive

        Returns:
            Byte of the lowest table frequency within tolerance, or None
        """
        for freq, byte in self._entries:
            if abs(frequency - freq) < tolerance:
                return byte
        return None

    def ambiguous_pairs(self, tolerance: float) -> List[Tuple[int, int]]:
        """Byte pairs whose frequencies lie closer than tolerance to each other."""
        pairs = []
        for i, (freq_a, byte_a) in enumerate(self._entries):
            for freq_b, byte_b in self._entries[i + 1:]:
                if freq_b - freq_a >= tolerance:
                    break
                pairs.append((byte_a, byte_b))
        return pairs

    def __repr__(self) -> str:
        items = ", ".join(f"{chr(b)!r}: {f:g}" for f, b in self._entries)
        return f"FrequencyTable({{{items}}})"


@dataclass(frozen=True)
class TimingConfig:
    """Frame timing and detection parameters."""

    tone_duration: float = TONE_DURATION
    silence_duration: float = SILENCE_DURATION
    sync_tone_duration: float = SYNC_TONE_DURATION
    start_tone_freq: float = START_TONE_FREQ
    end_tone_freq: float = END_TONE_FREQ
    amplitude: float = AMPLITUDE_SCALE * FULL_SCALE
    sample_rate: int = SAMPLE_RATE
    bits_per_sample: int = BITS_PER_SAMPLE
    frequency_tolerance: float = FREQ_TOLERANCE
    magnitude_threshold: float = MIN_MAGNITUDE

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.frequency_tolerance <= 0:
            raise ValueError(
                f"frequency_tolerance must be positive, got {self.frequency_tolerance}"
            )

    @property
    def start_tone_enabled(self) -> bool:
        return self.start_tone_freq > 0 and self.sync_tone_duration > 0

    @property
    def end_tone_enabled(self) -> bool:
        return self.end_tone_freq > 0 and self.sync_tone_duration > 0

    def samples_for(self, duration: float, sample_rate: Optional[int] = None) -> int:
        """Number of samples spanned by duration seconds (floored, never negative)."""
        rate = self.sample_rate if sample_rate is None else sample_rate
        return max(0, int(duration * rate))


@dataclass(frozen=True)
class Config:
    """Everything loaded from one configuration file."""

    timing: TimingConfig = field(default_factory=TimingConfig)
    table: FrequencyTable = field(default_factory=FrequencyTable)
    output_wav_filename: str = DEFAULT_OUTPUT_WAV


# Key -> (TimingConfig field, converter)
_TIMING_KEYS = {
    "SAMPLE_RATE": ("sample_rate", int),
    "BITS_PER_SAMPLE": ("bits_per_sample", int),
    "TONE_DURATION_S": ("tone_duration", float),
    "SILENCE_DURATION_S": ("silence_duration", float),
    "AMPLITUDE_SCALE": ("amplitude", lambda v: float(v) * FULL_SCALE),
    "START_TONE_FREQ": ("start_tone_freq", float),
    "END_TONE_FREQ": ("end_tone_freq", float),
    "SYNC_TONE_DURATION_S": ("sync_tone_duration", float),
    "FREQ_TOLERANCE": ("frequency_tolerance", float),
    "MAGNITUDE_THRESHOLD": ("magnitude_threshold", float),
}

# Keys whose non-positive values fall back to the default
_POSITIVE_KEYS = (
    ("SAMPLE_RATE", "sample_rate", SAMPLE_RATE),
    ("TONE_DURATION_S", "tone_duration", TONE_DURATION),
    ("FREQ_TOLERANCE", "frequency_tolerance", FREQ_TOLERANCE),
)

_CHAR_PREFIX = "CHAR_"


def _parse_char_key(suffix: str) -> int:
    """
    Parse the part of a CHAR_ key after the prefix.

    Formats:
    - "A" -> ord("A") (any single non-digit character)
    - "65" -> 65 (decimal code, 0-255)
    """
    if len(suffix) == 1 and not suffix.isdigit():
        return ord(suffix)
    code = int(suffix)
    if not 0 <= code <= 255:
        raise ValueError(f"char code {code} out of range 0-255")
    return code


def parse_config(lines: Iterable[str], source: str = "<config>") -> Config:
    """
    Parse configuration lines.

    Malformed lines and invalid values are logged and skipped; the affected
    keys keep their defaults.

    Args:
        lines: Lines of a KEY = VALUE file
        source: Name used in log messages

    Returns:
        Parsed configuration
    """
    timing_values = {}
    char_pairs: List[Tuple[int, float]] = []
    output_wav = DEFAULT_OUTPUT_WAV

    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line[0] in "#;":
            continue

        if "=" not in line:
            _logger.warning(f"{source}:{lineno}: malformed line (no '='): {line}")
            continue

        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()

        try:
            if key in _TIMING_KEYS:
                name, convert = _TIMING_KEYS[key]
                timing_values[name] = convert(value)
            elif key == "OUTPUT_WAV_FILENAME":
                output_wav = value
            elif key.startswith(_CHAR_PREFIX) and len(key) > len(_CHAR_PREFIX):
                byte = _parse_char_key(key[len(_CHAR_PREFIX):])
                freq = float(value)
                if freq <= 0:
                    raise ValueError(f"frequency must be positive, got {freq}")
                char_pairs.append((byte, freq))
            else:
                _logger.debug(f"{source}:{lineno}: ignoring unknown key '{key}'")
        except ValueError as e:
            _logger.warning(f"{source}:{lineno}: invalid value for key '{key}': {value} ({e})")

    for key, name, default in _POSITIVE_KEYS:
        value = timing_values.get(name)
        if value is not None and value <= 0:
            _logger.warning(f"{source}: {key} must be positive, using default {default}")
            del timing_values[name]

    table = FrequencyTable.from_pairs(char_pairs)
    if not table:
        _logger.warning(
            f"{source}: no character frequencies (CHAR_X) loaded; "
            "encoding and decoding text will not work"
        )

    timing = TimingConfig(**timing_values)
    for a, b in table.ambiguous_pairs(timing.frequency_tolerance):
        _logger.warning(
            f"{source}: CHAR codes {a} and {b} are closer than the "
            f"{timing.frequency_tolerance:g} Hz tolerance; the lower frequency wins on decode"
        )

    return Config(timing=timing, table=table, output_wav_filename=output_wav)


def load_config(path) -> Config:
    """
    Load configuration from a KEY = VALUE file.

    Args:
        path: Config file path

    Returns:
        Parsed configuration

    Raises:
        ConfigLoadError: if the file cannot be read
    """
    path = Path(path)
    try:
        # latin-1 keeps one character per byte for CHAR_ keys
        text = path.read_text(encoding="latin-1")
    except OSError as e:
        raise ConfigLoadError(f"Could not open config file '{path}': {e}") from e

    _logger.info(f"Loading configuration from: {path}")
    return parse_config(text.splitlines(), source=str(path))
