"""
Binary frame policy - text as 0/1 digits rendered as beeps and silences.

Each digit is a beep (short for 0, long for 1) followed by a bit silence.
A space closes a byte group: the trailing bit silence is dropped and a longer
byte silence is appended instead.
"""

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import List, Union

import numpy as np

from . import SAMPLE_RATE
from .synth import tone, silence

# Module-level logger
_logger = logging.getLogger(__name__)

DEFAULT_BEEP_CONFIG_FILE = "audio_generator_config.json"


def text_to_binary(data: Union[bytes, str]) -> str:
    """
    Convert bytes to MSB-first binary digits, one space-terminated group per byte.

    Example: b"A" -> "01000001 "
    """
    if isinstance(data, str):
        data = data.encode("latin-1")
    return "".join(f"{byte:08b} " for byte in data)


@dataclass(frozen=True)
class BeepConfig:
    """Beep rendering parameters. Durations are in milliseconds."""

    sample_rate: int = SAMPLE_RATE
    bits_per_sample: int = 16
    num_channels: int = 1
    amplitude: float = 30000.0
    frequency: float = 880.0
    short_beep_ms: float = 100.0
    long_beep_ms: float = 100.0
    bit_silence_ms: float = 50.0
    byte_silence_ms: float = 200.0


# JSON section -> {json key: (BeepConfig field, accepted types)}
_JSON_KEYS = {
    "audio_parameters": {
        "sample_rate": ("sample_rate", (int,)),
        "bits_per_sample": ("bits_per_sample", (int,)),
        "num_channels": ("num_channels", (int,)),
        "amplitude": ("amplitude", (int, float)),
        "frequency": ("frequency", (int, float)),
    },
    "durations_ms": {
        "short_beep": ("short_beep_ms", (int, float)),
        "long_beep": ("long_beep_ms", (int, float)),
        "bit_silence": ("bit_silence_ms", (int, float)),
        "byte_silence": ("byte_silence_ms", (int, float)),
    },
}


def parse_beep_config(data: dict) -> BeepConfig:
    """Build a BeepConfig from parsed JSON, skipping missing or wrong-typed values."""
    values = {}
    for section, keys in _JSON_KEYS.items():
        params = data.get(section)
        if not isinstance(params, dict):
            continue
        for key, (name, types) in keys.items():
            if key not in params:
                continue
            value = params[key]
            if isinstance(value, bool) or not isinstance(value, types):
                _logger.warning(f"Ignoring {section}.{key}: unexpected value {value!r}")
                continue
            values[name] = value

    config = BeepConfig(**values)
    if config.bits_per_sample != 16 or config.num_channels != 1:
        _logger.warning(
            f"Configured {config.num_channels}-channel {config.bits_per_sample}-bit output "
            "is not supported, writing mono 16-bit samples"
        )
    return config


def load_beep_config(path: Union[str, Path] = DEFAULT_BEEP_CONFIG_FILE) -> BeepConfig:
    """
    Load beep settings from JSON.

    A missing or unparsable file is not an error: defaults are used.

    Args:
        path: JSON file path

    Returns:
        BeepConfig
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError:
        _logger.warning(f"Could not open configuration file '{path}'. Using default settings.")
        return BeepConfig()
    except json.JSONDecodeError as e:
        _logger.warning(f"JSON parsing error in '{path}': {e}. Using default settings.")
        return BeepConfig()

    if not isinstance(data, dict):
        _logger.warning(f"'{path}' does not hold a JSON object. Using default settings.")
        return BeepConfig()

    config = parse_beep_config(data)
    _logger.info(f"Loaded beep configuration from {path}")
    for f in fields(config):
        _logger.debug(f"  {f.name}: {getattr(config, f.name)}")
    return config


def encode_bits(digits: str, config: BeepConfig = BeepConfig()) -> np.ndarray:
    """
    Render a string of binary digits.

    Args:
        digits: '0', '1' and ' ' characters; line breaks are ignored
        config: Beep parameters

    Returns:
        Read-only int16 waveform
    """
    rate = config.sample_rate
    beep = {
        "0": tone(config.frequency, config.short_beep_ms / 1000.0, config.amplitude, rate),
        "1": tone(config.frequency, config.long_beep_ms / 1000.0, config.amplitude, rate),
    }
    bit_gap = silence(config.bit_silence_ms / 1000.0, rate)
    byte_gap = silence(config.byte_silence_ms / 1000.0, rate)

    parts: List[np.ndarray] = []
    first_bit = True

    for ch in digits:
        if ch in beep:
            parts.append(beep[ch])
            if config.bit_silence_ms > 0:
                parts.append(bit_gap)
            first_bit = False
        elif ch == " ":
            if first_bit:
                continue
            # Swap the trailing bit silence for the byte silence
            if len(bit_gap) and parts and parts[-1] is bit_gap:
                parts.pop()
            if config.byte_silence_ms > 0:
                parts.append(byte_gap)
            first_bit = True
        elif ch in "\r\n":
            continue
        else:
            _logger.warning(f"Ignoring unexpected character {ch!r} (code {ord(ch)})")

    samples = np.concatenate(parts) if parts else np.zeros(0, dtype=np.int16)
    samples.flags.writeable = False
    _logger.debug(f"Rendered {len(digits)} digits into {len(samples)} samples")
    return samples
