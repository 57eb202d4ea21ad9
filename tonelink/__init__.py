"""
ToneLink - Acoustic text link.
Encodes text as a sequence of audible tones and decodes it back.
"""

__version__ = "0.1.0"

# Audio defaults
SAMPLE_RATE = 44100  # Hz
BITS_PER_SAMPLE = 16
FULL_SCALE = 32767  # int16 peak

# Frame timing defaults (seconds)
TONE_DURATION = 0.2
SILENCE_DURATION = 0.05
SYNC_TONE_DURATION = 0.3
AMPLITUDE_SCALE = 0.5  # fraction of FULL_SCALE

# Sync markers (Hz, 0 disables)
START_TONE_FREQ = 500.0
END_TONE_FREQ = 4000.0

# Detection
FREQ_TOLERANCE = 25.0  # Hz
MIN_MAGNITUDE = 500.0  # correlation energy, int16 scale

# File defaults
DEFAULT_CONFIG_FILE = "audio_config.ini"
DEFAULT_OUTPUT_WAV = "sound.wav"
DECODED_TEXT_FILE = "decode_content.txt"

from .errors import (
    TonelinkError,
    ConfigLoadError,
    EncodingError,
    EmptyInputError,
    EmptyTableError,
    ContainerFormatError,
    TimingError,
)
from .config import Config, FrequencyTable, TimingConfig, load_config
from .synth import tone, silence
from .detector import magnitude, detect_one, detect_best
from .encoder import FrameEncoder, encode
from .decoder import DecodeResult, DecoderState, FrameDecoder, decode, decode_file
from .wav import WavInfo, read_wav, write_wav

__all__ = [
    "TonelinkError",
    "ConfigLoadError",
    "EncodingError",
    "EmptyInputError",
    "EmptyTableError",
    "ContainerFormatError",
    "TimingError",
    "Config",
    "FrequencyTable",
    "TimingConfig",
    "load_config",
    "tone",
    "silence",
    "magnitude",
    "detect_one",
    "detect_best",
    "FrameEncoder",
    "encode",
    "DecodeResult",
    "DecoderState",
    "FrameDecoder",
    "decode",
    "decode_file",
    "WavInfo",
    "read_wav",
    "write_wav",
]
