"""
WAV container support - PCM_16 writer and a validating reader.
"""

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Tuple

import numpy as np
import soundfile as sf

from .errors import ContainerFormatError

# Module-level logger
_logger = logging.getLogger(__name__)

PCM_FORMAT = 1
HEADER_SIZE = 44
FMT_CHUNK_SIZE = 16


@dataclass(frozen=True)
class WavInfo:
    """Header fields of a PCM WAV file."""

    sample_rate: int
    channels: int
    bits_per_sample: int
    format_code: int = PCM_FORMAT
    data_bytes: int = 0
    riff_size: int = 0

    @property
    def block_align(self) -> int:
        return self.channels * self.bits_per_sample // 8

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align

    @property
    def num_samples(self) -> int:
        """Sample frames declared by the data chunk."""
        if self.block_align == 0:
            return 0
        return self.data_bytes // self.block_align


def write_wav(path, samples: np.ndarray, sample_rate: int) -> WavInfo:
    """
    Write mono 16-bit samples to a WAV file.

    Args:
        path: Output file path
        samples: int16 samples
        sample_rate: Sample rate (Hz)

    Returns:
        Header fields that were written

    Raises:
        OSError: if the file cannot be written
    """
    samples = np.asarray(samples, dtype=np.int16)
    if samples.ndim != 1:
        raise ValueError(f"Expected mono samples, got array of shape {samples.shape}")

    try:
        sf.write(str(path), samples, sample_rate, subtype="PCM_16")
    except RuntimeError as e:
        raise OSError(f"Could not write WAV file '{path}': {e}") from e

    data_bytes = 2 * len(samples)
    _logger.debug(f"Wrote {len(samples)} samples ({data_bytes} bytes) to {path}")
    return WavInfo(
        sample_rate=sample_rate,
        channels=1,
        bits_per_sample=16,
        data_bytes=data_bytes,
        riff_size=HEADER_SIZE - 8 + data_bytes,
    )


def _read_exact(f: BinaryIO, size: int, what: str) -> bytes:
    data = f.read(size)
    if len(data) != size:
        raise ContainerFormatError(f"Unexpected end of file while reading {what}")
    return data


def read_header(f: BinaryIO) -> WavInfo:
    """
    Parse and validate a WAV header, leaving f positioned at the sample data.

    Chunks between "fmt " and "data" are skipped.

    Raises:
        ContainerFormatError: wrong tags, non-PCM, not 16-bit, or no data chunk
    """
    riff, riff_size, wave = struct.unpack("<4sI4s", _read_exact(f, 12, "RIFF header"))
    if riff != b"RIFF":
        raise ContainerFormatError(f"Not a RIFF file (tag {riff!r})")
    if wave != b"WAVE":
        raise ContainerFormatError(f"Not a WAVE file (tag {wave!r})")

    fmt_tag, fmt_size = struct.unpack("<4sI", _read_exact(f, 8, "fmt chunk header"))
    if fmt_tag != b"fmt ":
        raise ContainerFormatError(f"Expected 'fmt ' chunk, found {fmt_tag!r}")
    if fmt_size < FMT_CHUNK_SIZE:
        raise ContainerFormatError(f"fmt chunk too short ({fmt_size} bytes)")

    fmt = _read_exact(f, fmt_size + (fmt_size & 1), "fmt chunk")
    format_code, channels, sample_rate, _, _, bits_per_sample = struct.unpack(
        "<HHIIHH", fmt[:FMT_CHUNK_SIZE]
    )
    if format_code != PCM_FORMAT:
        raise ContainerFormatError(f"WAV file is not PCM (format code {format_code})")
    if bits_per_sample != 16:
        raise ContainerFormatError(
            f"Only 16-bit samples are supported, file is {bits_per_sample}-bit"
        )
    if channels < 1:
        raise ContainerFormatError(f"Invalid channel count {channels}")

    while True:
        chunk_header = f.read(8)
        if len(chunk_header) < 8:
            raise ContainerFormatError("'data' chunk not found in WAV file")
        chunk_id, chunk_size = struct.unpack("<4sI", chunk_header)
        if chunk_id == b"data":
            break
        _logger.debug(f"Skipping chunk {chunk_id!r} ({chunk_size} bytes)")
        f.seek(chunk_size + (chunk_size & 1), 1)

    return WavInfo(
        sample_rate=sample_rate,
        channels=channels,
        bits_per_sample=bits_per_sample,
        format_code=format_code,
        data_bytes=chunk_size,
        riff_size=riff_size,
    )


def read_wav(path) -> Tuple[np.ndarray, WavInfo]:
    """
    Read a mono 16-bit PCM WAV file.

    The header is validated first; sample data is then decoded with
    soundfile. Multi-channel files are reduced to their first channel.

    Args:
        path: Input file path

    Returns:
        Tuple of (int16 samples, header info)

    Raises:
        ContainerFormatError: if the container is malformed or unsupported
    """
    path = Path(path)
    with open(path, "rb") as f:
        info = read_header(f)

    if info.channels != 1:
        _logger.warning(
            f"WAV file has {info.channels} channels; only the first channel is decoded"
        )

    try:
        data, _ = sf.read(str(path), dtype="int16", always_2d=True)
    except RuntimeError as e:
        raise ContainerFormatError(f"Could not read sample data from '{path}': {e}") from e

    samples = np.ascontiguousarray(data[:, 0])
    if len(samples) < info.num_samples:
        _logger.warning(
            f"Could not read the full audio data chunk: got {len(samples)} samples, "
            f"header declares {info.num_samples}"
        )

    samples.flags.writeable = False
    return samples, info
