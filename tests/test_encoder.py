"""
Tests for the frame encoder.
"""

import logging

import numpy as np
import pytest

from tonelink import (
    EmptyInputError,
    EmptyTableError,
    EncodingError,
    FrameEncoder,
    FrequencyTable,
    TimingConfig,
    encode,
    read_wav,
    tone,
)

NO_SYNC = TimingConfig(start_tone_freq=0, end_tone_freq=0)
TABLE = FrequencyTable({"A": 1000, "B": 1200})


class TestEncodeErrors:
    """Test encoder failure modes."""

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            encode(b"", TABLE, NO_SYNC)

    def test_empty_table(self):
        with pytest.raises(EmptyTableError):
            encode(b"AB", FrequencyTable(), NO_SYNC)

    def test_empty_input_checked_first(self):
        with pytest.raises(EmptyInputError):
            encode("", FrequencyTable(), NO_SYNC)

    def test_errors_share_base(self):
        assert issubclass(EmptyInputError, EncodingError)
        assert issubclass(EmptyTableError, EncodingError)


class TestFrameLayout:
    """Test the sample layout of encoded frames."""

    def test_data_only_frame(self):
        samples = encode(b"AB", TABLE, NO_SYNC)
        # Two windows of tone (8820) + silence (2205)
        assert len(samples) == 2 * (8820 + 2205)
        assert samples.dtype == np.int16
        assert np.array_equal(samples[:8820], tone(1000, 0.2, NO_SYNC.amplitude, 44100))
        assert not np.any(samples[8820:11025])
        assert np.array_equal(samples[11025:19845], tone(1200, 0.2, NO_SYNC.amplitude, 44100))

    def test_str_and_bytes_agree(self):
        assert np.array_equal(encode("AB", TABLE, NO_SYNC), encode(b"AB", TABLE, NO_SYNC))

    def test_unmapped_byte_is_placeholder_silence(self):
        """A newline becomes one silent window of tone + silence duration."""
        table = FrequencyTable({"A": 1000})
        samples = encode(b"A\n", table, NO_SYNC)
        assert len(samples) == 8820 + 2205 + 11025
        assert np.any(samples[:8820])
        assert not np.any(samples[8820:])

    def test_no_silence_between_tones(self):
        timing = TimingConfig(start_tone_freq=0, end_tone_freq=0, silence_duration=0)
        samples = encode(b"AB", TABLE, timing)
        assert len(samples) == 2 * 8820

    def test_sync_tones(self):
        timing = TimingConfig()
        samples = encode(b"A", TABLE, timing)
        sync, gap, data = 13230, 2205, 8820
        assert len(samples) == sync + gap + data + gap + sync + gap
        assert np.array_equal(samples[:sync], tone(500, 0.3, timing.amplitude, 44100))
        end_start = sync + gap + data + gap
        assert np.array_equal(
            samples[end_start:end_start + sync], tone(4000, 0.3, timing.amplitude, 44100)
        )
        assert not np.any(samples[-gap:])

    def test_sync_disabled_by_zero_duration(self):
        timing = TimingConfig(sync_tone_duration=0)
        assert len(encode(b"A", TABLE, timing)) == 8820 + 2205

    def test_only_start_tone(self):
        timing = TimingConfig(end_tone_freq=0)
        assert len(encode(b"A", TABLE, timing)) == 13230 + 2205 + 8820 + 2205

    def test_all_unmapped_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="tonelink.encoder"):
            samples = encode(b"xyz", TABLE, NO_SYNC)
        assert len(samples) == 3 * 11025
        assert "carries no data" in caplog.text

    def test_waveform_is_read_only(self):
        samples = encode(b"A", TABLE, NO_SYNC)
        with pytest.raises(ValueError):
            samples[0] = 1

    def test_sample_rate(self):
        timing = TimingConfig(start_tone_freq=0, end_tone_freq=0, sample_rate=8000)
        assert len(encode(b"A", TABLE, timing)) == 1600 + 400


class TestFrameEncoder:
    """Test the encoder class."""

    def test_encode_to_file(self, tmp_path):
        encoder = FrameEncoder(TABLE, NO_SYNC)
        path = tmp_path / "out.wav"
        samples = encoder.encode_to_file("BA", path)

        read_back, info = read_wav(path)
        assert info.sample_rate == 44100
        assert np.array_equal(read_back, samples)

    def test_deterministic(self):
        encoder = FrameEncoder(TABLE)
        assert np.array_equal(encoder.encode("ABBA"), encoder.encode("ABBA"))
