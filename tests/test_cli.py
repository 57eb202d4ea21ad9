"""
Tests for the command-line tools.
"""

import sys
import types

import pytest
from click.testing import CliRunner

from tonelink import read_wav
from tonelink.cli import beep, decode, encode

CONFIG = """\
# test configuration
SAMPLE_RATE = 44100
TONE_DURATION_S = 0.1
SILENCE_DURATION_S = 0.02
START_TONE_FREQ = 500
END_TONE_FREQ = 4000
SYNC_TONE_DURATION_S = 0.2
CHAR_E = 1400
CHAR_H = 1700
CHAR_L = 2100
CHAR_O = 2400
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "audio_config.ini"
    path.write_text(CONFIG)
    return path


@pytest.fixture
def message_file(tmp_path):
    path = tmp_path / "message.txt"
    path.write_bytes(b"HELLO\n")
    return path


class TestEncodeCli:
    """Test tonelink-encode."""

    def test_encode(self, runner, tmp_path, config_file, message_file):
        output = tmp_path / "out.wav"
        result = runner.invoke(encode.main, [str(message_file), str(output), "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "Generated" in result.output

        samples, info = read_wav(output)
        assert info.sample_rate == 44100
        assert len(samples) > 0

    def test_missing_config(self, runner, tmp_path, message_file):
        result = runner.invoke(encode.main, [str(message_file), "-c", str(tmp_path / "none.ini")])
        assert result.exit_code == 1
        assert "Could not open config file" in result.output

    def test_empty_input(self, runner, tmp_path, config_file):
        empty = tmp_path / "empty.txt"
        empty.write_bytes(b"")
        result = runner.invoke(encode.main, [str(empty), str(tmp_path / "out.wav"), "-c", str(config_file)])
        assert result.exit_code == 1
        assert "empty" in result.output

    def test_play(self, runner, tmp_path, config_file, message_file, monkeypatch):
        played = {}
        fake_sd = types.SimpleNamespace(
            play=lambda samples, rate: played.update(n=len(samples), rate=rate),
            wait=lambda: None,
        )
        monkeypatch.setitem(sys.modules, "sounddevice", fake_sd)

        output = tmp_path / "out.wav"
        result = runner.invoke(
            encode.main, [str(message_file), str(output), "-c", str(config_file), "--play"]
        )
        assert result.exit_code == 0, result.output
        assert played["rate"] == 44100
        assert played["n"] == len(read_wav(output)[0])


class TestDecodeCli:
    """Test tonelink-decode."""

    def test_round_trip(self, runner, tmp_path, config_file, message_file):
        wav = tmp_path / "out.wav"
        side = tmp_path / "decoded.txt"
        runner.invoke(encode.main, [str(message_file), str(wav), "-c", str(config_file)])

        result = runner.invoke(decode.main, [str(wav), "-c", str(config_file), "-o", str(side), "-v"])
        assert result.exit_code == 0, result.output
        assert "--- Decoded Text ---" in result.output
        assert "HELLO" in result.output
        assert "Start tone: detected" in result.output
        assert side.read_text() == "HELLO"

    def test_nothing_decoded(self, runner, tmp_path, config_file):
        from tonelink import silence, write_wav

        wav = tmp_path / "quiet.wav"
        write_wav(wav, silence(1.0, 44100), 44100)
        side = tmp_path / "decoded.txt"

        result = runner.invoke(decode.main, [str(wav), "-c", str(config_file), "-o", str(side)])
        assert result.exit_code == 0, result.output
        assert "(No characters decoded)" in result.output
        assert side.read_text() == ""

    def test_bad_container(self, runner, tmp_path, config_file):
        bad = tmp_path / "bad.wav"
        bad.write_bytes(b"not a wav file at all")
        result = runner.invoke(decode.main, [str(bad), "-c", str(config_file)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_tone_shorter_than_one_sample(self, runner, tmp_path):
        from tonelink import silence, write_wav

        cfg = tmp_path / "tiny.ini"
        cfg.write_text("TONE_DURATION_S = 0.00001\nCHAR_A = 1000\n")
        wav = tmp_path / "quiet.wav"
        write_wav(wav, silence(0.5, 44100), 44100)

        result = runner.invoke(decode.main, [str(wav), "-c", str(cfg), "-o", str(tmp_path / "out.txt")])
        assert result.exit_code == 1
        assert "Error: tone_duration" in result.output

    def test_zero_tone_duration_uses_default(self, runner, tmp_path):
        from tonelink import silence, write_wav

        cfg = tmp_path / "zero.ini"
        cfg.write_text("TONE_DURATION_S = 0\nCHAR_A = 1000\n")
        wav = tmp_path / "quiet.wav"
        write_wav(wav, silence(0.5, 44100), 44100)

        result = runner.invoke(decode.main, [str(wav), "-c", str(cfg), "-o", str(tmp_path / "out.txt")])
        assert result.exit_code == 0, result.output
        assert "(No characters decoded)" in result.output


class TestBeepCli:
    """Test tonelink-beep."""

    def test_digits(self, runner, tmp_path):
        digits = tmp_path / "binary.txt"
        digits.write_text("01000001 ")
        output = tmp_path / "beeps.wav"
        result = runner.invoke(
            beep.main, [str(digits), "-o", str(output), "-c", str(tmp_path / "none.json")]
        )
        assert result.exit_code == 0, result.output
        samples, _ = read_wav(output)
        # 8 beeps, 7 bit silences, one byte silence
        assert len(samples) == 8 * 4410 + 7 * 2205 + 8820

    def test_from_text(self, runner, tmp_path):
        message = tmp_path / "message.txt"
        message.write_text("A")
        output = tmp_path / "beeps.wav"
        result = runner.invoke(
            beep.main,
            [str(message), "--from-text", "-o", str(output), "-c", str(tmp_path / "none.json")],
        )
        assert result.exit_code == 0, result.output
        assert len(read_wav(output)[0]) == 8 * 4410 + 7 * 2205 + 8820

    def test_no_digits(self, runner, tmp_path):
        digits = tmp_path / "binary.txt"
        digits.write_text("\n")
        result = runner.invoke(beep.main, [str(digits), "-c", str(tmp_path / "none.json")])
        assert result.exit_code == 0
        assert "No audio file generated" in result.output
