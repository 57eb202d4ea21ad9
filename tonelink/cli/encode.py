#!/usr/bin/env python3
"""
ToneLink Encoder CLI - Encode a text file into a tone WAV file.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from .. import DEFAULT_CONFIG_FILE
from ..encoder import FrameEncoder
from ..errors import TonelinkError
from . import load_config_or_exit, setup_logging


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False), required=False)
@click.option(
    "-c", "--config",
    type=click.Path(),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Configuration file",
)
@click.option(
    "-p", "--play",
    is_flag=True,
    help="Also play the encoded audio",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def main(input_file: str, output: Optional[str], config: str, play: bool, verbose: bool):
    """
    Encode INPUT_FILE as tones and write OUTPUT (default: the configured
    OUTPUT_WAV_FILENAME).

    Examples:

        tonelink-encode message.txt

        tonelink-encode message.txt out.wav -c my_config.ini
    """
    setup_logging(verbose)
    cfg = load_config_or_exit(config)
    output = output or cfg.output_wav_filename

    text = Path(input_file).read_bytes()

    if verbose:
        timing = cfg.timing
        click.echo(f"Encoding {len(text)} bytes from {input_file}")
        click.echo(f"  Output: {output}")
        click.echo(f"  Sample rate: {timing.sample_rate} Hz")
        click.echo(f"  Characters mapped: {len(cfg.table)}")

    encoder = FrameEncoder.from_config(cfg)

    try:
        samples = encoder.encode_to_file(text, output)
    except (TonelinkError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Generated {output} ({len(samples) / cfg.timing.sample_rate:.2f}s)")

    if play:
        import sounddevice as sd
        sd.play(samples, cfg.timing.sample_rate)
        sd.wait()


if __name__ == "__main__":
    main()
