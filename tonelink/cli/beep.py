#!/usr/bin/env python3
"""
ToneLink Beep CLI - Render binary digits as beeps.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from ..binary import DEFAULT_BEEP_CONFIG_FILE, encode_bits, load_beep_config, text_to_binary
from ..wav import write_wav
from . import setup_logging


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-c", "--config",
    type=click.Path(),
    default=DEFAULT_BEEP_CONFIG_FILE,
    show_default=True,
    help="JSON configuration file",
)
@click.option(
    "-t", "--from-text",
    is_flag=True,
    help="Treat INPUT_FILE as text and convert it to binary digits first",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False),
    help="Output WAV file (default: <input name>_audio.wav)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def main(input_file: str, config: str, from_text: bool, output: Optional[str], verbose: bool):
    """
    Render a file of 0/1 digits (space-separated bytes) as beeps.

    Examples:

        tonelink-beep binary.txt

        tonelink-beep message.txt --from-text -o message.wav
    """
    setup_logging(verbose)
    cfg = load_beep_config(config)

    data = Path(input_file).read_bytes()
    digits = text_to_binary(data) if from_text else data.decode("latin-1")

    samples = encode_bits(digits, cfg)
    if len(samples) == 0:
        click.echo("Input contains no '0' or '1' digits. No audio file generated.")
        return

    output = output or f"{Path(input_file).stem}_audio.wav"
    try:
        write_wav(output, samples, cfg.sample_rate)
    except OSError as e:
        click.echo(f"Error: Could not write {output}: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Generated {output} ({len(samples) / cfg.sample_rate:.2f}s)")


if __name__ == "__main__":
    main()
