#!/usr/bin/env python3
"""
ToneLink Decoder CLI - Decode text from a tone WAV file.
"""

import sys

import click

from .. import DEFAULT_CONFIG_FILE, DECODED_TEXT_FILE
from ..decoder import decode_file
from ..errors import TonelinkError
from . import load_config_or_exit, setup_logging


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-c", "--config",
    type=click.Path(),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Configuration file",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False),
    default=DECODED_TEXT_FILE,
    show_default=True,
    help="File the decoded text is also saved to",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def main(input_file: str, config: str, output: str, verbose: bool):
    """
    Decode text from INPUT_FILE.

    Examples:

        tonelink-decode sound.wav

        tonelink-decode sound.wav -c my_config.ini -o message.txt
    """
    setup_logging(verbose)
    cfg = load_config_or_exit(config)

    try:
        result = decode_file(input_file, cfg)
    except TonelinkError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if verbose:
        click.echo(f"Start tone: {'detected' if result.start_tone_detected else 'not detected'}")
        click.echo(f"End tone:   {'detected' if result.end_tone_detected else 'not detected'}")
        click.echo(f"Windows:    {result.windows}")

    click.echo("\n--- Decoded Text ---")
    click.echo(result.text if result.text else "(No characters decoded)")
    click.echo("--------------------")

    try:
        with open(output, "w", encoding="latin-1", newline="") as f:
            f.write(result.text)
    except OSError as e:
        click.echo(f"Error: Could not write decoded text to {output}: {e}", err=True)
        return
    click.echo(f"Decoded content also saved to: {output}")


if __name__ == "__main__":
    main()
