"""
ToneLink command-line tools.
"""

import logging

import click

from ..config import Config, load_config
from ..errors import ConfigLoadError


def setup_logging(verbose: bool):
    """Route library logging to stderr; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def load_config_or_exit(path: str) -> Config:
    """Load the configuration, exiting with status 1 if it cannot be read."""
    try:
        return load_config(path)
    except ConfigLoadError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
