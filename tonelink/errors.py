"""
ToneLink exception hierarchy.
"""


class TonelinkError(Exception):
    """Base class for all ToneLink errors."""


class ConfigLoadError(TonelinkError):
    """Configuration file could not be read."""


class EncodingError(TonelinkError):
    """Text could not be turned into a frame."""


class EmptyInputError(EncodingError):
    """Nothing to encode."""

    def __init__(self, message: str = "Input text is empty"):
        super().__init__(message)


class EmptyTableError(EncodingError):
    """Frequency table has no entries."""

    def __init__(self, message: str = "Character to frequency table is empty"):
        super().__init__(message)


class ContainerFormatError(TonelinkError):
    """WAV container is malformed or unsupported."""


class TimingError(TonelinkError, ValueError):
    """Timing parameters leave no room for a tone window."""
