"""Audio pre-processing and transcript analytics for speech coaching."""

__version__ = "1.0.0"
