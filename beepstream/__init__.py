"""Composable audio sample streams: mixing, looping, resampling, effects and WAVE files."""

__version__ = "0.1.0"