"""Arcade game support: audio mixing, WAV and PNG loading, vector math, input events and data paths."""

__version__ = "0.1.0"