"""Soundstorm - terminal player for a single internet radio stream."""

__version__ = "0.3.0"
