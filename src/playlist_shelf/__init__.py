"""Paced, credential-aware loader for a SoundCloud playlist shelf."""

__version__ = "0.1.0"
