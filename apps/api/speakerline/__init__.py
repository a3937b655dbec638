"""Speakerline: speaker-segmented transcripts for uploaded media."""

__version__ = "0.1.0"
