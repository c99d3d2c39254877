"""Filter template parsing, release-note rendering and data maintenance helpers."""

__version__ = "0.1.0"