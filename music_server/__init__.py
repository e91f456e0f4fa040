"""Local music server: scans a music folder and streams tracks with HTTP range support."""

__version__ = "0.1.0"
