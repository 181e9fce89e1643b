"""URL and email content-safety analysis."""

__version__ = "0.1.0"
