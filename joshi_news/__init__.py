"""Women's wrestling news collector."""

__version__ = "0.1.0"
