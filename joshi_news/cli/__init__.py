"""Command-line interface for the news collector."""
