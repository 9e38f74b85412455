"""Subcommands for ``joshi-news``."""
