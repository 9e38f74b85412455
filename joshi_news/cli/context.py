"""Shared CLI setup."""

from __future__ import annotations

import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for a CLI run."""
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # Selenium and urllib3 are chatty at DEBUG
    for noisy in ("selenium", "urllib3"):
        logging.getLogger(noisy).setLevel(max(numeric, logging.INFO))
