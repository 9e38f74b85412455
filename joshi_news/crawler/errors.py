"""Exceptions raised inside the crawler package."""


class FetchError(Exception):
    """Raised when a listing page could not be acquired by any strategy."""

    pass


class ExtractionError(Exception):
    """Raised when listing markup cannot be turned into candidates."""

    pass


class BrowserUnavailableError(Exception):
    """Raised when no browser engine could be started.

    Once raised for an engine, the owning component stops retrying the
    launch for the rest of the batch.
    """

    pass
