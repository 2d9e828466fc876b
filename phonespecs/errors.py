"""Exception hierarchy shared by the scraper, the pipeline and the DB layer.

Transient network failures are plain ``httpx`` exceptions and are retried
inside :func:`~phonespecs.scraper.fetcher.fetch_page`; only the types below
ever reach the pipeline driver.
"""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for every error raised by phonespecs."""


class FetchError(ScraperError):
    """A page could not be fetched: retries exhausted or malformed URL."""

    def __init__(self, url: str, message: str, attempts: int = 0) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url
        self.attempts = attempts


class PersistenceError(ScraperError):
    """The record sink rejected a record."""


class Interrupted(ScraperError):
    """The run was asked to stop while waiting or before a fetch."""
