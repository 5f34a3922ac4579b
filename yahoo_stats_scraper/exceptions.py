"""
Exceptions raised while fetching and extracting quote page data.
"""

from typing import Optional


class ScraperError(Exception):
    """Base exception for scraper errors."""
    pass


class MissingSectionError(ScraperError):
    """An expected container, heading or table is absent from the page."""

    def __init__(self, section: str, message: Optional[str] = None):
        self.section = section
        super().__init__(message or f"No {section} found")


class LabelMissingError(ScraperError):
    """A table row has no readable label cell."""

    def __init__(self, row_index: int, section: str = "Valuation Measures"):
        self.row_index = row_index
        self.section = section
        super().__init__(f"No label found in {section} row {row_index}")


class FetchError(ScraperError):
    """A page could not be downloaded."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)
