"""
Configuration and constants for the Yahoo Finance ticker scraper.
"""

import re
from dataclasses import dataclass

# ============================================================================
# URLS AND REQUEST HEADERS
# ============================================================================

BASE_URL = "https://finance.yahoo.com/quote"

# Appended to the quote URL; {ticker} is filled in by the caller
STATS_PATH_TEMPLATE = "/key-statistics?p={ticker}"

# Browser-like headers; Yahoo blocks obvious scripts.
# No 'br' in Accept-Encoding: requests only decodes it with brotli installed.
HEADERS = {
    'User-Agent': (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/118.0.0.0 Safari/537.36'
    ),
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.9',
    'Accept-Encoding': 'gzip, deflate',
    'Connection': 'keep-alive',
}

DEFAULT_TIMEOUT = 30


# ============================================================================
# PAGE SELECTORS
# ============================================================================

class Selectors:
    """Attribute values that identify the sections of a quote page."""

    # Summary page
    QUOTE_SUMMARY_MARKER = 'quote-summary'
    QUOTE_SUMMARY_ID = 'quote-summary'
    LEFT_SUMMARY_TABLE = 'left-summary-table'
    RIGHT_SUMMARY_TABLE = 'right-summary-table'

    # Statistics page
    STATISTICS_SECTION = 'qsp-statistics'
    VALUATION_HEADING = 'Valuation Measures'
    HIGHLIGHT_HEADING_TAG = 'h3'

    HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']


# ============================================================================
# REGEX PATTERNS
# ============================================================================

class Patterns:
    """Pre-compiled regex patterns for performance."""

    # Valuation grid column header, e.g. "9/30/2023"
    QUARTER_DATE = re.compile(r'\d{1,2}/\d{1,2}/\d{4}')

    # A complete decimal numeral: "136.20", "-0.5", ".75", "1e6"
    # No thousands separators, currency symbols or percent signs.
    DECIMAL = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')


CURRENT_COLUMN = 'Current'
QUARTER_KEY = 'quarter'


# ============================================================================
# SCRAPER CONFIGURATION
# ============================================================================

@dataclass
class ScraperConfig:
    """Configuration for the scraper."""

    # Root of the quote pages
    base_url: str = BASE_URL

    # Per-request timeout in seconds
    timeout: float = DEFAULT_TIMEOUT

    # Folder that saved records are written to
    output_dir: str = "out"

    # Which valuation grid column is merged into the flat stats record
    valuation_column: int = 0

    # Console logging at DEBUG level (read by the command line)
    verbose: bool = False

    def __post_init__(self):
        self.base_url = self.base_url.rstrip('/')
        if self.valuation_column < 0:
            raise ValueError(f"valuation_column must be >= 0, got {self.valuation_column}")

    def ticker_url(self, ticker: str) -> str:
        """Get the quote summary URL for a ticker."""
        return f"{self.base_url}/{ticker}"

    def ticker_stats_url(self, ticker: str) -> str:
        """Get the key statistics URL for a ticker."""
        return self.ticker_url(ticker) + STATS_PATH_TEMPLATE.format(ticker=ticker)
