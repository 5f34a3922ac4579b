"""
Yahoo Finance Ticker Scraper

Extracts the quote summary and key statistics of a ticker from Yahoo Finance pages.
"""

__version__ = "1.0.0"

# Public API
from .config import ScraperConfig, HEADERS
from .exceptions import ScraperError, MissingSectionError, LabelMissingError, FetchError
from .yahoo_client import YahooClient
from .section_locator import locate_statistics, locate_quote_summary
from .table_processor import TableProcessor, coerce_cell, coerce_value, normalize_text
from .summary_extractor import extract_summary
from .statistics_extractor import (
    extract_valuation_measures,
    extract_financial_and_trading_info,
    extract_statistics,
    extract_statistics_with_valuation,
    merge_statistics,
)
from .data_extractor import get_ticker_data, ticker_url, ticker_stats_url
from .storage import save_to_disk, save_valuation_csv

__all__ = [
    # Main functions
    'get_ticker_data',
    'extract_summary',
    'extract_statistics',
    'extract_statistics_with_valuation',

    # Configuration
    'ScraperConfig',
    'HEADERS',

    # Errors
    'ScraperError',
    'MissingSectionError',
    'LabelMissingError',
    'FetchError',

    # Components (for advanced usage)
    'YahooClient',
    'TableProcessor',
    'locate_statistics',
    'locate_quote_summary',
    'extract_valuation_measures',
    'extract_financial_and_trading_info',
    'merge_statistics',

    # Utilities
    'coerce_cell',
    'coerce_value',
    'normalize_text',
    'ticker_url',
    'ticker_stats_url',
    'save_to_disk',
    'save_valuation_csv',
]
