"""
Main orchestration for extracting ticker data from Yahoo Finance.
"""

import logging
from typing import Any, Dict, Optional

from .config import ScraperConfig
from .statistics_extractor import extract_statistics_with_valuation
from .summary_extractor import extract_summary
from .yahoo_client import YahooClient

logger = logging.getLogger(__name__)


def ticker_url(ticker: str) -> str:
    """Quote summary URL for a ticker."""
    return ScraperConfig().ticker_url(ticker)


def ticker_stats_url(ticker: str) -> str:
    """Key statistics URL for a ticker."""
    return ScraperConfig().ticker_stats_url(ticker)


def get_ticker_data(
    ticker: str,
    client: Optional[YahooClient] = None,
    config: Optional[ScraperConfig] = None,
    include_valuation_measures: bool = False
) -> Dict[str, Any]:
    """
    Fetch and extract the summary and statistics of a ticker.

    Args:
        ticker: Stock ticker symbol
        client: Optional client used for both downloads
        config: Optional scraper configuration
        include_valuation_measures: Also return every Valuation Measures
            column under 'valuation_measures'

    Returns:
        {'summary': {...}, 'stats': {...}}

    Raises:
        FetchError: If either page cannot be downloaded
        MissingSectionError: If a page lacks an expected section
        LabelMissingError: If a Valuation Measures row has no label
    """
    if config is None:
        config = ScraperConfig()
    if client is None:
        client = YahooClient(timeout=config.timeout)

    summary_url = config.ticker_url(ticker)
    stats_url = config.ticker_stats_url(ticker)

    summary_html = client.fetch_html(summary_url)
    stats_html = client.fetch_html(stats_url)

    summary = extract_summary(summary_html)

    stats, valuation_measures = extract_statistics_with_valuation(stats_html, config.valuation_column)

    logger.info(f"{ticker}: {len(summary)} summary values, {len(stats)} statistics values")

    data = {
        'summary': summary,
        'stats': stats,
    }
    if include_valuation_measures:
        data['valuation_measures'] = valuation_measures
    return data
