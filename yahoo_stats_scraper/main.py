"""
Command-line interface for the Yahoo Finance ticker scraper.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ScraperConfig
from .data_extractor import get_ticker_data
from .exceptions import ScraperError
from .storage import save_to_disk, save_valuation_csv

LOG_FILE = "scraper_debug.log"


def setup_logging(verbose: bool = False, log_file: Optional[str] = LOG_FILE):
    """
    Set up logging configuration.

    Args:
        verbose: If True, enable DEBUG level logging on the console
        log_file: Debug log path, or None to skip the file handler
    """
    logger = logging.getLogger("yahoo_stats_scraper")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if logger.handlers:
        return logger

    # File handler - always DEBUG
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(name)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    # Console handler on stderr so stdout stays clean JSON
    console_handler = logging.StreamHandler(sys.stderr)
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.addHandler(console_handler)

    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='yahoo-stats-scraper',
        description='Extract quote summary and key statistics for a ticker from Yahoo Finance',
        epilog='Example: yahoo-stats-scraper GOOG -o out/GOOG.json'
    )
    parser.add_argument('ticker', help='Stock ticker symbol, e.g. GOOG')
    parser.add_argument(
        '-o', '--output',
        help='Write the record as JSON to this path instead of printing it',
        default=None
    )
    parser.add_argument(
        '--valuation-csv',
        action='store_true',
        help='Also save every Valuation Measures column as CSV'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging on the console'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    ticker = args.ticker.strip().upper()
    if not ticker:
        print("No ticker entered. Exiting.", file=sys.stderr)
        return 2

    config = ScraperConfig(verbose=args.verbose)
    logger = setup_logging(verbose=config.verbose)

    try:
        logger.info(f"Starting scrape for {ticker}...")
        data = get_ticker_data(ticker, config=config, include_valuation_measures=args.valuation_csv)

        valuation_measures = data.pop('valuation_measures', None)
        if valuation_measures is not None:
            save_valuation_csv(valuation_measures, ticker, config.output_dir)

        if args.output:
            output = Path(args.output)
            save_to_disk(output.name, data, output.parent)
        else:
            print(json.dumps(data, indent=2))

    except KeyboardInterrupt:
        print("\nProcess interrupted by user", file=sys.stderr)
        return 130
    except ScraperError as e:
        logger.critical(f"Scrape failed for {ticker}: {e}", exc_info=True)
        print(f"\nAn error occurred. Check '{LOG_FILE}' for details.", file=sys.stderr)
        return 1

    logger.info(f"SUCCESS! Extracted {len(data['summary'])} summary and "
                f"{len(data['stats'])} statistics values for {ticker}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
