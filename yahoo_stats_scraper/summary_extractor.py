"""
Extraction of the quote summary tables ("Previous Close", "Market Cap", ...).
"""

import logging
from typing import Dict

from .config import Selectors
from .exceptions import MissingSectionError
from .section_locator import find_by_attribute, locate_quote_summary, parse_html
from .table_processor import TableProcessor, TypedValue

logger = logging.getLogger(__name__)

SummaryRecord = Dict[str, TypedValue]


def extract_summary(html: str) -> SummaryRecord:
    """
    Get the values from the summary tables of a quote page.

    The summary is split into a left and a right table. Rows are merged left
    table first, so a label present in both keeps the right table's value.

    Args:
        html: Quote page HTML (any document containing the div#quote-summary)

    Returns:
        Mapping of row label to typed value

    Raises:
        MissingSectionError: If the page has no quote summary
    """
    if not html or Selectors.QUOTE_SUMMARY_MARKER not in html:
        raise MissingSectionError("quote summary", "No summary found")

    summary = locate_quote_summary(parse_html(html))

    record: SummaryRecord = {}
    for table_name in (Selectors.LEFT_SUMMARY_TABLE, Selectors.RIGHT_SUMMARY_TABLE):
        table = find_by_attribute(summary, 'data-test', table_name, 'div')
        if table is None:
            logger.warning(f"Summary table '{table_name}' not found, skipping")
            continue

        cells = TableProcessor.read_cells(table)
        TableProcessor.merge_cells(cells, into=record)
        logger.debug(f"'{table_name}': {len(cells)} rows")

    logger.info(f"Extracted {len(record)} summary values")
    return record
