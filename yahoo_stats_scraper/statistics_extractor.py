"""
Extraction of the key statistics page.

The statistics section holds three parts:
- Valuation Measures: a grid with dates across the top and metrics down the side
- Financial Highlights and Trading Information: several small label/value
  tables, each under its own <h3>
"""

import logging
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from .config import CURRENT_COLUMN, QUARTER_KEY, Patterns, Selectors
from .exceptions import LabelMissingError, MissingSectionError
from .section_locator import (
    body_rows,
    cell_text,
    child_tags,
    contains_table,
    dump_html_context,
    find_heading,
    following_siblings,
    header_cells,
    locate_statistics,
)
from .table_processor import TableProcessor, TypedValue, normalize_text

logger = logging.getLogger(__name__)

ValuationRow = Dict[str, str]
StatisticsRecord = Dict[str, TypedValue]


# ============================================================================
# VALUATION MEASURES
# ============================================================================

def parse_quarter_header(text: str) -> Optional[str]:
    """
    Map a valuation grid header to its column key.

    Returns:
        "Current", the header text for a m/d/yyyy date, or None for any
        other header (such as the empty label column)
    """
    text = normalize_text(text)
    if CURRENT_COLUMN in text:
        return CURRENT_COLUMN
    if Patterns.QUARTER_DATE.search(text):
        return text
    return None


def find_valuation_table(statistics: Tag) -> Tag:
    """
    Find the Valuation Measures grid.

    The table is not inside the heading's element: it sits in one of the
    heading's later siblings.

    Raises:
        MissingSectionError: If the heading or the table is absent
    """
    heading = find_heading(statistics, Selectors.VALUATION_HEADING)
    if heading is None:
        raise MissingSectionError("Valuation Measures section")

    for sibling in following_siblings(heading):
        table = contains_table(sibling)
        if table is not None:
            return table

    logger.debug(dump_html_context(heading))
    raise MissingSectionError("Valuation Measures table")


def extract_valuation_measures(statistics: Tag) -> List[ValuationRow]:
    """
    Read the Valuation Measures grid into one record per date column.

    Output format:
        [{'quarter': 'Current', 'Market Cap (intraday)': '1.73T', ...},
         {'quarter': '9/30/2023', 'Market Cap (intraday)': '1.65T', ...}]

    Values are left as the cell text; they are not coerced.

    Args:
        statistics: The statistics container

    Returns:
        Records ordered like the header columns, newest first on real pages

    Raises:
        MissingSectionError: If the heading or table is absent
        LabelMissingError: If a body row has no metric label
    """
    table = find_valuation_table(statistics)

    quarters = []
    for header in header_cells(table):
        quarter = parse_quarter_header(cell_text(header))
        if quarter is not None:
            quarters.append(quarter)

    if not quarters:
        logger.warning("Valuation Measures table has no date or Current columns")

    measures_by_date: List[ValuationRow] = [{QUARTER_KEY: quarter} for quarter in quarters]
    num_quarters = len(quarters)

    for row_idx, row in enumerate(body_rows(table)):
        cells = child_tags(row, ['td', 'th'])
        label = cell_text(cells[0]) if cells else ""
        if not label:
            raise LabelMissingError(row_idx)

        values = [cell_text(cell) for cell in cells[1:]]
        if len(values) != num_quarters:
            logger.warning(f"Row {row_idx} ('{label}'): "
                           f"Found {len(values)} values, expected {num_quarters}")

        # zip stops at the shorter side, extra cells or columns are dropped
        for record, value in zip(measures_by_date, values):
            record[label] = value

    logger.info(f"Extracted Valuation Measures for {num_quarters} columns")
    return measures_by_date


# ============================================================================
# FINANCIAL HIGHLIGHTS AND TRADING INFORMATION
# ============================================================================

def _is_highlight_section(tag: Tag) -> bool:
    """A container with its own <h3> heading and <table> as direct children."""
    if tag.name not in ('div', 'section'):
        return False
    return (tag.find(Selectors.HIGHLIGHT_HEADING_TAG, recursive=False) is not None
            and tag.find('table', recursive=False) is not None)


def extract_financial_and_trading_info(statistics: Tag) -> StatisticsRecord:
    """
    Merge every small label/value table of the statistics page into one mapping.

    Section headings ("Fiscal Year", "Profitability", "Share Statistics", ...)
    are not used as namespaces; a label repeated in a later table overwrites
    the earlier one.

    Args:
        statistics: The statistics container

    Returns:
        Mapping of row label to typed value, empty if no tables are found
    """
    merged: StatisticsRecord = {}
    sections = statistics.find_all(_is_highlight_section)

    for section in sections:
        heading = cell_text(section.find(Selectors.HIGHLIGHT_HEADING_TAG, recursive=False))
        cells = TableProcessor.read_cells(section.find('table', recursive=False))
        TableProcessor.merge_cells(cells, into=merged)
        logger.debug(f"Highlights '{heading}': {len(cells)} rows")

    logger.info(f"Extracted {len(merged)} values from {len(sections)} highlight tables")
    return merged


# ============================================================================
# COMBINED STATISTICS
# ============================================================================

def merge_statistics(
    highlights: StatisticsRecord,
    valuation_measures: List[ValuationRow],
    valuation_column: int = 0
) -> StatisticsRecord:
    """
    Build the flat statistics record.

    Highlights go in first, then one valuation column (the first one, "Current"
    on real pages, unless another index is given), so valuation values win on
    a label collision. The column's 'quarter' key is kept.
    """
    stats: StatisticsRecord = dict(highlights)

    if valuation_column < len(valuation_measures):
        stats.update(valuation_measures[valuation_column])
    elif valuation_measures:
        logger.warning(f"Valuation column {valuation_column} requested, "
                       f"only {len(valuation_measures)} available")

    return stats


def extract_statistics_with_valuation(
    html: str,
    valuation_column: int = 0
) -> Tuple[StatisticsRecord, List[ValuationRow]]:
    """
    Get the combined values of a key statistics page and every valuation column.

    Returns:
        (flat statistics record, Valuation Measures records)

    Raises:
        MissingSectionError: If the statistics section or Valuation Measures are absent
        LabelMissingError: If a Valuation Measures row has no label
    """
    statistics = locate_statistics(html)

    valuation_measures = extract_valuation_measures(statistics)
    highlights = extract_financial_and_trading_info(statistics)

    stats = merge_statistics(highlights, valuation_measures, valuation_column)
    return stats, valuation_measures


def extract_statistics(html: str, valuation_column: int = 0) -> StatisticsRecord:
    """
    Get the combined values of a key statistics page.

    Raises:
        MissingSectionError: If the statistics section or Valuation Measures are absent
        LabelMissingError: If a Valuation Measures row has no label
    """
    stats, _ = extract_statistics_with_valuation(html, valuation_column)
    return stats
