"""
Table processing utilities: reading label/value rows and typing cell values.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from bs4 import Tag

from .config import Patterns
from .section_locator import body_rows, cell_text, child_tags

logger = logging.getLogger(__name__)

TypedValue = Union[float, str]


# ============================================================================
# TEXT UTILITIES
# ============================================================================

def normalize_text(text: str) -> str:
    """
    Normalize text by removing extra whitespace and invisible Unicode characters.
    """
    if not text:
        return ""

    invisible_chars = [
        '\u200b',  # Zero-width space
        '\u200c',  # Zero-width non-joiner
        '\u200d',  # Zero-width joiner
        '\ufeff',  # Byte order mark
    ]

    for char in invisible_chars:
        text = text.replace(char, '')

    return ' '.join(text.split())


# ============================================================================
# VALUE COERCION
# ============================================================================

def parse_decimal(text: str) -> Optional[float]:
    """
    Parse a complete decimal numeral.

    "136.20" -> 136.2, "-3" -> -3.0, "1e3" -> 1000.0.
    Partial numerals such as "1,234", "24.01%" or "137.57 x 800" return None,
    as do numerals that overflow to infinity ("1e999").
    """
    if not isinstance(text, str):
        return None

    text = text.strip()
    if not Patterns.DECIMAL.match(text):
        return None

    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def coerce_value(raw_value: Optional[str]) -> Optional[TypedValue]:
    """
    Type a raw cell string.

    Returns:
        A float for a complete decimal numeral, otherwise the trimmed string.
        None when the value trims to empty.
    """
    if raw_value is None:
        return None

    value = raw_value.strip()
    if not value:
        return None

    number = parse_decimal(value)
    return number if number is not None else value


def coerce_cell(label: Optional[str], raw_value: Optional[str]) -> Optional[Tuple[str, TypedValue]]:
    """
    Turn a label/value pair into a typed entry, or None if it should be dropped.
    """
    label = (label or "").strip()
    if not label:
        return None

    value = coerce_value(raw_value)
    if value is None:
        return None

    return label, value


# ============================================================================
# TABLE READING
# ============================================================================

@dataclass(frozen=True)
class Cell:
    """A label/value pair read from one table row."""
    label: str
    value: str


class TableProcessor:
    """Reads two-column label/value tables."""

    @staticmethod
    def read_cells(table: Optional[Tag]) -> List[Cell]:
        """
        Read the body rows of a label/value table.

        Column 1 is the label and column 2 the raw value. Rows without a
        second column get an empty value.

        Args:
            table: BeautifulSoup tag of a <table> (or a container holding one)

        Returns:
            Cells in document order
        """
        if table is None:
            return []

        if table.name != 'table':
            table = table.find('table')
            if table is None:
                return []

        cells = []
        for row in body_rows(table):
            columns = child_tags(row, ['td', 'th'])
            if not columns:
                continue
            label = cell_text(columns[0])
            value = cell_text(columns[1]) if len(columns) > 1 else ""
            cells.append(Cell(label, value))

        logger.debug(f"Read {len(cells)} label/value rows")
        return cells

    @staticmethod
    def merge_cells(cells: Iterable[Cell], into: Optional[Dict[str, TypedValue]] = None) -> Dict[str, TypedValue]:
        """
        Coerce cells and merge them into a mapping in order.

        Later cells overwrite earlier ones with the same label. Cells with an
        empty label or value are dropped.
        """
        merged = {} if into is None else into
        for cell in cells:
            entry = coerce_cell(cell.label, cell.value)
            if entry is None:
                continue
            label, value = entry
            if label in merged:
                logger.debug(f"Label '{label}' seen again, keeping later value {value!r}")
            merged[label] = value
        return merged
