"""
Section locators and the small tree-walk interface the extractors are built on.

The extractors never use selector strings; they only call the helpers below,
which are backed by BeautifulSoup.
"""

import logging
from typing import Iterator, List, Optional, Union

from bs4 import BeautifulSoup, Tag

from .config import Selectors
from .exceptions import MissingSectionError

logger = logging.getLogger(__name__)

Document = Union[str, BeautifulSoup]


# ============================================================================
# TREE WALKING
# ============================================================================

def parse_html(html: Document) -> BeautifulSoup:
    """Parse an HTML string. An already parsed document is returned as is."""
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html, 'html.parser')


def find_by_attribute(
    root: Tag,
    attribute: str,
    value: str,
    tag_name: Optional[str] = None
) -> Optional[Tag]:
    """
    Find the first descendant whose attribute equals a value.

    Args:
        root: Element to search under
        attribute: Attribute name, e.g. 'id' or 'data-test'
        value: Exact attribute value
        tag_name: Optional tag name restriction

    Returns:
        Matching element or None
    """
    return root.find(tag_name or True, attrs={attribute: value})


def child_tags(element: Tag, tag_names: Union[str, List[str]]) -> List[Tag]:
    """Direct child elements with the given tag name(s), in document order."""
    return element.find_all(tag_names, recursive=False)


def following_siblings(element: Tag) -> Iterator[Tag]:
    """Element siblings after `element`, in document order. Text nodes are skipped."""
    for sibling in element.next_siblings:
        if isinstance(sibling, Tag):
            yield sibling


def _in_footnote(string, element: Tag) -> bool:
    for parent in string.parents:
        if parent is element:
            return False
        if parent.name == 'sup':
            return True
    return False


def cell_text(element: Optional[Tag]) -> str:
    """
    Text content of an element with surrounding whitespace trimmed.

    Superscript footnote markers ("Payout Ratio<sup>4</sup>") are left out.
    """
    if element is None:
        return ""
    return "".join(
        string for string in element.strings
        if not _in_footnote(string, element)
    ).strip()


def body_rows(table: Tag) -> List[Tag]:
    """
    Body rows of a table.

    Uses the rows directly under <tbody>. Tables written without a <tbody>
    fall back to their direct <tr> children.
    """
    tbody = table.find('tbody')
    if tbody is not None:
        return child_tags(tbody, 'tr')
    return child_tags(table, 'tr')


def header_cells(table: Tag) -> List[Tag]:
    """<th> cells of the first header row of a table."""
    thead = table.find('thead')
    if thead is None:
        return []
    header_row = thead.find('tr')
    if header_row is None:
        return []
    return child_tags(header_row, 'th')


def contains_table(element: Tag) -> Optional[Tag]:
    """Return the element itself if it is a table, else its first descendant table."""
    if element.name == 'table':
        return element
    return element.find('table')


# ============================================================================
# DIAGNOSTIC UTILITIES
# ============================================================================

def dump_html_context(element: Tag, context_siblings: int = 5) -> str:
    """
    Dump the structure around an element for debugging a changed page layout.

    Args:
        element: BeautifulSoup element
        context_siblings: Number of following siblings to show

    Returns:
        Formatted string showing the parent chain and following siblings
    """
    lines = ["", "=" * 80, "HTML CONTEXT DUMP", "=" * 80]

    lines.append("\nParent chain:")
    current = element
    depth = 0
    while current is not None and current.name != '[document]' and depth < 5:
        tag_info = f"<{current.name}>"
        if current.get('id'):
            tag_info += f" id='{current.get('id')}'"
        if current.get('data-test'):
            tag_info += f" data-test='{current.get('data-test')}'"
        lines.append(f"  {'  ' * depth}{tag_info}")
        current = current.parent
        depth += 1

    lines.append(f"\nFollowing siblings (up to {context_siblings}):")
    for idx, sibling in enumerate(following_siblings(element)):
        if idx >= context_siblings:
            break
        preview = sibling.get_text(strip=True)[:50]
        lines.append(f"  [{idx}] <{sibling.name}> {preview}...")

    lines.append("=" * 80)
    return "\n".join(lines)


# ============================================================================
# SECTION LOCATORS
# ============================================================================

def locate_quote_summary(html: Document) -> Tag:
    """
    Find the quote summary container of a quote page.

    Args:
        html: Page HTML or parsed document

    Returns:
        The div#quote-summary element

    Raises:
        MissingSectionError: If the container is absent
    """
    soup = parse_html(html)
    summary = find_by_attribute(soup, 'id', Selectors.QUOTE_SUMMARY_ID, 'div')
    if summary is None:
        logger.error("Quote summary container not found")
        raise MissingSectionError("quote summary")
    return summary


def locate_statistics(html: Document) -> Tag:
    """
    Find the statistics container of a key statistics page.

    Args:
        html: Page HTML or parsed document

    Returns:
        The section[data-test="qsp-statistics"] element

    Raises:
        MissingSectionError: If the container is absent
    """
    soup = parse_html(html)
    statistics = find_by_attribute(soup, 'data-test', Selectors.STATISTICS_SECTION, 'section')
    if statistics is None:
        logger.error("Statistics section not found")
        raise MissingSectionError("statistics section")
    return statistics


def find_heading(root: Tag, text: str) -> Optional[Tag]:
    """First heading under `root` whose trimmed text contains `text` (case-sensitive)."""
    for heading in root.find_all(Selectors.HEADING_TAGS):
        if text in cell_text(heading):
            return heading
    return None
