"""
HTTP client for fetching Yahoo Finance quote pages.
"""

import logging
from typing import Dict, Optional

import requests

from .config import DEFAULT_TIMEOUT, HEADERS
from .exceptions import FetchError

logger = logging.getLogger(__name__)


class YahooClient:
    """Client for downloading quote page HTML."""

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Yahoo client.

        Args:
            headers: Request headers (overrides config.HEADERS)
            timeout: Per-request timeout in seconds
            session: Optional session for connection reuse
        """
        self.headers = dict(headers) if headers else dict(HEADERS)
        self.timeout = timeout
        self.session = session

    def fetch_html(self, url: str) -> str:
        """
        Download a page and return its body text.

        Args:
            url: Page URL

        Returns:
            Response body as text

        Raises:
            FetchError: On a transport failure or a non-2xx status
        """
        logger.info(f"Fetching url {url}")
        get = self.session.get if self.session is not None else requests.get

        try:
            response = get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            status_code = getattr(getattr(e, 'response', None), 'status_code', None)
            logger.error(f"Error fetching url {url}: {e}")
            raise FetchError(url, f"Error fetching url {url}: {e}", status_code) from e

        # raise_for_status lets 3xx through (e.g. 304, or 300 without Location)
        if not 200 <= response.status_code < 300:
            logger.error(f"Error fetching url {url}: status {response.status_code}")
            raise FetchError(url, f"Error fetching url {url}: status {response.status_code}",
                             response.status_code)

        logger.debug(f"Fetched {len(response.text)} characters from {url}")
        return response.text
