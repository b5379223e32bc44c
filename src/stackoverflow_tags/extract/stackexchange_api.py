"""
Stack Exchange API Client - Pure I/O Operations

Issues one GET per call against the /tags endpoint and decodes the
response envelope. No sleeping, no retries, no state shared between calls:
every failure is raised as a FetchError variant for the caller to handle.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

from stackoverflow_tags.coreutils.config import FetchConfig
from stackoverflow_tags.coreutils.request import new_session
from .errors import DecodeError, StatusError, TransportError
from .models import TagPage

logger = logging.getLogger(__name__)

BODY_EXCERPT_LENGTH = 200


class StackExchangeAPIClient:
    """Page fetcher for the Stack Exchange /tags endpoint"""

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or FetchConfig()
        self._owns_session = session is None
        self.session = session if session is not None else new_session()

    def __enter__(self) -> "StackExchangeAPIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def build_params(self, page: int) -> Dict[str, Any]:
        """Query parameters for one page; empty credentials are still sent"""
        return {
            "page": page,
            "pagesize": self.config.page_size,
            "order": self.config.order,
            "sort": self.config.sort,
            "site": self.config.site,
            "key": self.config.key,
            "access_token": self.config.access_token,
        }

    def _effective_timeout(self, timeout: Optional[float]) -> float:
        if timeout is None:
            return self.config.timeout
        return min(timeout, self.config.timeout)

    def fetch_page(self, page: int, timeout: Optional[float] = None) -> TagPage:
        """
        Fetch and decode one page of tags

        Args:
            page: 1-based page number
            timeout: Upper bound on the request timeout in seconds; the
                configured timeout applies when it is shorter or None.
                requests applies it to the connect and to each socket read,
                not to the whole exchange, so a server trickling the body
                can keep one call running past it.

        Returns:
            TagPage: Decoded envelope

        Raises:
            TransportError: Connection failure or timeout
            StatusError: Any status other than 200
            DecodeError: Body is not the expected JSON envelope
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        url = self.config.tags_url
        params = self.build_params(page)
        logger.debug(f"Fetching page {page} from {url}")
        start_time = time.time()

        try:
            response = self.session.get(
                url,
                params=params,
                timeout=self._effective_timeout(timeout),
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"HTTP request failed for page {page}: {e}", page=page
            ) from e

        if response.status_code != 200:
            logger.warning(f"Unexpected status {response.status_code} for page {page}")
            raise StatusError(
                response.status_code,
                page=page,
                body=response.text[:BODY_EXCERPT_LENGTH],
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON response for page {page}: {e}", page=page) from e

        try:
            tag_page = TagPage.of(payload)
        except DecodeError as e:
            e.page = page
            raise

        elapsed = time.time() - start_time
        logger.debug(
            f"Fetched page {page} ({len(tag_page.items)} tags, "
            f"quota {tag_page.quota_remaining}/{tag_page.quota_max}): {elapsed:.2f} seconds"
        )
        return tag_page
