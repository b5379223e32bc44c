"""
Tag Paginator - Pagination Driver

Walks the /tags endpoint from page 1 until the API reports no more pages,
pausing between successful requests and retrying a failing page a bounded
number of times. When the retry budget runs out the tags collected so far
are returned with an ABORTED outcome instead of raising.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Protocol

from stackoverflow_tags.coreutils.config import PaginationConfig
from .errors import FetchError, StatusError, is_retryable
from .models import Tag, TagPage

logger = logging.getLogger(__name__)

ABORT_RETRIES_EXHAUSTED = "retries_exhausted"
ABORT_NON_RETRYABLE = "non_retryable"
ABORT_DEADLINE = "deadline"


class PageFetcher(Protocol):
    def __call__(self, page: int, timeout: Optional[float] = None) -> TagPage: ...


class Outcome(str, Enum):
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class PaginationResult:
    """Tags collected by one run plus how the run ended"""

    tags: List[Tag] = field(default_factory=list)
    outcome: Outcome = Outcome.ABORTED
    pages_fetched: int = 0
    requests_issued: int = 0
    last_error: Optional[FetchError] = None
    abort_reason: Optional[str] = None
    quota_remaining: Optional[int] = None

    @property
    def complete(self) -> bool:
        """False when the listing may be missing pages"""
        return self.outcome is Outcome.DONE


class TagPaginator:
    """Sequential page walker with fixed pacing and bounded retries"""

    def __init__(
        self,
        fetch: PageFetcher,
        config: Optional[PaginationConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.fetch = fetch
        self.config = config or PaginationConfig()
        self.sleep = sleep
        self.clock = clock

    def run(self, deadline: Optional[float] = None) -> PaginationResult:
        """
        Fetch every page, starting at 1

        Args:
            deadline: Optional absolute time on this paginator's clock after
                which no request or wait is started

        Returns:
            PaginationResult: DONE with all tags, or ABORTED with the tags of
            the pages fetched before the failure
        """
        result = PaginationResult()
        page = 1

        while True:
            tag_page = self._fetch_with_retries(page, deadline, result)
            if tag_page is None:
                return result

            result.tags.extend(tag_page.items)
            result.pages_fetched += 1
            result.quota_remaining = tag_page.quota_remaining
            logger.info(
                f"Page {page}: {len(tag_page.items)} tags "
                f"(total {len(result.tags)}, quota remaining {tag_page.quota_remaining})"
            )

            if not tag_page.has_more:
                result.outcome = Outcome.DONE
                return result

            page += 1
            if not self._wait(self.config.request_delay, deadline):
                return self._abort(result, ABORT_DEADLINE, page)

    def _fetch_with_retries(
        self, page: int, deadline: Optional[float], result: PaginationResult
    ) -> Optional[TagPage]:
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            remaining = self._remaining(deadline)
            if remaining is not None and remaining <= 0:
                self._abort(result, ABORT_DEADLINE, page)
                return None

            result.requests_issued += 1
            logger.info(f"Requesting page {page} (attempt {attempt}/{max_attempts})")
            try:
                return self.fetch(page, timeout=remaining)
            except FetchError as e:
                result.last_error = e
                status = f" status:{e.status_code}" if isinstance(e, StatusError) else ""
                logger.warning(
                    f"Attempt {attempt}/{max_attempts} for page {page} failed "
                    f"[{e.kind}{status}]: {e}"
                )

                if not is_retryable(e, self.config.retry_decode_errors):
                    self._abort(result, ABORT_NON_RETRYABLE, page)
                    return None
                if attempt == max_attempts:
                    break
                if not self._wait(self.config.backoff(attempt), deadline):
                    self._abort(result, ABORT_DEADLINE, page)
                    return None

        self._abort(result, ABORT_RETRIES_EXHAUSTED, page)
        return None

    def _remaining(self, deadline: Optional[float]) -> Optional[float]:
        if deadline is None:
            return None
        return deadline - self.clock()

    def _wait(self, seconds: float, deadline: Optional[float]) -> bool:
        """Sleep up to `seconds`; False when the deadline cut the wait short"""
        remaining = self._remaining(deadline)
        if remaining is None:
            if seconds > 0:
                self.sleep(seconds)
            return True

        if remaining <= 0:
            return False
        if seconds > 0:
            self.sleep(min(seconds, remaining))
        return self.clock() < deadline

    def _abort(
        self, result: PaginationResult, reason: str, page: int
    ) -> PaginationResult:
        result.outcome = Outcome.ABORTED
        result.abort_reason = reason
        logger.error(
            f"Stopping at page {page} ({reason}); "
            f"keeping {len(result.tags)} tags from {result.pages_fetched} pages"
        )
        return result
