"""
Tags Pipeline

Fetch every tag page, then write whatever was collected to CSV exactly
once. An incomplete listing is still written; a failure to write is not
recovered.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from stackoverflow_tags.coreutils.config import PipelineConfig
from stackoverflow_tags.coreutils.logging import log_function_call
from stackoverflow_tags.extract.paginator import PaginationResult, TagPaginator
from stackoverflow_tags.extract.stackexchange_api import StackExchangeAPIClient
from stackoverflow_tags.load.local_storage import save_csv, tags_to_polars

logger = logging.getLogger(__name__)


def run_tags_pipeline(
    config: Optional[PipelineConfig] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Dict[str, Any]:
    """
    Run the full fetch-and-save pipeline

    Args:
        config: Pipeline configuration (defaults to PipelineConfig.from_env())
        timeout: Overall time budget in seconds for the pagination
        session: Optional HTTP session to use instead of a new one
        sleep: Wait function used for pacing and backoff
        clock: Monotonic clock used for the time budget

    Returns:
        dict: Summary of the run

    Raises:
        OSError: When the CSV cannot be written
    """
    config = config or PipelineConfig.from_env()
    log_function_call(
        "run_tags_pipeline",
        fetch=config.fetch,
        pagination=config.pagination,
        output_path=config.output_path,
        timeout=timeout,
    )

    deadline = clock() + timeout if timeout is not None else None

    with StackExchangeAPIClient(config.fetch, session=session) as client:
        paginator = TagPaginator(
            client.fetch_page, config.pagination, sleep=sleep, clock=clock
        )
        result = paginator.run(deadline=deadline)

    if result.complete:
        logger.info(
            f"✅ Fetched {len(result.tags)} tags from {result.pages_fetched} pages"
        )
    else:
        logger.warning(
            f"⚠️ Listing may be incomplete ({result.abort_reason}): "
            f"{len(result.tags)} tags from {result.pages_fetched} pages"
        )

    df = tags_to_polars(result.tags)
    output_path = save_csv(df, config.output_path)

    return summarize(result, output_path)


def summarize(result: PaginationResult, output_path: str) -> Dict[str, Any]:
    summary = {
        "outcome": result.outcome.value,
        "complete": result.complete,
        "tags": len(result.tags),
        "pages": result.pages_fetched,
        "requests": result.requests_issued,
        "quota_remaining": result.quota_remaining,
        "output_path": output_path,
    }
    if not result.complete:
        summary["abort_reason"] = result.abort_reason
        summary["last_error"] = str(result.last_error) if result.last_error else None
    return summary
