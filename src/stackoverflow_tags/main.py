"""
Main Entry Point

Command line interface for the tags pipeline.
"""

import argparse
import logging
import sys
from typing import List, Optional

from stackoverflow_tags.coreutils.config import PipelineConfig
from stackoverflow_tags.coreutils.env import env_get
from stackoverflow_tags.coreutils.logging import setup_logging
from stackoverflow_tags.orchestration.pipeline import run_tags_pipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INCOMPLETE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download Stack Overflow tags to a CSV file"
    )
    parser.add_argument("--output", help="CSV destination (overrides TAGS_OUTPUT_PATH)")
    parser.add_argument(
        "--delay", type=float, help="Seconds between page requests (overrides REQUEST_DELAY)"
    )
    parser.add_argument(
        "--max-attempts", type=int, help="Attempts per page (overrides MAX_ATTEMPTS)"
    )
    parser.add_argument(
        "--page-size", type=int, help="Tags per page, 1-100 (overrides TAGS_PAGE_SIZE)"
    )
    parser.add_argument(
        "--deadline",
        type=float,
        help="Stop paginating after this many seconds and keep what was fetched",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    level = "DEBUG" if args.verbose else env_get("LOG_LEVEL", "INFO")
    log_dir = env_get("LOG_DIR", "logs")
    try:
        setup_logging(level, log_dir=log_dir)
    except OSError as e:
        setup_logging(level, log_dir=None)
        logger.error(f"❌ Cannot open log directory {log_dir!r}: {e}")
        return EXIT_FAILURE

    logger.info("🚀 START")

    try:
        config = PipelineConfig.from_env().with_overrides(
            output_path=args.output,
            request_delay=args.delay,
            max_attempts=args.max_attempts,
            page_size=args.page_size,
        )
    except ValueError as e:
        logger.error(f"❌ Invalid configuration: {e}")
        return EXIT_FAILURE

    try:
        summary = run_tags_pipeline(config, timeout=args.deadline)
    except KeyboardInterrupt:
        logger.info("🛑 Interrupted by user, nothing written")
        return EXIT_INTERRUPTED
    except OSError as e:
        logger.error(f"❌ Failed to write output: {e}")
        return EXIT_FAILURE

    logger.info(f"Pipeline completed: {summary}")
    logger.info("🏁 END")
    return EXIT_OK if summary["complete"] else EXIT_INCOMPLETE


if __name__ == "__main__":
    sys.exit(main())
