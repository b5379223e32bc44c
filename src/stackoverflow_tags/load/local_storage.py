"""
Local Storage - Load Layer

Pure functions for local file storage operations.
"""

import polars as pl
import os
from typing import Iterable
import logging

from stackoverflow_tags.extract.models import Tag
from stackoverflow_tags.extract.schemas import TAGS_SCHEMA

logger = logging.getLogger(__name__)

# Owner read/write only
CSV_FILE_MODE = 0o600


def tags_to_polars(tags: Iterable[Tag]) -> pl.DataFrame:
    """
    Convert tags to a DataFrame with TAGS_SCHEMA, keeping their order

    Args:
        tags: Tags in fetch order

    Returns:
        pl.DataFrame: One row per tag
    """
    records = [tag.to_dict() for tag in tags]
    # Use explicit schema so an empty listing still has typed columns
    return pl.DataFrame(records, schema=TAGS_SCHEMA)


def save_csv(df: pl.DataFrame, filepath: str) -> str:
    """
    Save DataFrame to CSV file, replacing any previous contents

    Args:
        df: DataFrame to save
        filepath: Path to save file

    Returns:
        str: Path to saved file

    Raises:
        OSError: When the destination cannot be written
    """
    logger.info(f"Saving DataFrame to CSV: {filepath}")

    # Ensure directory exists
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    fd = os.open(filepath, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CSV_FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        os.chmod(filepath, CSV_FILE_MODE)
        df.write_csv(f)

    logger.info(f"Saved {df.height} records to {filepath}")
    return filepath


def load_csv(filepath: str) -> pl.DataFrame:
    """
    Load a tag CSV written by save_csv

    Args:
        filepath: Path to CSV file

    Returns:
        pl.DataFrame: Loaded DataFrame
    """
    logger.info(f"Loading DataFrame from CSV: {filepath}")

    if not os.path.exists(filepath):
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    df = pl.read_csv(filepath, schema=TAGS_SCHEMA)

    logger.info(f"Loaded {df.height} records from {filepath}")
    return df
