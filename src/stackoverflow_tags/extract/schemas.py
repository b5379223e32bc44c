"""
Extract Layer Schemas

Column layout of the tag table, in the order the CSV is written.
"""

import polars as pl

TAGS_SCHEMA = pl.Schema(
    [
        ("has_synonyms", pl.Boolean()),
        ("is_moderator_only", pl.Boolean()),
        ("is_required", pl.Boolean()),
        ("count", pl.Int64()),
        ("name", pl.String()),
    ]
)
