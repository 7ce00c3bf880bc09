"""Merged table storage backends for summerge."""

from .base import MergedTableStorage
from .duckdb_parquet import DuckDBParquetStorage

__all__ = ["MergedTableStorage", "DuckDBParquetStorage"]
