"""DuckDB + Parquet storage backend for merged tables."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

from summerge.storage.base import MergedTableStorage

if TYPE_CHECKING:
    from summerge.pipeline import MergedTable

logger = logging.getLogger(__name__)

_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DuckDBParquetStorage(MergedTableStorage):
    """Persist a merged table in a queryable DB and a portable Parquet file.

    Values are stored as text exactly as they appear in the merged rows, so
    ``NA`` cells and the pre-formatted statistics survive unchanged.
    """

    def __init__(
        self,
        *,
        db_path: str | Path,
        parquet_path: str | Path,
        table_name: str = "merged_statistics",
    ) -> None:
        if not _TABLE_RE.match(table_name):
            raise ValueError(f"Unsafe table name: {table_name}")

        self.db_path = Path(db_path)
        self.parquet_path = Path(parquet_path)
        self.table_name = table_name

    def persist(self, table: MergedTable) -> None:
        if not table.header:
            logger.info("Nothing to persist: merged table has no columns")
            return

        frame = table.to_frame()

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.parquet_path.parent.mkdir(parents=True, exist_ok=True)

        connection = duckdb.connect(str(self.db_path))
        try:
            connection.register("merged_frame", frame)
            connection.execute(
                f"CREATE OR REPLACE TABLE {self.table_name} AS SELECT * FROM merged_frame"
            )

            if self.parquet_path.exists():
                self.parquet_path.unlink()

            parquet_target = self.parquet_path.as_posix().replace("'", "''")
            connection.execute(
                f"COPY {self.table_name} TO '{parquet_target}' (FORMAT PARQUET)"
            )
        finally:
            connection.close()

        logger.info(
            "Persisted %d rows to %s (table %s) and %s",
            len(frame),
            self.db_path,
            self.table_name,
            self.parquet_path,
        )
