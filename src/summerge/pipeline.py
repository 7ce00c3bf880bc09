"""File-level pipeline: filter sources, partition variants, merge statistics."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from summerge.codec import encode_block
from summerge.config import ColumnIndexMetadata, FileConfiguration, PipelineConfiguration
from summerge.errors import ConfigurationError
from summerge.models import Block
from summerge.operators import (
    VariantPartitions,
    build_partition_blocks,
    filter_variants,
    merged_header,
    merged_rows,
)
from summerge.profiles import resolve_column_index
from summerge.reader import FileChunk, read_file_in_blocks
from summerge.storage.base import MergedTableStorage

logger = logging.getLogger(__name__)

# One serialized block per partition for a single source file.
SummaryPass = list[bytes]


@dataclass(frozen=True)
class SourceFile:
    """A summary statistics file and the configuration describing its columns."""

    path: Path
    configuration: FileConfiguration


@dataclass
class MergedTable:
    """Merged matrix: one header line plus delimiter-joined data lines."""

    header: str
    rows: list[str]
    delimiter: str

    def to_text(self) -> str:
        return "\n".join([self.header, *self.rows]) if self.header else "\n".join(self.rows)

    def to_frame(self) -> pd.DataFrame:
        """Materialize as a DataFrame with every column kept as text."""

        columns = self.header.split(self.delimiter) if self.header else []
        records = [row.split(self.delimiter) for row in self.rows]
        return pd.DataFrame(records, columns=columns, dtype=object)


@dataclass
class SummaryRunReport:
    """Execution summary for a pipeline run."""

    source_count: int
    variant_count: int
    partition_count: int
    row_count: int
    table: MergedTable = field(repr=False)


def _read_metadata(
    source: SourceFile,
    pipeline_config: PipelineConfiguration,
) -> tuple[ColumnIndexMetadata | None, Iterator[FileChunk]]:
    chunks = read_file_in_blocks(source.path, pipeline_config.buffer_size)
    first = next(chunks, None)
    if first is None:
        return None, chunks
    return resolve_column_index(first.chunk, source.configuration), chunks


def collect_variants(source: SourceFile, pipeline_config: PipelineConfiguration) -> list[str]:
    """Keys of every row in ``source`` below its configured p-value threshold."""

    metadata, chunks = _read_metadata(source, pipeline_config)
    if metadata is None:
        return []

    variants: list[str] = []
    for chunk in chunks:
        variants.extend(filter_variants(chunk.chunk, metadata))

    logger.info("Collected %d variants from %s", len(variants), source.path.name)
    return variants


def collect_rows(
    source: SourceFile,
    partitions: VariantPartitions,
    pipeline_config: PipelineConfiguration,
) -> SummaryPass:
    """Serialized blocks, one per partition, covering the whole file.

    Blocks from successive chunks are combined per partition; a key seen in a
    later chunk replaces the earlier values.
    """

    metadata, chunks = _read_metadata(source, pipeline_config)
    if metadata is None:
        return []

    per_chunk: list[list[Block]] = [
        build_partition_blocks(chunk.chunk, metadata, partitions) for chunk in chunks
    ]
    if not per_chunk:
        per_chunk = [build_partition_blocks(b"", metadata, partitions)]

    combined = [
        Block.combine(chunk_blocks[ordinal] for chunk_blocks in per_chunk)
        for ordinal in range(len(partitions))
    ]
    logger.info(
        "Collected %d rows across %d partitions from %s",
        sum(len(block.rows) for block in combined),
        len(combined),
        source.path.name,
    )
    return [encode_block(block) for block in combined]


def compute_partitions(
    local_variants: Sequence[str],
    fixed_partitions: VariantPartitions,
    block_size: int,
) -> list[list[str]]:
    """Keep ``fixed_partitions`` first, then chunk the remaining local variants.

    Local variants already claimed by a fixed partition are dropped.
    """

    if block_size <= 0:
        raise ValueError("block_size must be positive")

    claimed = {key for partition in fixed_partitions for key in partition}
    remaining = [key for key in local_variants if key not in claimed]
    local_partitions = [
        remaining[start : start + block_size] for start in range(0, len(remaining), block_size)
    ]
    return [list(partition) for partition in fixed_partitions] + local_partitions


def summary_statistics(
    passes: Sequence[SummaryPass],
    delimiter: str,
    include_cpra: bool = False,
) -> MergedTable:
    """Merge each partition ordinal across all passes into one table."""

    non_empty = [summary_pass for summary_pass in passes if summary_pass]
    if not non_empty:
        return MergedTable(header="", rows=[], delimiter=delimiter)

    partition_count = max(len(summary_pass) for summary_pass in non_empty)
    rows: list[str] = []
    for ordinal in range(partition_count):
        blobs = [summary_pass[ordinal] for summary_pass in non_empty if ordinal < len(summary_pass)]
        rows.extend(merged_rows(blobs, delimiter, include_cpra))

    header = merged_header([summary_pass[0] for summary_pass in non_empty], delimiter, include_cpra)
    return MergedTable(header=header, rows=rows, delimiter=delimiter)


class SummaryPipeline:
    """Filter every source, partition the union of hits, and merge statistics."""

    def __init__(
        self,
        *,
        sources: list[SourceFile],
        pipeline_config: PipelineConfiguration | None = None,
        include_cpra: bool = False,
        storage: MergedTableStorage | None = None,
    ) -> None:
        if not sources:
            raise ValueError("At least one source file is required")
        delimiters = {source.configuration.delimiter for source in sources}
        if len(delimiters) > 1:
            raise ConfigurationError(
                f"Sources must share one delimiter to share variant keys, got {sorted(delimiters)}"
            )
        self.sources = sources
        self.pipeline_config = pipeline_config or PipelineConfiguration()
        self.include_cpra = include_cpra
        self.storage = storage

    def run(self) -> SummaryRunReport:
        # dict keeps first-seen order while deduplicating
        variants: dict[str, None] = {}
        for source in self.sources:
            variants.update(dict.fromkeys(collect_variants(source, self.pipeline_config)))

        partitions = compute_partitions(list(variants), [], self.pipeline_config.block_size)
        passes = [collect_rows(source, partitions, self.pipeline_config) for source in self.sources]

        delimiter = self.sources[0].configuration.delimiter
        table = summary_statistics(passes, delimiter, self.include_cpra)

        if self.storage is not None:
            self.storage.persist(table)

        logger.info(
            "Merged %d sources: %d variants in %d partitions, %d rows",
            len(self.sources),
            len(variants),
            len(partitions),
            len(table.rows),
        )
        return SummaryRunReport(
            source_count=len(self.sources),
            variant_count=len(variants),
            partition_count=len(partitions),
            row_count=len(table.rows),
            table=table,
        )
