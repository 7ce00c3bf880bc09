"""Core summerge primitives.

This package filters GWAS summary statistics by significance, extracts the
statistics of selected variants into compact per-partition blocks, and merges
blocks from several studies into one NA-padded table.
"""

from .codec import decode_block, encode_block, marshal_blocks, unmarshal_blocks
from .config import (
    ColumnIndexMetadata,
    FileColumns,
    FileConfiguration,
    PipelineConfiguration,
)
from .errors import (
    ConfigurationError,
    DecodeError,
    InsufficientColumns,
    MalformedValue,
    PartitionCollisionError,
    SummergeError,
)
from .models import MISSING_VALUE, AssociationStatistic, Block, Variant, create_header
from .operators import (
    buffer_summary_pass,
    build_partition_blocks,
    filter_variants,
    header_line,
    merged_header,
    merged_rows,
)
from .pipeline import (
    MergedTable,
    SourceFile,
    SummaryPipeline,
    SummaryRunReport,
    collect_rows,
    collect_variants,
    compute_partitions,
    summary_statistics,
)
from .profiles import ConfigurationValidator, FileConfigurationLoader, resolve_column_index
from .variants import build_key, decode_chromosome

__all__ = [
    "AssociationStatistic",
    "Block",
    "ColumnIndexMetadata",
    "ConfigurationError",
    "ConfigurationValidator",
    "DecodeError",
    "FileColumns",
    "FileConfiguration",
    "FileConfigurationLoader",
    "InsufficientColumns",
    "MISSING_VALUE",
    "MalformedValue",
    "MergedTable",
    "PartitionCollisionError",
    "PipelineConfiguration",
    "SourceFile",
    "SummaryPipeline",
    "SummaryRunReport",
    "SummergeError",
    "Variant",
    "buffer_summary_pass",
    "build_key",
    "build_partition_blocks",
    "collect_rows",
    "collect_variants",
    "compute_partitions",
    "create_header",
    "decode_block",
    "decode_chromosome",
    "encode_block",
    "filter_variants",
    "header_line",
    "marshal_blocks",
    "merged_header",
    "merged_rows",
    "resolve_column_index",
    "summary_statistics",
    "unmarshal_blocks",
]
