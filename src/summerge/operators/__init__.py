"""Filter, partition and merge operators over summary statistics buffers."""

from .filter import filter_variants
from .merge import CPRA_COLUMNS, header_line, merged_header, merged_rows, split_key
from .partition import (
    VariantPartitions,
    buffer_summary_pass,
    build_partition_blocks,
    index_partitions,
)
from .rows import iter_rows

__all__ = [
    "CPRA_COLUMNS",
    "VariantPartitions",
    "buffer_summary_pass",
    "build_partition_blocks",
    "filter_variants",
    "header_line",
    "index_partitions",
    "iter_rows",
    "merged_header",
    "merged_rows",
    "split_key",
]
