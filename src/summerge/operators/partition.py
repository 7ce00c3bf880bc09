"""Route matching rows of one source into caller-declared partitions."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from summerge.codec import marshal_blocks
from summerge.config import ColumnIndexMetadata
from summerge.errors import PartitionCollisionError
from summerge.models import Block, create_header
from summerge.operators.rows import iter_rows
from summerge.variants import build_key, parse_statistic, parse_variant

logger = logging.getLogger(__name__)

VariantPartitions = Sequence[Sequence[str]]


def index_partitions(partitions: VariantPartitions, *, strict: bool = False) -> dict[str, int]:
    """Map each variant key to the ordinal of the partition that owns it.

    A key listed in several partitions belongs to the last one, unless
    ``strict`` is set, in which case the collision is an error.
    """

    index: dict[str, int] = {}
    collisions = 0
    for ordinal, partition in enumerate(partitions):
        for key in partition:
            previous = index.get(key)
            if previous is not None and previous != ordinal:
                if strict:
                    raise PartitionCollisionError(
                        f"variant {key!r} declared in partitions {previous} and {ordinal}"
                    )
                collisions += 1
            index[key] = ordinal

    if collisions:
        logger.warning(
            "%d variant keys declared in more than one partition; the last partition wins",
            collisions,
        )
    return index


def build_partition_blocks(
    buffer: str | bytes,
    metadata: ColumnIndexMetadata,
    partitions: VariantPartitions,
    *,
    strict: bool = False,
) -> list[Block]:
    """Extract formatted statistics for partitioned variants in one pass.

    One block is returned per partition, in partition order, each headed by
    the ``{tag}_pval/_beta/_sebeta/_af`` columns even when nothing matched.
    No p-value filtering happens here.
    """

    index = index_partitions(partitions, strict=strict)
    rows: list[dict[str, tuple[str, ...]]] = [{} for _ in partitions]
    columns = metadata.columns

    for row_number, fields in iter_rows(buffer, metadata.delimiter, metadata.required_length()):
        variant = parse_variant(fields, columns, row_number)
        statistic = parse_statistic(fields, columns, row_number)
        key = build_key(variant, metadata.delimiter)

        ordinal = index.get(key)
        if ordinal is not None:
            rows[ordinal][key] = statistic.formatted()

    header = create_header(metadata.tag)
    blocks = [Block(header=header, rows=partition_rows) for partition_rows in rows]
    logger.debug(
        "Built %d blocks for %s with %d matched variants",
        len(blocks),
        metadata.tag,
        sum(len(block.rows) for block in blocks),
    )
    return blocks


def buffer_summary_pass(
    buffer: str | bytes,
    metadata: ColumnIndexMetadata,
    partitions: VariantPartitions,
    *,
    strict: bool = False,
) -> list[bytes]:
    """Like :func:`build_partition_blocks`, returning serialized blocks."""

    return marshal_blocks(build_partition_blocks(buffer, metadata, partitions, strict=strict))
