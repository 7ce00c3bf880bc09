"""Significance filtering of summary statistics rows."""

from __future__ import annotations

import logging

from summerge.config import ColumnIndexMetadata
from summerge.operators.rows import iter_rows
from summerge.variants import build_key, parse_pvalue, parse_variant, to_float32

logger = logging.getLogger(__name__)


def filter_variants(
    buffer: str | bytes,
    metadata: ColumnIndexMetadata,
    threshold: float | None = None,
) -> list[str]:
    """Return keys of rows whose p-value is strictly below ``threshold``.

    ``threshold`` defaults to ``metadata.pvalue_threshold``. Keys are emitted
    in row order and duplicates are kept. Any unparsable chromosome,
    position or p-value aborts the whole call.
    """

    limit = to_float32(metadata.pvalue_threshold if threshold is None else threshold)
    columns = metadata.columns
    keys: list[str] = []
    scanned = 0

    for row_number, fields in iter_rows(
        buffer,
        metadata.delimiter,
        metadata.required_length(variant_only=True),
    ):
        scanned += 1
        variant = parse_variant(fields, columns, row_number)
        pvalue = parse_pvalue(fields, columns, row_number)
        if pvalue < limit:
            keys.append(build_key(variant, metadata.delimiter))

    logger.debug("Filtered %s: %d of %d rows below p=%g", metadata.tag, len(keys), scanned, limit)
    return keys
