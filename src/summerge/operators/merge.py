"""Outer-join merge of blocks on variant key."""

from __future__ import annotations

from collections.abc import Sequence

from summerge.codec import unmarshal_blocks
from summerge.errors import MalformedValue

CPRA_COLUMNS: tuple[str, ...] = ("chromosome", "position", "ref", "alt")


def header_line(blobs: Sequence[bytes], delimiter: str) -> str:
    """Concatenate block headers in block order."""

    blocks = unmarshal_blocks(blobs)
    return delimiter.join(name for block in blocks for name in block.header)


def merged_header(blobs: Sequence[bytes], delimiter: str, include_cpra: bool = False) -> str:
    """Header matching :func:`merged_rows`, CPRA column names included on request."""

    line = header_line(blobs, delimiter)
    if not include_cpra:
        return line
    prefix = delimiter.join(CPRA_COLUMNS)
    return f"{prefix}{delimiter}{line}" if line else prefix


def split_key(key: str, key_delimiter: str) -> list[str]:
    """Split a variant key into chromosome, position, ref and alt."""

    parts = key.split(key_delimiter, 3)
    if len(parts) != 4:
        raise MalformedValue("variant key", key)
    return parts


def merged_rows(
    blobs: Sequence[bytes],
    delimiter: str,
    include_cpra: bool = False,
    key_delimiter: str | None = None,
) -> list[str]:
    """One line per variant found in any block, NA-filled where a block lacks it.

    Every line has the summed width of all block headers, plus four leading
    CPRA fields when ``include_cpra`` is set. Line order follows first
    appearance across blocks and is not otherwise guaranteed.
    """

    blocks = unmarshal_blocks(blobs)
    if not blocks:
        return []

    # dict keeps first-seen order while deduplicating
    keys: dict[str, None] = {}
    for block in blocks:
        keys.update(dict.fromkeys(block.rows))

    split_on = delimiter if key_delimiter is None else key_delimiter
    lines: list[str] = []
    for key in keys:
        fields: list[str] = split_key(key, split_on) if include_cpra else []
        for block in blocks:
            fields.extend(block.values_for(key))
        lines.append(delimiter.join(fields))
    return lines
