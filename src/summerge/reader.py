"""Chunked, newline-aligned reading of (optionally gzipped) source files."""

from __future__ import annotations

import gzip
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from summerge.config import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


@dataclass(frozen=True)
class FileChunk:
    """A slice of the decompressed stream starting at byte ``offset``."""

    offset: int
    chunk: bytes


def is_compressed(path: str | Path) -> bool:
    with Path(path).open("rb") as stream:
        return stream.read(2) == GZIP_MAGIC


def _open(path: Path) -> BinaryIO:
    if is_compressed(path):
        return gzip.open(path, "rb")  # type: ignore[return-value]
    return path.open("rb")


def read_file_in_blocks(
    path: str | Path,
    block_size: int = DEFAULT_BUFFER_SIZE,
) -> Iterator[FileChunk]:
    """Yield the header line, then chunks of roughly ``block_size`` bytes.

    Every chunk after the header ends on a newline, except a final leftover
    when the file does not end with one. A chunk never splits a line, so each
    can be handed to the row operators on its own.
    """

    if block_size <= 0:
        raise ValueError("block_size must be positive")

    source = Path(path)
    offset = 0
    leftover = b""
    header_sent = False

    with _open(source) as stream:
        while True:
            data = stream.read(block_size)
            if not data:
                break
            combined = leftover + data

            if not header_sent:
                newline = combined.find(b"\n")
                if newline == -1:
                    leftover = combined
                    continue
                header_sent = True
                yield FileChunk(offset=0, chunk=combined[: newline + 1])
                offset = newline + 1
                combined = combined[newline + 1 :]

            last_newline = combined.rfind(b"\n")
            if last_newline == -1:
                logger.debug("No newline in block at offset %d, carrying %d bytes", offset, len(combined))
                leftover = combined
                continue

            emit = last_newline + 1
            yield FileChunk(offset=offset, chunk=combined[:emit])
            offset += emit
            leftover = combined[emit:]

    if leftover:
        yield FileChunk(offset=offset, chunk=leftover)
