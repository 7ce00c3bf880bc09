"""Streaming row iteration shared by the filter and partition operators."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterator

from summerge.errors import InsufficientColumns, MalformedValue

logger = logging.getLogger(__name__)


def _as_text(buffer: str | bytes) -> str:
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        return bytes(buffer).decode("utf-8")
    return buffer


def iter_rows(
    buffer: str | bytes,
    delimiter: str,
    required_length: int,
) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(row_number, fields)`` for each data row of a headerless buffer.

    The first row must carry ``required_length`` fields. Iteration stops
    quietly at the first row whose field count differs from the first row's,
    which is how a truncated trailing line at a chunk boundary shows up.
    """

    reader = csv.reader(io.StringIO(_as_text(buffer), newline=""), delimiter=delimiter, strict=True)
    expected: int | None = None
    while True:
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            raise MalformedValue("csv record", str(exc), reader.line_num) from exc

        if not fields:
            continue

        if expected is None:
            if len(fields) < required_length:
                raise InsufficientColumns(required_length, len(fields))
            expected = len(fields)
        elif len(fields) != expected:
            logger.debug(
                "Stopping at row %d: %d fields, expected %d",
                reader.line_num,
                len(fields),
                expected,
            )
            return

        yield reader.line_num, fields
