"""Binary encoding of blocks for exchange between pipeline stages.

Layout of one blob (all integers are little-endian ``uint32``)::

    b"SMB\\x01"
    header_count, then header_count x (length, utf-8 bytes)
    row_count, then row_count x (key, value_count, value_count x value)

where every string is written as its byte length followed by its bytes.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable, Sequence

from summerge.errors import DecodeError
from summerge.models import Block

MAGIC = b"SMB\x01"

_UINT32 = struct.Struct("<I")


class _Truncated(Exception):
    pass


def _write_string(parts: list[bytes], value: str) -> None:
    encoded = value.encode("utf-8")
    parts.append(_UINT32.pack(len(encoded)))
    parts.append(encoded)


def encode_block(block: Block) -> bytes:
    parts: list[bytes] = [MAGIC, _UINT32.pack(len(block.header))]
    for name in block.header:
        _write_string(parts, name)

    parts.append(_UINT32.pack(len(block.rows)))
    for key, values in block.rows.items():
        _write_string(parts, key)
        parts.append(_UINT32.pack(len(values)))
        for value in values:
            _write_string(parts, value)
    return b"".join(parts)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = memoryview(data)
        self.offset = 0

    def take(self, size: int) -> memoryview:
        end = self.offset + size
        if end > len(self.data):
            raise _Truncated(f"need {size} bytes at offset {self.offset}, {len(self.data) - self.offset} left")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def uint32(self) -> int:
        return _UINT32.unpack(self.take(_UINT32.size))[0]

    def string(self) -> str:
        return bytes(self.take(self.uint32())).decode("utf-8")

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset


def decode_block(data: bytes, index: int = 0) -> Block:
    """Decode one blob; ``index`` identifies it in any ``DecodeError``."""

    reader = _Reader(data)
    try:
        if bytes(reader.take(len(MAGIC))) != MAGIC:
            raise DecodeError(index, "bad magic")

        header = [reader.string() for _ in range(reader.uint32())]

        rows: dict[str, tuple[str, ...]] = {}
        for _ in range(reader.uint32()):
            key = reader.string()
            values = tuple(reader.string() for _ in range(reader.uint32()))
            if len(values) != len(header):
                raise DecodeError(
                    index,
                    f"row {key!r} has {len(values)} values, header has {len(header)}",
                )
            rows[key] = values
    except _Truncated as exc:
        raise DecodeError(index, f"truncated: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DecodeError(index, f"invalid utf-8: {exc}") from exc

    if reader.remaining:
        raise DecodeError(index, f"{reader.remaining} trailing bytes")
    return Block(header=header, rows=rows)


def marshal_blocks(blocks: Iterable[Block]) -> list[bytes]:
    return [encode_block(block) for block in blocks]


def unmarshal_blocks(blobs: Sequence[bytes]) -> list[Block]:
    """Decode every blob; the first corrupt blob aborts the call."""

    return [decode_block(bytes(blob), index) for index, blob in enumerate(blobs)]
