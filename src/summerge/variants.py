"""Chromosome decoding, variant keys and per-row value parsing."""

from __future__ import annotations

import re
import struct
from collections.abc import Sequence

from summerge.config import FileColumns
from summerge.errors import MalformedValue
from summerge.models import AssociationStatistic, Variant

CHROMOSOME_ALIASES: dict[str, int] = {
    "X": 23,
    "Y": 24,
    "MT": 25,
    "M": 25,
    "MITO": 25,
    "MITOCHONDRIAL": 25,
}

_UINT32_MAX = 2**32 - 1
_UINT64_MAX = 2**64 - 1
_DIGITS_RE = re.compile(r"^[0-9]+$")
_FLOAT_RE = re.compile(
    r"^[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)$",
    re.IGNORECASE,
)
_FLOAT32 = struct.Struct("<f")


def to_float32(value: float) -> float:
    """Round a Python float to the nearest IEEE single-precision value.

    Raises ``OverflowError`` when the value is finite but out of float32 range.
    """

    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


def _parse_unsigned(text: str, limit: int) -> int | None:
    if not _DIGITS_RE.match(text):
        return None
    value = int(text)
    return value if value <= limit else None


def decode_chromosome(token: str) -> int:
    """Normalize a chromosome token to its numeric id (X=23, Y=24, MT=25)."""

    cleaned = token.strip()
    alias = CHROMOSOME_ALIASES.get(cleaned.upper())
    if alias is not None:
        return alias

    value = _parse_unsigned(cleaned, _UINT32_MAX)
    if value is None:
        raise MalformedValue("chromosome", token)
    return value


def parse_position(text: str, row: int | None = None) -> int:
    value = _parse_unsigned(text, _UINT64_MAX)
    if value is None:
        raise MalformedValue("position", text, row)
    return value


def parse_float32(text: str, field: str, row: int | None = None) -> float:
    """Parse a decimal or scientific literal as a float32 value."""

    if not _FLOAT_RE.match(text):
        raise MalformedValue(field, text, row)
    try:
        return to_float32(float(text))
    except OverflowError as exc:
        raise MalformedValue(field, text, row, reason="out of float32 range") from exc


def build_key(variant: Variant, delimiter: str) -> str:
    """Canonical ``chrom<d>position<d>ref<d>alt`` identity for a variant."""

    return delimiter.join(
        (str(variant.chromosome), str(variant.position), variant.ref, variant.alt)
    )


def parse_variant(
    fields: Sequence[str],
    columns: FileColumns[int],
    row: int | None = None,
) -> Variant:
    try:
        chromosome = decode_chromosome(fields[columns.chromosome])
    except MalformedValue as exc:
        raise MalformedValue("chromosome", exc.value, row) from exc

    return Variant(
        chromosome=chromosome,
        position=parse_position(fields[columns.position], row),
        ref=fields[columns.reference],
        alt=fields[columns.alternate],
    )


def parse_pvalue(fields: Sequence[str], columns: FileColumns[int], row: int | None = None) -> float:
    return parse_float32(fields[columns.pvalue], "pvalue", row)


def parse_statistic(
    fields: Sequence[str],
    columns: FileColumns[int],
    row: int | None = None,
) -> AssociationStatistic:
    return AssociationStatistic(
        pvalue=parse_pvalue(fields, columns, row),
        beta=parse_float32(fields[columns.beta], "beta", row),
        sebeta=parse_float32(fields[columns.sebeta], "sebeta", row),
        af=parse_float32(fields[columns.allele_frequency], "allele frequency", row),
    )
