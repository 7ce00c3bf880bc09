"""Canonical in-memory data models used by summerge."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

MISSING_VALUE = "NA"

STATISTIC_SUFFIXES: tuple[str, ...] = ("pval", "beta", "sebeta", "af")


def _format_value(value: float, spec: str) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(value, spec)


@dataclass(frozen=True)
class Variant:
    """Genomic locus change identified by chromosome, position, ref and alt."""

    chromosome: int
    position: int
    ref: str
    alt: str


@dataclass(frozen=True)
class AssociationStatistic:
    """Per-variant statistics reported by one study, as float32 values."""

    pvalue: float
    beta: float
    sebeta: float
    af: float

    def formatted(self) -> tuple[str, str, str, str]:
        """Render values the way they are stored in a block.

        The p-value uses scientific notation and the remaining values use
        fixed point, both with six fractional digits. Non-finite values are
        written as ``NaN``, ``+Inf`` or ``-Inf``.
        """

        return (
            _format_value(self.pvalue, "e"),
            _format_value(self.beta, "f"),
            _format_value(self.sebeta, "f"),
            _format_value(self.af, "f"),
        )


def create_header(tag: str) -> list[str]:
    """Column names contributed by one study's block."""

    return [f"{tag}_{suffix}" for suffix in STATISTIC_SUFFIXES]


@dataclass(frozen=True)
class Block:
    """Header plus per-variant values extracted for one partition.

    ``rows`` maps a variant key to the values stored for it, aligned with
    ``header``.
    """

    header: tuple[str, ...]
    rows: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "header", tuple(self.header))
        object.__setattr__(
            self,
            "rows",
            MappingProxyType({key: tuple(values) for key, values in self.rows.items()}),
        )

    @property
    def width(self) -> int:
        return len(self.header)

    def values_for(self, key: str) -> tuple[str, ...]:
        """Stored values for ``key``, or ``NA`` for every header column."""

        values = self.rows.get(key)
        if values is None:
            return (MISSING_VALUE,) * self.width
        return values

    @classmethod
    def combine(cls, blocks: Iterable["Block"]) -> "Block":
        """Merge same-header blocks; later blocks win on duplicate keys."""

        header: tuple[str, ...] | None = None
        rows: dict[str, tuple[str, ...]] = {}
        for block in blocks:
            if header is None:
                header = block.header
            elif block.header != header:
                raise ValueError(f"Cannot combine blocks with headers {header} and {block.header}")
            rows.update(block.rows)
        return cls(header=header or (), rows=rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Block):
            return NotImplemented
        return self.header == other.header and dict(self.rows) == dict(other.rows)

    def __hash__(self) -> int:
        return hash((self.header, frozenset(self.rows.items())))
