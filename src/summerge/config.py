"""Configuration contracts for summerge pipelines."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_BUFFER_SIZE = 8 * 1024 * 1024
DEFAULT_BLOCK_SIZE = 1000

DELIMITER_ALIASES: dict[str, str] = {
    "tab": "\t",
    "comma": ",",
}


@dataclass(frozen=True)
class FileColumns(Generic[T]):
    """The eight columns every summary statistics file must provide.

    ``T`` is ``str`` for column names in a file configuration and ``int`` for
    positional indices once a header has been resolved.
    """

    chromosome: T
    position: T
    reference: T
    alternate: T
    pvalue: T
    beta: T
    sebeta: T
    allele_frequency: T

    def values(self) -> tuple[T, ...]:
        return tuple(getattr(self, item.name) for item in fields(self))

    def variant_columns(self) -> tuple[T, ...]:
        """Columns read by the variant filter (no beta/sebeta/af)."""

        return (self.chromosome, self.position, self.reference, self.alternate, self.pvalue)


# Wire names used by configuration JSON, mapped onto FileColumns fields.
COLUMN_KEYS: dict[str, str] = {
    "chromosome": "chromosomeColumn",
    "position": "positionColumn",
    "reference": "referenceColumn",
    "alternate": "alternativeColumn",
    "pvalue": "pValueColumn",
    "beta": "betaColumn",
    "sebeta": "sebetaColumn",
    "allele_frequency": "afColumn",
}


@dataclass(frozen=True)
class FileConfiguration:
    """Column names and filtering settings for one source file."""

    tag: str
    columns: FileColumns[str]
    pvalue_threshold: float
    delimiter: str


@dataclass(frozen=True)
class ColumnIndexMetadata:
    """Resolved positional layout of a source file, read-only once built."""

    tag: str
    columns: FileColumns[int]
    pvalue_threshold: float
    delimiter: str

    def required_length(self, *, variant_only: bool = False) -> int:
        """Minimum number of fields a data row must carry."""

        indices = self.columns.variant_columns() if variant_only else self.columns.values()
        return max(indices) + 1

    def to_payload(self) -> dict[str, object]:
        """Serialize with configuration wire names and integer column values."""

        payload: dict[str, object] = {"tag": self.tag}
        for field_name, key in COLUMN_KEYS.items():
            payload[key] = getattr(self.columns, field_name)
        payload["pval_threshold"] = self.pvalue_threshold
        payload["delimiter"] = self.delimiter
        return payload


@dataclass(frozen=True)
class PipelineConfiguration:
    """Chunking knobs for file-level pipelines."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    block_size: int = DEFAULT_BLOCK_SIZE


def normalize_delimiter(value: str) -> str:
    """Resolve ``tab``/``comma`` aliases to the literal character."""

    return DELIMITER_ALIASES.get(value.strip().lower(), value) if len(value) > 1 else value
