"""Typed call contract for host environments.

Each method takes primitive values (JSON text, byte buffers, string lists)
and returns primitive values, so a host runtime can bind them without
inspecting Python objects. Configuration and metadata JSON use the same key
names as configuration files; metadata carries integer column positions.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from summerge.config import ColumnIndexMetadata
from summerge.errors import ConfigurationError
from summerge.models import create_header as _create_header
from summerge.operators import buffer_summary_pass, filter_variants, merged_header, merged_rows
from summerge.profiles import (
    COLUMN_INDEX_METADATA_SCHEMA,
    ConfigurationValidator,
    FileConfigurationLoader,
    parse_column_index_metadata,
    resolve_column_index,
)


class Bridge:
    """Binds the operators to compiled configuration and metadata validators."""

    def __init__(
        self,
        *,
        configuration_validator: ConfigurationValidator | None = None,
        metadata_validator: ConfigurationValidator | None = None,
    ) -> None:
        self.loader = FileConfigurationLoader(validator=configuration_validator)
        self.metadata_validator = metadata_validator or ConfigurationValidator(
            COLUMN_INDEX_METADATA_SCHEMA
        )

    def _metadata(self, metadata_json: str) -> ColumnIndexMetadata:
        try:
            payload = json.loads(metadata_json)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"unmarshal error: {exc}") from exc
        return parse_column_index_metadata(payload, self.metadata_validator)

    def create_file_columns_index(self, header: bytes, configuration_json: str) -> str:
        configuration = self.loader.parse_json(configuration_json)
        return json.dumps(resolve_column_index(header, configuration).to_payload())

    def buffer_variants(self, buffer: bytes, metadata_json: str) -> list[str]:
        return filter_variants(buffer, self._metadata(metadata_json))

    def buffer_summary_passes(
        self,
        buffer: bytes,
        metadata_json: str,
        partitions: Sequence[Sequence[str]],
    ) -> list[bytes]:
        return buffer_summary_pass(buffer, self._metadata(metadata_json), partitions)

    @staticmethod
    def summary_bytes_string(
        blobs: Sequence[bytes],
        delimiter: str,
        *,
        include_cpra: bool = False,
        key_delimiter: str | None = None,
    ) -> list[str]:
        return merged_rows(
            blobs, delimiter, include_cpra=include_cpra, key_delimiter=key_delimiter
        )

    @staticmethod
    def header_bytes_string(
        blobs: Sequence[bytes], delimiter: str, *, include_cpra: bool = False
    ) -> str:
        return merged_header(blobs, delimiter, include_cpra=include_cpra)

    @staticmethod
    def create_header(tag: str) -> list[str]:
        return _create_header(tag)
