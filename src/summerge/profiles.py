"""File configuration loading, schema validation and header resolution."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from jsonschema import FormatChecker
from jsonschema.validators import validator_for

from summerge.config import (
    COLUMN_KEYS,
    ColumnIndexMetadata,
    FileColumns,
    FileConfiguration,
    normalize_delimiter,
)
from summerge.errors import ConfigurationError
from summerge.variants import to_float32

logger = logging.getLogger(__name__)

JSON_SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"


def _build_schema(column_type: dict[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {"tag": {"type": "string", "minLength": 1}}
    for key in COLUMN_KEYS.values():
        properties[key] = dict(column_type)
    properties["pval_threshold"] = {"type": "number", "exclusiveMinimum": 0}
    properties["delimiter"] = {"type": "string", "minLength": 1}
    return {
        "$schema": JSON_SCHEMA_DRAFT,
        "type": "object",
        "required": list(properties),
        "properties": properties,
    }


FILE_CONFIGURATION_SCHEMA: dict[str, Any] = _build_schema({"type": "string", "minLength": 1})
COLUMN_INDEX_METADATA_SCHEMA: dict[str, Any] = _build_schema({"type": "integer", "minimum": 0})


class ConfigurationValidator:
    """Compiled JSON Schema validator for configuration payloads.

    Build one at process start and hand it to the loaders that need it; the
    compiled validator is never mutated and may be shared between threads.
    """

    def __init__(self, schema: Mapping[str, Any] = FILE_CONFIGURATION_SCHEMA) -> None:
        # Pick the correct validator for the schema's declared draft.
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
        self._validator = validator_cls(schema, format_checker=FormatChecker())

    def errors(self, payload: Any) -> list[str]:
        """Return every schema violation as ``path: message`` strings."""

        messages = []
        for error in sorted(self._validator.iter_errors(payload), key=lambda item: list(item.path)):
            path = "/" + "/".join(str(part) for part in error.path)
            messages.append(f"{path}: {error.message}")
        return messages

    def validate(self, payload: Any) -> None:
        messages = self.errors(payload)
        if messages:
            raise ConfigurationError("validation error: " + "; ".join(messages))


class FileConfigurationLoader:
    """Load file configurations from ``config/files`` or a custom path."""

    def __init__(
        self,
        config_dir: str | Path | None = None,
        *,
        validator: ConfigurationValidator | None = None,
    ) -> None:
        if config_dir is None:
            config_dir = Path(__file__).resolve().parents[2] / "config" / "files"
        self.config_dir = Path(config_dir)
        self.validator = validator or ConfigurationValidator()

    def list_configurations(self) -> list[str]:
        """Return available configuration names from the configured directory."""

        return sorted(path.stem for path in self.config_dir.glob("*.json"))

    def load(self, name_or_path: str | Path) -> FileConfiguration:
        """Load a configuration by name (for example, ``study1``) or explicit path."""

        path = self._resolve_path(name_or_path)
        return self.parse_json(path.read_text())

    def parse_json(self, text: str | bytes) -> FileConfiguration:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.debug("Configuration JSON decode failed: %s", exc)
            raise ConfigurationError(f"unmarshal error: {exc}") from exc
        return self.parse(payload)

    def parse(self, payload: Mapping[str, Any]) -> FileConfiguration:
        self.validator.validate(payload)

        delimiter = normalize_delimiter(str(payload["delimiter"]))
        if len(delimiter) != 1:
            raise ConfigurationError(
                f"delimiter must be a single character, got {payload['delimiter']!r}"
            )

        columns = FileColumns(
            **{
                field_name: str(payload[key]).strip()
                for field_name, key in COLUMN_KEYS.items()
            }
        )
        return FileConfiguration(
            tag=str(payload["tag"]).strip(),
            columns=columns,
            pvalue_threshold=to_float32(float(payload["pval_threshold"])),
            delimiter=delimiter,
        )

    def _resolve_path(self, name_or_path: str | Path) -> Path:
        requested = Path(name_or_path)

        if requested.exists():
            return requested

        candidate = self.config_dir / f"{requested}.json"
        if candidate.exists():
            return candidate

        raise FileNotFoundError(
            f"File configuration not found: {name_or_path}. "
            f"Available: {', '.join(self.list_configurations())}"
        )


def resolve_column_index(
    header: str | bytes,
    configuration: FileConfiguration,
) -> ColumnIndexMetadata:
    """Map configured column names to their positions in a header line."""

    if isinstance(header, bytes):
        header = header.decode("utf-8")

    names = header.strip().split(configuration.delimiter)
    positions: dict[str, int] = {}
    for index, name in enumerate(names):
        positions[name.strip()] = index

    resolved: dict[str, int] = {}
    for field_name in COLUMN_KEYS:
        column_name = getattr(configuration.columns, field_name)
        if column_name not in positions:
            raise ConfigurationError(f"column {column_name!r} not found in header")
        resolved[field_name] = positions[column_name]

    return ColumnIndexMetadata(
        tag=configuration.tag,
        columns=FileColumns(**resolved),
        pvalue_threshold=configuration.pvalue_threshold,
        delimiter=configuration.delimiter,
    )


def parse_column_index_metadata(
    payload: Mapping[str, Any],
    validator: ConfigurationValidator,
) -> ColumnIndexMetadata:
    """Build metadata from its JSON form (integer column positions)."""

    validator.validate(payload)
    delimiter = normalize_delimiter(str(payload["delimiter"]))
    if len(delimiter) != 1:
        raise ConfigurationError(
            f"delimiter must be a single character, got {payload['delimiter']!r}"
        )
    return ColumnIndexMetadata(
        tag=str(payload["tag"]),
        columns=FileColumns(**{field_name: int(payload[key]) for field_name, key in COLUMN_KEYS.items()}),
        pvalue_threshold=to_float32(float(payload["pval_threshold"])),
        delimiter=delimiter,
    )
