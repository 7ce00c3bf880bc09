"""Error types raised by summerge operations."""

from __future__ import annotations

from typing import Any


class SummergeError(ValueError):
    """Base class for all summerge failures."""


class MalformedValue(SummergeError):
    """A field could not be parsed into its expected type."""

    def __init__(self, field: str, value: Any, row: int | None = None, reason: str = "") -> None:
        self.field = field
        self.value = value
        self.row = row
        location = f" at row {row}" if row is not None else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"invalid {field}{location}: {value!r}{detail}")


class InsufficientColumns(SummergeError):
    """The first data row has fewer fields than the configured columns require."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"insufficient columns: expected at least {expected}, got {actual}")


class DecodeError(SummergeError):
    """A serialized block could not be decoded."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"unmarshal block {index}: {reason}")


class ConfigurationError(SummergeError):
    """File configuration could not be parsed, validated or resolved."""


class PartitionCollisionError(ConfigurationError):
    """A variant key was declared in more than one partition."""
