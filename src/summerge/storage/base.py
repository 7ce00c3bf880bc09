"""Base class for merged table storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from summerge.pipeline import MergedTable


class MergedTableStorage(ABC):
    """Persists merged statistics tables for downstream querying."""

    @abstractmethod
    def persist(self, table: MergedTable) -> None:
        """Persist a table in backend-specific format."""
