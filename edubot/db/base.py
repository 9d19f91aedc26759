from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class UpstreamFetchError(Exception):
    """Raised when the school store cannot be read."""


class SchoolRepository(ABC):
    """Abstract interface for reading school records.

    Records are returned as plain mappings exactly as the store holds them;
    interpreting their fields is left to the scoring service.
    """

    @abstractmethod
    async def fetch_all_schools(self) -> list[dict[str, Any]]:
        """Return every school record, or an empty list when the store is empty.

        Raises:
            UpstreamFetchError: If the store is unreachable or returns garbage.
        """
        ...
