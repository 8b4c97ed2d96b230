from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """Abstract sink for parse output records."""

    @abstractmethod
    def connect(self):
        """Open the destination and create its schema if needed."""

    @abstractmethod
    def write_batch(self, records: list[dict[str, Any]]) -> None:
        """Append a batch of output records."""

    @abstractmethod
    def query_results(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """Read records back, optionally filtered by `uuid` or `matched`."""

    @abstractmethod
    def close(self):
        """Flush and close cleanly."""

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
