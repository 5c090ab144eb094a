"""Abstract remote store interface."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from milkledger.domain.entities import Collection, Record


class RemoteStoreError(Exception):
    """A remote read or write failed (network, credentials, constraint, ...)."""


class RemoteStore(ABC):
    """Owner-scoped keyed storage for the five record collections.

    Every operation is partitioned by ``owner_id``; rows of other owners are
    never read or touched.
    """

    @abstractmethod
    def ping(self, owner_id: str) -> None:
        """Issue a lightweight read. Raises RemoteStoreError when unreachable."""
        pass

    @abstractmethod
    def has_people(self, owner_id: str) -> bool:
        """Return True if the owner has at least one person row."""
        pass

    @abstractmethod
    def fetch_all(self, collection: Collection, owner_id: str) -> list[Record]:
        """Return every record of one collection for the owner."""
        pass

    @abstractmethod
    def insert(self, collection: Collection, owner_id: str, record: Record) -> None:
        """Insert a single new record."""
        pass

    @abstractmethod
    def upsert(self, collection: Collection, owner_id: str, records: Sequence[Record]) -> int:
        """Insert or replace records keyed by their id, in one request.

        Returns:
            Number of records written
        """
        pass

    @abstractmethod
    def update(
        self, collection: Collection, owner_id: str, record_id: str, changes: dict[str, Any]
    ) -> None:
        """Update fields of the record matching id and owner."""
        pass

    @abstractmethod
    def delete(self, collection: Collection, owner_id: str, record_id: str) -> None:
        """Delete the record matching id and owner."""
        pass

    def close(self) -> None:
        """Release connections held by the store."""
        pass
