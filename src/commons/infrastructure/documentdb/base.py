"""Abstract base class for document database operations."""

from abc import ABC, abstractmethod
from typing import Any

from src.commons.infrastructure.blob.base import HealthStatus


class DocumentDBBase(ABC):
    """Abstract base class for document database operations.

    Implementations should handle:
    - MongoDB
    """

    @abstractmethod
    async def insert(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> str:
        """Insert a document.

        Args:
            collection: Collection/table name.
            document: Document to insert.

        Returns:
            Generated document ID.
        """

    @abstractmethod
    async def find_by_id(
        self,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        """Find a document by ID.

        Args:
            collection: Collection/table name.
            document_id: Document ID to find.

        Returns:
            Document if found, None otherwise.
        """

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[dict[str, Any]]:
        """Find documents matching filters.

        Args:
            collection: Collection/table name.
            filters: Query filters.
            skip: Number of documents to skip.
            limit: Maximum documents to return.
            sort: Sort specification [(field, direction)].
                  Direction: 1 for ascending, -1 for descending.

        Returns:
            List of matching documents.
        """

    @abstractmethod
    async def update(
        self,
        collection: str,
        document_id: str,
        updates: dict[str, Any],
    ) -> bool:
        """Update a document.

        Args:
            collection: Collection/table name.
            document_id: Document ID to update.
            updates: Fields to update.

        Returns:
            True if updated, False if not found.
        """

    @abstractmethod
    async def delete(
        self,
        collection: str,
        document_id: str,
    ) -> bool:
        """Delete a document.

        Args:
            collection: Collection/table name.
            document_id: Document ID to delete.

        Returns:
            True if deleted, False if not found.
        """

    @abstractmethod
    async def prepend_to_array(
        self,
        collection: str,
        document_id: str,
        field: str,
        value: Any,
    ) -> bool:
        """Insert a value at the front of an array field.

        Args:
            collection: Collection/table name.
            document_id: Document ID to update.
            field: Array field name.
            value: Value to insert.

        Returns:
            True if the document was found, False otherwise.
        """

    @abstractmethod
    async def pull_from_array(
        self,
        collection: str,
        document_id: str,
        field: str,
        value: Any,
    ) -> bool:
        """Remove every occurrence of a value from an array field.

        Args:
            collection: Collection/table name.
            document_id: Document ID to update.
            field: Array field name.
            value: Value to remove.

        Returns:
            True if the document was found, False otherwise.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health.

        Returns:
            Health status with latency info.
        """
