"""MongoDB implementation of document database."""

import time
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from src.commons.infrastructure.blob.base import HealthStatus
from src.commons.infrastructure.documentdb.base import DocumentDBBase


def _id_candidates(document_id: str) -> list[Any]:
    """IDs to try for a lookup: the string itself, then its ObjectId form.

    Users created by the authentication service carry ObjectId keys, while
    workout logs use UUID strings.
    """
    candidates: list[Any] = [document_id]
    if ObjectId.is_valid(document_id):
        candidates.append(ObjectId(document_id))
    return candidates


def _restore_id(doc: dict[str, Any]) -> dict[str, Any]:
    """Restore 'id' field from '_id' for domain model compatibility."""
    doc["id"] = str(doc.pop("_id"))
    return dict(doc)


class MongoDBDocumentDB(DocumentDBBase):
    """MongoDB implementation of document database.

    Uses Motor for async operations.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str,
    ) -> None:
        """Initialize MongoDB client.

        Args:
            connection_string: MongoDB connection URI.
            database_name: Name of the database to use.
        """
        self._client: AsyncIOMotorClient[dict[str, Any]] = AsyncIOMotorClient(
            connection_string
        )
        self._db: AsyncIOMotorDatabase[dict[str, Any]] = self._client[database_name]
        self._database_name = database_name

    async def insert(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> str:
        """Insert a document.

        If the document has an 'id' field, it will be used as MongoDB's '_id'.
        """
        doc = document.copy()
        if "id" in doc:
            doc["_id"] = doc.pop("id")

        result = await self._db[collection].insert_one(doc)
        return str(result.inserted_id)

    async def find_by_id(
        self,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        """Find a document by ID.

        Returns the document with 'id' field restored.
        """
        for candidate in _id_candidates(document_id):
            doc = await self._db[collection].find_one({"_id": candidate})
            if doc:
                return _restore_id(doc)
        return None

    async def find(
        self,
        collection: str,
        filters: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[dict[str, Any]]:
        """Find documents matching filters.

        Returns documents with 'id' field restored from '_id'.
        """
        cursor = self._db[collection].find(filters)

        if sort:
            cursor = cursor.sort(sort)

        cursor = cursor.skip(skip).limit(limit)

        results: list[dict[str, Any]] = []
        async for doc in cursor:
            results.append(_restore_id(doc))

        return results

    async def update(
        self,
        collection: str,
        document_id: str,
        updates: dict[str, Any],
    ) -> bool:
        """Update a document.

        The '_id' of an existing document is immutable, so an 'id' key in
        updates is dropped.
        """
        update_doc = {k: v for k, v in updates.items() if k not in ("id", "_id")}
        return await self._update_one(document_id, collection, {"$set": update_doc})

    async def delete(
        self,
        collection: str,
        document_id: str,
    ) -> bool:
        """Delete a document."""
        for candidate in _id_candidates(document_id):
            result = await self._db[collection].delete_one({"_id": candidate})
            if result.deleted_count > 0:
                return True
        return False

    async def prepend_to_array(
        self,
        collection: str,
        document_id: str,
        field: str,
        value: Any,
    ) -> bool:
        """Insert a value at the front of an array field."""
        return await self._update_one(
            document_id,
            collection,
            {"$push": {field: {"$each": [value], "$position": 0}}},
        )

    async def pull_from_array(
        self,
        collection: str,
        document_id: str,
        field: str,
        value: Any,
    ) -> bool:
        """Remove every occurrence of a value from an array field.

        Matches both the string form and the ObjectId form of the value.
        """
        return await self._update_one(
            document_id,
            collection,
            {"$pull": {field: {"$in": _id_candidates(str(value))}}},
        )

    async def _update_one(
        self,
        document_id: str,
        collection: str,
        operation: dict[str, Any],
    ) -> bool:
        for candidate in _id_candidates(document_id):
            result = await self._db[collection].update_one({"_id": candidate}, operation)
            if result.matched_count > 0:
                return True
        return False

    async def health_check(self) -> HealthStatus:
        """Check service health."""
        start = time.perf_counter()
        try:
            await self._client.admin.command("ping")
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=True,
                latency_ms=latency_ms,
                message="MongoDB is healthy",
                details={"database": self._database_name},
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=False,
                latency_ms=latency_ms,
                message=f"MongoDB health check failed: {e}",
                details={"database": self._database_name, "error": str(e)},
            )

    async def close(self) -> None:
        """Close the client connection."""
        self._client.close()
