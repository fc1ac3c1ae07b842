"""Fake document database for testing."""

import copy
from typing import Any

from src.commons.infrastructure.blob.base import HealthStatus
from src.commons.infrastructure.documentdb.base import DocumentDBBase


class FakeDocumentDB(DocumentDBBase):
    """In-memory implementation of DocumentDBBase.

    Collections are ``{name: {id: document}}``; documents are deep-copied on
    the way in and out, as a real store would serialize them.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.fail_updates = False

    # -------------------------------------------------------------------------
    # Test Helpers
    # -------------------------------------------------------------------------

    def seed(self, collection: str, document: dict[str, Any]) -> None:
        """Store a document directly."""
        self._collection(collection)[document["id"]] = copy.deepcopy(document)

    def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """Stored document, or None."""
        return self._collection(collection).get(document_id)

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(name, {})

    @staticmethod
    def _matches(document: dict[str, Any], filters: dict[str, Any]) -> bool:
        for key, condition in filters.items():
            value = document.get("id" if key == "_id" else key)
            if isinstance(condition, dict) and "$in" in condition:
                if value not in condition["$in"]:
                    return False
            elif value != condition:
                return False
        return True

    # -------------------------------------------------------------------------
    # DocumentDBBase
    # -------------------------------------------------------------------------

    async def insert(self, collection: str, document: dict[str, Any]) -> str:
        self.seed(collection, document)
        return str(document["id"])

    async def find_by_id(
        self, collection: str, document_id: str
    ) -> dict[str, Any] | None:
        document = self._collection(collection).get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def find(
        self,
        collection: str,
        filters: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[dict[str, Any]]:
        matches = [
            copy.deepcopy(d)
            for d in self._collection(collection).values()
            if self._matches(d, filters)
        ]
        for field, direction in reversed(sort or []):
            matches.sort(key=lambda d: d[field], reverse=direction < 0)
        return matches[skip : skip + limit]

    async def update(
        self, collection: str, document_id: str, updates: dict[str, Any]
    ) -> bool:
        if self.fail_updates:
            raise RuntimeError("injected update failure")
        document = self._collection(collection).get(document_id)
        if document is None:
            return False
        document.update(
            copy.deepcopy({k: v for k, v in updates.items() if k not in ("id", "_id")})
        )
        return True

    async def delete(self, collection: str, document_id: str) -> bool:
        return self._collection(collection).pop(document_id, None) is not None

    async def prepend_to_array(
        self, collection: str, document_id: str, field: str, value: Any
    ) -> bool:
        document = self._collection(collection).get(document_id)
        if document is None:
            return False
        document[field] = [value, *document.get(field, [])]
        return True

    async def pull_from_array(
        self, collection: str, document_id: str, field: str, value: Any
    ) -> bool:
        document = self._collection(collection).get(document_id)
        if document is None:
            return False
        document[field] = [v for v in document.get(field, []) if v != value]
        return True

    async def health_check(self) -> HealthStatus:
        return HealthStatus(healthy=True, latency_ms=0.1, message="fake")
