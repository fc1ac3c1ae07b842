"""In-memory fakes of the storage gateways.

They keep data in dictionaries and expose helpers for test setup and
failure injection, so services and routes run without MinIO or MongoDB.
"""

from tests.fakes.blob_storage import FakeBlobStorage
from tests.fakes.document_db import FakeDocumentDB

__all__ = [
    "FakeBlobStorage",
    "FakeDocumentDB",
]
