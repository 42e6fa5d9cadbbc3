"""
Infrastructure package for the client record access layer.

Holds the document store contract and the in-process store implementation.
Keep this layer focused on I/O concerns, decoupled from caching/retry logic.
"""

from client_records.infrastructure.memory_store import InMemoryDocumentStore
from client_records.infrastructure.store import (
    DocumentSnapshot,
    DocumentStore,
    ErrorCode,
    StoreError,
)

__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "ErrorCode",
    "InMemoryDocumentStore",
    "StoreError",
]
