"""
Contract of the remote document store the record service depends on.

The store itself is an external collaborator: anything satisfying
`DocumentStore` can back the service. Watches emit the full current state
every time something changes and never complete on their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Protocol, runtime_checkable


class ErrorCode(str, Enum):
    """Coarse failure classification reported by the store."""

    PERMISSION_DENIED = "permission-denied"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not-found"


class StoreError(Exception):
    """
    Failure surfaced by the document store.

    ``code`` is one of the `ErrorCode` values, another store-specific string,
    or None for unclassified failures.
    """

    def __init__(self, message: str = "", code: Optional[ErrorCode | str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code: Optional[str] = code.value if isinstance(code, ErrorCode) else code

    def __repr__(self) -> str:
        return f"StoreError(code={self.code!r}, message={self.message!r})"


@dataclass(frozen=True)
class DocumentSnapshot:
    id: str
    exists: bool = True
    fields: Mapping[str, Any] = field(default_factory=dict)


@runtime_checkable
class DocumentStore(Protocol):
    """
    Minimal surface consumed from the remote document store.
    """

    def watch_collection(
        self, collection: str, order_by: Optional[str] = None
    ) -> AsyncIterator[List[DocumentSnapshot]]:
        """Emit the full, ordered document set on subscribe and on every change."""
        ...

    def watch_document(self, collection: str, doc_id: str) -> AsyncIterator[DocumentSnapshot]:
        """Emit the document state (possibly ``exists=False``) on subscribe and on every change."""
        ...

    async def create_document(self, collection: str, fields: Dict[str, Any]) -> str:
        """Store a new document and return its assigned id."""
        ...

    async def update_document(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Merge ``fields`` into an existing document."""
        ...

    async def set_document(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Create or replace the document stored at ``doc_id``."""
        ...

    async def delete_document(self, collection: str, doc_id: str) -> None:
        ...


__all__ = ["DocumentSnapshot", "DocumentStore", "ErrorCode", "StoreError"]
