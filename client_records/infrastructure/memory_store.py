"""
In-process implementation of the document store contract.

Used by the CLI, the benchmark and the test-suite. Every mutation pushes a
fresh snapshot to the active watchers of the touched collection, just like a
live remote collection would. Optional latency and fault injection make it
possible to reproduce slow or failing backends deterministically.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import Counter, defaultdict, deque
from typing import Any, AsyncIterator, Deque, Dict, Iterable, List, Mapping, Optional, Set

from client_records.infrastructure.store import DocumentSnapshot, ErrorCode, StoreError
from client_records.utils.logging import get_logger

log = get_logger(__name__)

# Queue item telling watchers to re-read the collection.
_CHANGED = object()


def _order_key(order_by: str, item: tuple) -> tuple:
    doc_id, fields = item
    value = fields.get(order_by)
    if value is None:
        return (1, "", doc_id)
    return (0, value, doc_id)


class InMemoryDocumentStore:
    """
    Dict-backed document store with live watches.

    Attributes
    ----------
    calls : Counter
        Number of invocations per operation name; a watch counts once when it
        is first iterated (that is when the subscription is opened).
    """

    def __init__(self, latency_ms: int = 0) -> None:
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self._watchers: Dict[str, Set[asyncio.Queue]] = defaultdict(set)
        self._faults: Dict[str, Deque[StoreError]] = defaultdict(deque)
        self._latency = latency_ms / 1000.0
        self.calls: Counter[str] = Counter()

    # ------------------------------------------------------------------ helpers

    def seed(self, collection: str, documents: Iterable[Mapping[str, Any]]) -> List[str]:
        """
        Load documents without notifying watchers. An ``id`` key, when present,
        becomes the document id; otherwise one is generated.
        """
        ids: List[str] = []
        for document in documents:
            fields = dict(document)
            doc_id = str(fields.pop("id", None) or uuid.uuid4().hex)
            self._collections[collection][doc_id] = fields
            ids.append(doc_id)
        return ids

    def fail_next(
        self,
        operation: str,
        code: Optional[ErrorCode | str] = None,
        times: int = 1,
        message: Optional[str] = None,
    ) -> None:
        """Make the next ``times`` invocations of ``operation`` raise `StoreError`."""
        for _ in range(times):
            self._faults[operation].append(StoreError(message or "", code=code))

    def interrupt(
        self, collection: str, code: Optional[ErrorCode | str] = None, message: str = ""
    ) -> None:
        """Break every active watch on ``collection`` with a `StoreError`."""
        error = StoreError(message, code=code)
        for queue in list(self._watchers[collection]):
            queue.put_nowait(error)

    def documents(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return {doc_id: dict(fields) for doc_id, fields in self._collections[collection].items()}

    def watcher_count(self, collection: str) -> int:
        return len(self._watchers[collection])

    async def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        if self._latency:
            await asyncio.sleep(self._latency)
        faults = self._faults[operation]
        if faults:
            error = faults.popleft()
            log.debug("Injected store fault", extra={"operation": operation, "code": error.code})
            raise error

    def _notify(self, collection: str) -> None:
        for queue in self._watchers[collection]:
            queue.put_nowait(_CHANGED)

    def _snapshot_collection(
        self, collection: str, order_by: Optional[str]
    ) -> List[DocumentSnapshot]:
        items = self._collections[collection].items()
        if order_by:
            items = sorted(items, key=lambda item: _order_key(order_by, item))
        return [
            DocumentSnapshot(id=doc_id, exists=True, fields=dict(fields)) for doc_id, fields in items
        ]

    def _snapshot_document(self, collection: str, doc_id: str) -> DocumentSnapshot:
        fields = self._collections[collection].get(doc_id)
        if fields is None:
            return DocumentSnapshot(id=doc_id, exists=False, fields={})
        return DocumentSnapshot(id=doc_id, exists=True, fields=dict(fields))

    def _subscribe(self, collection: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._watchers[collection].add(queue)
        return queue

    async def _next_change(self, queue: asyncio.Queue) -> None:
        item = await queue.get()
        # Coalesce bursts of notifications into one re-read.
        while item is _CHANGED and not queue.empty():
            item = queue.get_nowait()
        if isinstance(item, StoreError):
            raise item

    # ---------------------------------------------------------------- contract

    async def watch_collection(
        self, collection: str, order_by: Optional[str] = None
    ) -> AsyncIterator[List[DocumentSnapshot]]:
        await self._enter("watch_collection")
        queue = self._subscribe(collection)
        try:
            yield self._snapshot_collection(collection, order_by)
            while True:
                await self._next_change(queue)
                yield self._snapshot_collection(collection, order_by)
        finally:
            self._watchers[collection].discard(queue)

    async def watch_document(self, collection: str, doc_id: str) -> AsyncIterator[DocumentSnapshot]:
        await self._enter("watch_document")
        queue = self._subscribe(collection)
        try:
            previous = self._snapshot_document(collection, doc_id)
            yield previous
            while True:
                await self._next_change(queue)
                current = self._snapshot_document(collection, doc_id)
                if current != previous:
                    previous = current
                    yield current
        finally:
            self._watchers[collection].discard(queue)

    async def create_document(self, collection: str, fields: Dict[str, Any]) -> str:
        await self._enter("create_document")
        doc_id = uuid.uuid4().hex
        self._collections[collection][doc_id] = dict(fields)
        self._notify(collection)
        return doc_id

    async def update_document(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        await self._enter("update_document")
        current = self._collections[collection].get(doc_id)
        if current is None:
            raise StoreError(f"No document to update: {collection}/{doc_id}", ErrorCode.NOT_FOUND)
        current.update(fields)
        self._notify(collection)

    async def set_document(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        await self._enter("set_document")
        self._collections[collection][doc_id] = dict(fields)
        self._notify(collection)

    async def delete_document(self, collection: str, doc_id: str) -> None:
        await self._enter("delete_document")
        if self._collections[collection].pop(doc_id, None) is not None:
            self._notify(collection)


__all__ = ["InMemoryDocumentStore"]
