"""
Record access service: the only gateway between consumers and the store.

Reads
    `list()` shares one live collection subscription between every consumer
    for the cache TTL. Subscriptions are retried with exponential backoff;
    once retries are exhausted the failure is translated, published on the
    `error` slot, and the stream completes quietly instead of failing.

Writes
    `create()`, `modify()` and `delete()` validate locally, then call the
    store. Success invalidates the cache before the call returns, so a read
    started afterwards always re-subscribes. Failures are published on the
    `error` slot *and* re-raised to the caller.

Derived
    `total_balance()` and `search()` are computed from the cached `list()`
    stream and never open their own store subscription.
"""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from client_records.cache import RecordCache
from client_records.config import Settings, get_settings
from client_records.domain.aggregates import filter_records, total_balance_of
from client_records.domain.models import Record
from client_records.errors import RecordValidationError, describe_failure
from client_records.infrastructure.store import DocumentStore
from client_records.retry import RetryPolicy
from client_records.streams.operators import map_shared
from client_records.streams.shared import Emit, SharedStream
from client_records.streams.state import ReadOnlySlot, StateSlot
from client_records.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+\Z")

ID_REQUIRED = "client id is required"
ID_REQUIRED_TO_MODIFY = "client id is required to modify"
ID_REQUIRED_TO_DELETE = "client id is required to delete"
NAME_REQUIRED = "client name is required"
SURNAME_REQUIRED = "client surname is required"
INVALID_EMAIL = "email format is invalid"
NEGATIVE_BALANCE = "balance cannot be negative"

RecordInput = Union[Record, Mapping[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_record(record: Record) -> None:
    """
    Reject a record that may not be written, in a fixed order: name, surname,
    email format, balance sign.
    """
    if _is_blank(record.name):
        raise RecordValidationError(NAME_REQUIRED)
    if _is_blank(record.surname):
        raise RecordValidationError(SURNAME_REQUIRED)
    if record.email and not EMAIL_PATTERN.match(record.email):
        raise RecordValidationError(INVALID_EMAIL)
    if record.balance is not None and record.balance < 0:
        raise RecordValidationError(NEGATIVE_BALANCE)


def _coerce(record: RecordInput) -> Record:
    if isinstance(record, Record):
        return record
    return Record.model_validate(record)


class RecordAccessService:
    """
    Cached, retrying access to the clients collection.

    Parameters
    ----------
    store : DocumentStore
        Backend the service reads from and writes to.
    settings : Settings | None
        Collection names and cache/retry tuning; defaults to `get_settings()`.
    clock : Callable[[], float]
        Monotonic time source for the cache TTL.
    retry_policy : RetryPolicy | None
        Override the subscription retry policy (tests inject a fake sleep).
    now : Callable[[], datetime]
        Source of creation/modification timestamps.
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: Optional[Settings] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        retry_policy: Optional[RetryPolicy] = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        settings = settings or get_settings()
        self._store = store
        self._collection = settings.clients_collection
        self._order_by = settings.clients_order_by
        self._cache: RecordCache[SharedStream[List[Record]]] = RecordCache(
            ttl=settings.cache_ttl_seconds,
            clock=clock,
            on_evict=SharedStream.close_when_idle,
        )
        self._retry = retry_policy or RetryPolicy(
            max_retries=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay_seconds,
        )
        self._now = now
        self._loading: StateSlot[bool] = StateSlot(False)
        self._error: StateSlot[Optional[str]] = StateSlot(None)
        self._totals: Optional[Tuple[SharedStream[List[Record]], SharedStream[float]]] = None

    # ------------------------------------------------------------------ state

    @property
    def loading(self) -> ReadOnlySlot[bool]:
        return self._loading.as_readonly()

    @property
    def error(self) -> ReadOnlySlot[Optional[str]]:
        return self._error.as_readonly()

    @property
    def cache(self) -> RecordCache[SharedStream[List[Record]]]:
        return self._cache

    def close(self) -> None:
        """Drop the cached stream and complete the loading/error slots."""
        self._cache.invalidate()
        self._loading.close()
        self._error.close()

    # ------------------------------------------------------------------ reads

    def list(self) -> SharedStream[List[Record]]:
        """Live, ordered client list shared by every caller within the TTL."""
        return self._cache.get_or_create(self._open_list)

    def _open_list(self) -> SharedStream[List[Record]]:
        log.info(
            "[LIST] Cache miss, opening collection subscription",
            extra={"collection": self._collection, "order_by": self._order_by},
        )
        return self._watched(
            "list",
            lambda: self._store.watch_collection(self._collection, self._order_by),
            lambda batch: [Record.from_snapshot(snapshot) for snapshot in batch],
        )

    def get(self, record_id: Optional[str]) -> SharedStream[Optional[Record]]:
        """
        Live view of one client; emits None while the document does not exist.

        A blank id yields a stream failing with `RecordValidationError`.
        """
        if _is_blank(record_id):
            return SharedStream.failed(RecordValidationError(ID_REQUIRED), name="get")
        return self._watched(
            "get",
            lambda: self._store.watch_document(self._collection, record_id),
            lambda snapshot: Record.from_snapshot(snapshot) if snapshot.exists else None,
            refcount=True,
        )

    def _watched(
        self,
        operation: str,
        watch: Callable[[], AsyncIterator[Any]],
        convert: Callable[[Any], T],
        refcount: bool = False,
    ) -> SharedStream[T]:
        self._error.publish(None)
        self._loading.publish(True)

        async def produce(emit: Emit) -> None:
            async def attempt() -> None:
                async for raw in watch():
                    emit(convert(raw))
                    self._loading.publish(False)

            try:
                await self._retry.run(attempt, label=operation)
            except Exception as exc:  # noqa: BLE001 - read failures go to the error slot
                self._report_failure(operation, exc)
            finally:
                self._loading.publish(False)

        return SharedStream(produce, name=f"{operation}:{self._collection}", refcount=refcount)

    # ---------------------------------------------------------------- derived

    def total_balance(self) -> SharedStream[float]:
        """
        Sum of all balances, recomputed on every list emission.

        Callers observing the total at the same time share one computation.
        """
        source = self.list()
        if self._totals is not None:
            cached_source, totals = self._totals
            if cached_source is source and not totals.done:
                return totals
        totals = map_shared(source, total_balance_of, name="total_balance", refcount=True)
        self._totals = (source, totals)
        return totals

    def search(self, term: Optional[str]) -> SharedStream[List[Record]]:
        """Clients whose name, surname or email contains ``term``, ignoring case."""
        if _is_blank(term):
            return self.list()
        return map_shared(
            self.list(),
            lambda records: filter_records(records, term),
            name=f"search:{term}",
            refcount=True,
        )

    # ----------------------------------------------------------------- writes

    async def create(self, record: RecordInput) -> str:
        """
        Store a new client and return its id.

        Any caller-supplied id or timestamps are discarded; the balance defaults to 0.
        """
        record = _coerce(record)
        validate_record(record)
        document = record.model_copy(
            update={"balance": record.balance or 0, "created_at": self._now(), "modified_at": None}
        ).to_document()
        return await self._write(
            "create", lambda: self._store.create_document(self._collection, document)
        )

    async def modify(self, record: RecordInput) -> None:
        """Update an existing client; the modification timestamp is always refreshed."""
        record = _coerce(record)
        if _is_blank(record.id):
            raise RecordValidationError(ID_REQUIRED_TO_MODIFY)
        validate_record(record)
        document = record.model_copy(update={"modified_at": self._now()}).to_document()
        await self._write(
            "modify", lambda: self._store.update_document(self._collection, record.id, document)
        )

    async def delete(self, record: RecordInput) -> None:
        record = _coerce(record)
        if _is_blank(record.id):
            raise RecordValidationError(ID_REQUIRED_TO_DELETE)
        await self._write(
            "delete", lambda: self._store.delete_document(self._collection, record.id)
        )

    async def _write(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        self._loading.publish(True)
        self._error.publish(None)
        try:
            result = await call()
            self._cache.invalidate()
            log.info(f"[{operation.upper()}] Done, cache invalidated", extra={"operation": operation})
            return result
        except Exception as exc:
            self._report_failure(operation, exc)
            raise
        finally:
            self._loading.publish(False)

    def _report_failure(self, operation: str, error: BaseException) -> None:
        message = describe_failure(error)
        log.error(
            f"[{operation.upper()} FAILED] {message}",
            exc_info=error,
            extra={"operation": operation, "code": getattr(error, "code", None)},
        )
        self._error.publish(message)


__all__ = [
    "EMAIL_PATTERN",
    "RecordAccessService",
    "validate_record",
]
