"""
Multicast stream with replay of the latest value.

A `SharedStream` runs one producer task and fans every item it emits out to
all current subscribers. Subscribers joining late first receive the most
recent item. Completion and failure of the producer are forwarded to every
subscriber, including ones that join afterwards.

Unsubscribing releases only the subscriber's own queue; the producer keeps
running (even with no subscribers left) until it finishes or `close()` is
called. This is what lets a cached stream keep a single live upstream
subscription shared by every consumer. Streams built with ``refcount=True``
instead stop their producer once the last subscriber leaves.

Usage:
    async def producer(emit):
        async for batch in store.watch_collection("clientes"):
            emit(batch)

    stream = SharedStream(producer, name="clientes")
    async for batch in stream:
        ...
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Optional, Set, TypeVar

from client_records.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

Emit = Callable[[Any], None]
Producer = Callable[[Emit], Awaitable[None]]

_MISSING = object()
_END = object()


class _Failure:
    __slots__ = ("error",)

    def __init__(self, error: BaseException) -> None:
        self.error = error


class SharedStream(Generic[T]):
    """
    Hot, replaying stream backed by a single producer task.

    Parameters
    ----------
    producer : Callable[[emit], Awaitable[None]]
        Coroutine function pushing items through ``emit``. Returning completes
        the stream; raising fails it.
    name : str
        Label used for the task name and log records.
    refcount : bool
        Stop the producer as soon as the last subscriber leaves. The stream is
        then done; late subscribers only get the replayed value.
    """

    def __init__(self, producer: Producer, name: str = "stream", refcount: bool = False) -> None:
        self.name = name
        self._producer = producer
        self._close_when_idle = refcount
        self._subscribers: Set[asyncio.Queue] = set()
        self._latest: Any = _MISSING
        self._outcome: Any = None
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def failed(cls, error: BaseException, name: str = "failed") -> "SharedStream[Any]":
        """A stream whose subscribers immediately receive ``error``."""

        async def producer(emit: Emit) -> None:
            raise error

        return cls(producer, name=name)

    @property
    def started(self) -> bool:
        return self._task is not None or self._outcome is not None

    @property
    def done(self) -> bool:
        return self._outcome is not None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def latest(self) -> Optional[T]:
        return None if self._latest is _MISSING else self._latest

    def start(self) -> None:
        """Start the producer task if it is not running yet. Needs a running loop."""
        if self.started:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"shared-stream:{self.name}"
        )

    def close(self) -> None:
        """Stop the producer and complete every subscriber."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._finish(_END)

    def close_when_idle(self) -> None:
        """Close now if nobody is subscribed, otherwise when the last subscriber leaves."""
        self._close_when_idle = True
        if not self._subscribers:
            self.close()

    def _emit(self, item: Any) -> None:
        if self._outcome is not None:
            return
        self._latest = item
        for queue in self._subscribers:
            queue.put_nowait(item)

    def _finish(self, outcome: Any) -> None:
        if self._outcome is not None:
            return
        self._outcome = outcome
        for queue in self._subscribers:
            queue.put_nowait(outcome)

    async def _run(self) -> None:
        try:
            await self._producer(self._emit)
        except asyncio.CancelledError:
            self._finish(_END)
            raise
        except Exception as exc:  # noqa: BLE001 - forwarded to subscribers
            log.debug("Shared stream failed", extra={"stream": self.name, "error": repr(exc)})
            self._finish(_Failure(exc))
        else:
            self._finish(_END)

    async def _subscribe(self) -> AsyncIterator[T]:
        queue: asyncio.Queue = asyncio.Queue()
        if self._latest is not _MISSING:
            queue.put_nowait(self._latest)
        if self._outcome is not None:
            queue.put_nowait(self._outcome)
        else:
            self._subscribers.add(queue)
            self.start()
        try:
            while True:
                item = await queue.get()
                if item is _END:
                    return
                if isinstance(item, _Failure):
                    raise item.error
                yield item
        finally:
            self._subscribers.discard(queue)
            if self._close_when_idle and not self._subscribers:
                self.close()

    def __aiter__(self) -> AsyncIterator[T]:
        return self._subscribe()

    def __repr__(self) -> str:
        state = "done" if self.done else ("running" if self.started else "idle")
        return f"<SharedStream {self.name} {state} subscribers={self.subscriber_count}>"


__all__ = ["Emit", "Producer", "SharedStream"]
