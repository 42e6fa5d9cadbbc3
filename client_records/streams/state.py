"""
Single-slot broadcast values.

A `StateSlot` holds one current value. Subscribers receive the current value
immediately and then every published change, in order. Only the owner holds
the slot itself; consumers get a `ReadOnlySlot` view, which cannot publish.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Generic, Set, TypeVar

T = TypeVar("T")

_END = object()


class StateSlot(Generic[T]):
    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: Set[asyncio.Queue] = set()
        self._closed = False

    @property
    def value(self) -> T:
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, value: T) -> None:
        """Replace the current value and broadcast it. Ignored once closed."""
        if self._closed:
            return
        self._value = value
        for queue in self._subscribers:
            queue.put_nowait(value)

    def close(self) -> None:
        """Complete every subscriber; no further values are emitted."""
        if self._closed:
            return
        self._closed = True
        for queue in self._subscribers:
            queue.put_nowait(_END)

    async def subscribe(self) -> AsyncIterator[T]:
        if self._closed:
            return
        queue: asyncio.Queue = asyncio.Queue()
        queue.put_nowait(self._value)
        self._subscribers.add(queue)
        try:
            while True:
                item = await queue.get()
                if item is _END:
                    return
                yield item
        finally:
            self._subscribers.discard(queue)

    def __aiter__(self) -> AsyncIterator[T]:
        return self.subscribe()

    def as_readonly(self) -> "ReadOnlySlot[T]":
        return ReadOnlySlot(self)


class ReadOnlySlot(Generic[T]):
    """Consumer-side view of a `StateSlot`."""

    __slots__ = ("_slot",)

    def __init__(self, slot: StateSlot[T]) -> None:
        self._slot = slot

    @property
    def value(self) -> T:
        return self._slot.value

    @property
    def closed(self) -> bool:
        return self._slot.closed

    def __aiter__(self) -> AsyncIterator[T]:
        return self._slot.subscribe()

    def __repr__(self) -> str:
        return f"<ReadOnlySlot value={self._slot.value!r}>"


__all__ = ["ReadOnlySlot", "StateSlot"]
