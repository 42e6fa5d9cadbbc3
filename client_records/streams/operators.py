"""
Small helpers over async-iterable streams.
"""

from __future__ import annotations

from contextlib import aclosing
from typing import Any, AsyncIterable, Callable, List, Optional, TypeVar

from client_records.streams.shared import Emit, SharedStream

T = TypeVar("T")
R = TypeVar("R")

_MISSING: Any = object()


def map_shared(
    source: AsyncIterable[T],
    transform: Callable[[T], R],
    name: Optional[str] = None,
    refcount: bool = False,
) -> SharedStream[R]:
    """
    Shared stream of ``transform(item)`` for every item of ``source``.

    One subscription to ``source`` is opened no matter how many consumers
    subscribe to the result, and the transform runs once per source item.
    """

    async def producer(emit: Emit) -> None:
        async for item in source:
            emit(transform(item))

    label = name or f"map({getattr(source, 'name', 'source')})"
    return SharedStream(producer, name=label, refcount=refcount)


async def first(source: AsyncIterable[T], default: Any = _MISSING) -> T:
    """
    First item of ``source``; the subscription is closed afterwards.

    Raises LookupError when the stream completes empty and no default is given.
    """
    async with aclosing(source.__aiter__()) as iterator:
        async for item in iterator:
            return item
    if default is _MISSING:
        raise LookupError("stream completed without emitting")
    return default


async def take(source: AsyncIterable[T], count: int) -> List[T]:
    """Up to ``count`` leading items; fewer if the stream completes first."""
    items: List[T] = []
    if count <= 0:
        return items
    async with aclosing(source.__aiter__()) as iterator:
        async for item in iterator:
            items.append(item)
            if len(items) >= count:
                break
    return items


__all__ = ["first", "map_shared", "take"]
