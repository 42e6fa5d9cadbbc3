"""
Test doubles shared by the unit and integration suites.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, AsyncIterable, List

FIXED_NOW = datetime(2024, 5, 17, 12, 30, tzinfo=timezone.utc)

SAMPLE_CLIENTS = [
    {"id": "c1", "nombre": "Juan", "apellido": "Perez", "email": "juan@example.com", "saldo": 1000},
    {"id": "c2", "nombre": "Maria", "apellido": "Lopez", "email": "maria@correo.es", "saldo": 2000},
    {"id": "c3", "nombre": "Ana", "apellido": "Garcia", "saldo": -500},
]


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Stands in for asyncio.sleep: records the delay and only yields control."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class Recorder:
    """Collects every value of an async iterable on a background task."""

    def __init__(self, source: AsyncIterable[Any]) -> None:
        self.values: List[Any] = []
        self.finished = False
        self._task = asyncio.get_running_loop().create_task(self._consume(source))

    async def _consume(self, source: AsyncIterable[Any]) -> None:
        async for value in source:
            self.values.append(value)
        self.finished = True

    async def stop(self) -> None:
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass


async def drain(rounds: int = 20) -> None:
    """Let pending tasks run until the loop is quiet."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class GatedSleep:
    """Backoff timer that stays asleep until the test opens the gate."""

    def __init__(self) -> None:
        self.delays: List[float] = []
        self.entered = asyncio.Event()
        self.gate = asyncio.Event()

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.entered.set()
        await self.gate.wait()
