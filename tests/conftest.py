"""
Pytest configuration for the client record access layer.

Provides fixtures for:
- Settings with test-friendly values
- A controllable monotonic clock (cache TTL) and a recording sleep (retry backoff)
- An in-memory store seeded with a few clients, and the service built on it
"""

from __future__ import annotations

import pytest

from client_records.config import Settings
from client_records.infrastructure.memory_store import InMemoryDocumentStore
from client_records.retry import RetryPolicy
from client_records.services.records import RecordAccessService
from tests.helpers import FIXED_NOW, SAMPLE_CLIENTS, FakeClock, RecordingSleep


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        clients_collection="clientes",
        clients_order_by="nombre",
        cache_ttl_seconds=300,
        retry_max_attempts=3,
        retry_base_delay_seconds=1.0,
        log_level="DEBUG",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def store(test_settings: Settings) -> InMemoryDocumentStore:
    memory_store = InMemoryDocumentStore()
    memory_store.seed(test_settings.clients_collection, SAMPLE_CLIENTS)
    return memory_store


@pytest.fixture()
def service(
    store: InMemoryDocumentStore,
    test_settings: Settings,
    clock: FakeClock,
    sleeper: RecordingSleep,
) -> RecordAccessService:
    return RecordAccessService(
        store,
        test_settings,
        clock=clock,
        retry_policy=RetryPolicy(max_retries=3, base_delay=1.0, sleep=sleeper),
        now=lambda: FIXED_NOW,
    )
