from __future__ import annotations

import pytest

from client_records.domain.models import AppConfiguration
from client_records.infrastructure.memory_store import InMemoryDocumentStore
from client_records.infrastructure.store import ErrorCode
from client_records.retry import RetryPolicy
from client_records.services.configuration import ConfigurationService
from client_records.streams.operators import first
from tests.helpers import Recorder, drain

pytestmark = pytest.mark.integration


@pytest.fixture()
def configuration_service(store: InMemoryDocumentStore, test_settings, sleeper):
    return ConfigurationService(
        store, test_settings, retry_policy=RetryPolicy(max_retries=3, sleep=sleeper)
    )


@pytest.mark.asyncio
async def test_missing_document_reads_as_defaults(configuration_service):
    configuration = await first(configuration_service.watch())

    assert configuration == AppConfiguration()
    assert await configuration_service.registration_allowed() is False


@pytest.mark.asyncio
async def test_update_is_stored_and_observed(configuration_service, store):
    recorder = Recorder(configuration_service.watch())
    await drain()

    await configuration_service.update(AppConfiguration(allow_registration=True))
    await drain()

    assert store.documents("configuracion") == {"1": {"permitirRegistro": True}}
    assert [c.allow_registration for c in recorder.values] == [False, True]
    assert await configuration_service.registration_allowed() is True
    await recorder.stop()


@pytest.mark.asyncio
async def test_transient_read_failures_are_retried(configuration_service, store, sleeper):
    store.seed("configuracion", [{"id": "1", "permitirRegistro": True}])
    store.fail_next("watch_document", ErrorCode.UNAVAILABLE, times=2)

    assert await configuration_service.registration_allowed() is True
    assert sleeper.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_unreadable_configuration_denies_registration(configuration_service, store):
    store.seed("configuracion", [{"id": "1", "permitirRegistro": True}])
    store.fail_next("watch_document", ErrorCode.PERMISSION_DENIED, times=4)

    assert await configuration_service.registration_allowed() is False
    assert store.calls["watch_document"] == 4
