"""
Application configuration stored as a single document.

Holds the runtime "allow registration" toggle that gates the registration
route. Reads share the record service's retry policy; failures degrade to
the default configuration instead of breaking the guard.
"""

from __future__ import annotations

from typing import Optional

from client_records.config import Settings, get_settings
from client_records.domain.models import AppConfiguration
from client_records.infrastructure.store import DocumentStore
from client_records.retry import RetryPolicy
from client_records.streams.operators import first
from client_records.streams.shared import Emit, SharedStream
from client_records.utils.logging import get_logger

log = get_logger(__name__)


class ConfigurationService:
    def __init__(
        self,
        store: DocumentStore,
        settings: Optional[Settings] = None,
        *,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        settings = settings or get_settings()
        self._store = store
        self._collection = settings.configuration_collection
        self._document = settings.configuration_document
        self._retry = retry_policy or RetryPolicy(
            max_retries=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay_seconds,
        )

    def watch(self) -> SharedStream[AppConfiguration]:
        """Live configuration; a missing document reads as the defaults."""

        async def produce(emit: Emit) -> None:
            async def attempt() -> None:
                async for snapshot in self._store.watch_document(self._collection, self._document):
                    if snapshot.exists:
                        emit(AppConfiguration.model_validate(dict(snapshot.fields)))
                    else:
                        emit(AppConfiguration())

            await self._retry.run(attempt, label="configuration")

        return SharedStream(produce, name="configuration", refcount=True)

    async def update(self, configuration: AppConfiguration) -> None:
        await self._store.set_document(
            self._collection, self._document, configuration.to_document()
        )
        log.info(
            "[CONFIGURATION] Updated",
            extra={"allow_registration": configuration.allow_registration},
        )

    async def registration_allowed(self) -> bool:
        """
        Whether the registration route may be entered.

        Unreadable configuration denies registration.
        """
        try:
            configuration = await first(self.watch(), default=AppConfiguration())
        except Exception:  # noqa: BLE001 - the guard must answer, not fail
            log.exception("[CONFIGURATION] Read failed, registration denied")
            return False
        return configuration.allow_registration


__all__ = ["ConfigurationService"]
