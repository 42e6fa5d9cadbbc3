"""
Client records - cached, retrying access to a remote client collection.

This package mediates between UI consumers and a live document store:

- A single shared, replaying subscription per cache window (5 minutes by default)
- Exponential-backoff retries for subscriptions
- Shared loading/error state with a fixed user-facing error taxonomy
- Derived streams (total balance, search) computed from the cached list
- A benchmark suite measuring cache effectiveness
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from client_records.cache import CacheEntry, CacheStats, RecordCache
from client_records.config import Settings, get_settings
from client_records.domain.models import AppConfiguration, Record
from client_records.errors import RecordValidationError, describe_failure
from client_records.infrastructure.memory_store import InMemoryDocumentStore
from client_records.infrastructure.store import DocumentSnapshot, DocumentStore, ErrorCode, StoreError
from client_records.retry import RetryPolicy
from client_records.services.configuration import ConfigurationService
from client_records.services.records import RecordAccessService
from client_records.streams import ReadOnlySlot, SharedStream, StateSlot, first, map_shared, take
from client_records.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "AppConfiguration",
    "Record",
    # Store contract
    "DocumentSnapshot",
    "DocumentStore",
    "ErrorCode",
    "InMemoryDocumentStore",
    "StoreError",
    # Access layer
    "CacheEntry",
    "CacheStats",
    "ConfigurationService",
    "RecordAccessService",
    "RecordCache",
    "RecordValidationError",
    "RetryPolicy",
    "describe_failure",
    # Streams
    "ReadOnlySlot",
    "SharedStream",
    "StateSlot",
    "first",
    "map_shared",
    "take",
    # Logging
    "configure_logging",
    "get_logger",
]
