"""
Services package for the client record access layer.

Consumers talk to these classes only; the store is never exposed directly.
"""

from client_records.services.configuration import ConfigurationService
from client_records.services.records import RecordAccessService, validate_record

__all__ = [
    "ConfigurationService",
    "RecordAccessService",
    "validate_record",
]
