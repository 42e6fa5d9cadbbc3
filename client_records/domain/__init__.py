"""
Domain package for the client record access layer.

Exports the record models and the pure computations over them.
Keep this package focused on data definitions; no I/O belongs here.
"""

from client_records.domain.aggregates import filter_records, matches_term, total_balance_of
from client_records.domain.models import AppConfiguration, Record

__all__ = [
    "AppConfiguration",
    "Record",
    "filter_records",
    "matches_term",
    "total_balance_of",
]
