"""
Utilities package for the client record access layer.

Exports shared helpers for logging and profiling.
Keep this package lightweight and free of domain-specific logic.
"""

from client_records.utils.logging import configure_logging, get_logger
from client_records.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
