"""
Streams package for the client record access layer.

Exports the multicast stream, the single-slot broadcast values, and helpers
to consume them.
"""

from client_records.streams.operators import first, map_shared, take
from client_records.streams.shared import SharedStream
from client_records.streams.state import ReadOnlySlot, StateSlot

__all__ = [
    "ReadOnlySlot",
    "SharedStream",
    "StateSlot",
    "first",
    "map_shared",
    "take",
]
