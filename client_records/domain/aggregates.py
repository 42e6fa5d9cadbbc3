"""
Pure reductions and filters over record collections.

These are the computations behind the derived streams of the record service;
keeping them free of any stream plumbing makes them trivially testable.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from client_records.domain.models import Record


def total_balance_of(records: Optional[Iterable[Record]]) -> float:
    """
    Sum of all balances, counting an absent balance as 0.

    ``None`` or an empty collection sums to 0.
    """
    if not records:
        return 0
    return sum(record.balance or 0 for record in records)


def matches_term(record: Record, term: str) -> bool:
    """Case-insensitive substring match over name, surname and email."""
    needle = term.lower()
    return any(
        value is not None and needle in value.lower()
        for value in (record.name, record.surname, record.email)
    )


def filter_records(records: Iterable[Record], term: str) -> List[Record]:
    return [record for record in records if matches_term(record, term)]


__all__ = ["filter_records", "matches_term", "total_balance_of"]
