"""
Error taxonomy of the record access layer.

Two separate families:

- backend failures (`StoreError`), translated into a fixed set of user-facing
  messages by `describe_failure` and published on the shared error slot;
- local validation failures (`RecordValidationError`), raised straight to the
  caller and never retried nor published.
"""

from __future__ import annotations

from typing import Dict

from client_records.infrastructure.store import ErrorCode, StoreError

PERMISSION_DENIED_MESSAGE = "insufficient permissions for this operation"
UNAVAILABLE_MESSAGE = "service temporarily unavailable, retry later"
NOT_FOUND_MESSAGE = "requested document does not exist"
UNKNOWN_ERROR_MESSAGE = "unknown error"

_MESSAGES: Dict[str, str] = {
    ErrorCode.PERMISSION_DENIED.value: PERMISSION_DENIED_MESSAGE,
    ErrorCode.UNAVAILABLE.value: UNAVAILABLE_MESSAGE,
    ErrorCode.NOT_FOUND.value: NOT_FOUND_MESSAGE,
}


class RecordValidationError(ValueError):
    """A request was rejected locally, before reaching the store."""


def describe_failure(error: BaseException) -> str:
    """
    Map a backend failure to the message shown to users.

    Classified store failures get their fixed message; anything else passes
    its own message through, falling back to a generic one.
    """
    code = error.code if isinstance(error, StoreError) else None
    if code in _MESSAGES:
        return _MESSAGES[code]
    return str(error) or UNKNOWN_ERROR_MESSAGE


__all__ = [
    "NOT_FOUND_MESSAGE",
    "PERMISSION_DENIED_MESSAGE",
    "RecordValidationError",
    "UNAVAILABLE_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "describe_failure",
]
