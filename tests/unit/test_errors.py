from __future__ import annotations

import pytest

from client_records.errors import (
    NOT_FOUND_MESSAGE,
    PERMISSION_DENIED_MESSAGE,
    UNAVAILABLE_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    RecordValidationError,
    describe_failure,
)
from client_records.infrastructure.store import ErrorCode, StoreError


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (ErrorCode.PERMISSION_DENIED, PERMISSION_DENIED_MESSAGE),
        (ErrorCode.UNAVAILABLE, UNAVAILABLE_MESSAGE),
        (ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE),
        ("unavailable", UNAVAILABLE_MESSAGE),
    ],
)
def test_classified_failures_get_fixed_messages(code, expected):
    assert describe_failure(StoreError("raw backend text", code=code)) == expected


def test_unclassified_failure_passes_its_message_through():
    assert describe_failure(StoreError("quota exceeded", code="resource-exhausted")) == (
        "quota exceeded"
    )
    assert describe_failure(RuntimeError("socket closed")) == "socket closed"


def test_failure_without_message_falls_back_to_generic_text():
    assert describe_failure(StoreError()) == UNKNOWN_ERROR_MESSAGE
    assert describe_failure(RuntimeError()) == UNKNOWN_ERROR_MESSAGE


def test_store_error_normalises_enum_codes():
    error = StoreError("x", ErrorCode.NOT_FOUND)

    assert error.code == "not-found"
    assert "not-found" in repr(error)


def test_validation_error_is_a_value_error():
    assert issubclass(RecordValidationError, ValueError)
