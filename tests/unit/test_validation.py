from __future__ import annotations

import pytest

from client_records.domain.models import Record
from client_records.errors import RecordValidationError
from client_records.services.records import (
    EMAIL_PATTERN,
    INVALID_EMAIL,
    NAME_REQUIRED,
    NEGATIVE_BALANCE,
    SURNAME_REQUIRED,
    validate_record,
)


@pytest.mark.parametrize(
    ("fields", "message"),
    [
        ({"surname": "Perez"}, NAME_REQUIRED),
        ({"name": "   ", "surname": "Perez"}, NAME_REQUIRED),
        ({"name": "Juan"}, SURNAME_REQUIRED),
        ({"name": "Juan", "surname": ""}, SURNAME_REQUIRED),
        ({"name": "Juan", "surname": "Perez", "email": "not-an-email"}, INVALID_EMAIL),
        ({"name": "Juan", "surname": "Perez", "email": "a b@c.d"}, INVALID_EMAIL),
        ({"name": "Juan", "surname": "Perez", "email": "juan@example.com\n"}, INVALID_EMAIL),
        ({"name": "Juan", "surname": "Perez", "balance": -0.01}, NEGATIVE_BALANCE),
    ],
)
def test_invalid_records_are_rejected(fields, message):
    with pytest.raises(RecordValidationError, match=message):
        validate_record(Record(**fields))


def test_rules_are_checked_in_order():
    record = Record(name="", surname="", email="bad", balance=-1)

    with pytest.raises(RecordValidationError) as excinfo:
        validate_record(record)

    assert str(excinfo.value) == NAME_REQUIRED


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "Juan", "surname": "Perez"},
        {"name": "Juan", "surname": "Perez", "email": "juan@example.com", "balance": 0},
        {"name": "Juan", "surname": "Perez", "email": "", "balance": 12.5},
    ],
)
def test_valid_records_pass(fields):
    validate_record(Record(**fields))


@pytest.mark.parametrize(
    ("email", "valid"),
    [
        ("a@b.co", True),
        ("first.last@sub.domain.org", True),
        ("missing-at.example.com", False),
        ("no@dot", False),
        ("two@@example.com", False),
        ("a@b.co\n", False),
    ],
)
def test_email_pattern(email, valid):
    assert bool(EMAIL_PATTERN.match(email)) is valid
