from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from client_records.domain.aggregates import filter_records, matches_term, total_balance_of
from client_records.domain.models import AppConfiguration, Record
from client_records.infrastructure.store import DocumentSnapshot

EXPECTED_TOTAL = 2500


def _records(*balances):
    return [Record(id=str(i), name="N", surname="S", balance=b) for i, b in enumerate(balances)]


def test_record_accepts_store_field_names():
    record = Record.model_validate(
        {"nombre": "Juan", "apellido": "Perez", "saldo": 10, "fechaCreacion": "2024-01-02T03:04:05Z"}
    )

    assert record.name == "Juan"
    assert record.surname == "Perez"
    assert record.balance == 10
    assert record.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_record_is_immutable():
    record = Record(name="Juan")

    with pytest.raises(ValidationError):
        record.name = "Pedro"


def test_to_document_uses_store_names_and_drops_id_and_unset_fields():
    record = Record(id="abc", name="Juan", surname="Perez", balance=5.0)

    assert record.to_document() == {"nombre": "Juan", "apellido": "Perez", "saldo": 5.0}


def test_from_snapshot_attaches_document_id():
    snapshot = DocumentSnapshot(id="c9", fields={"nombre": "Ana", "email": "ana@example.com"})

    record = Record.from_snapshot(snapshot)

    assert record.id == "c9"
    assert record.name == "Ana"
    assert record.email == "ana@example.com"
    assert record.balance is None


def test_configuration_defaults_to_registration_closed():
    assert AppConfiguration().allow_registration is False
    assert AppConfiguration.model_validate({"permitirRegistro": True}).to_document() == {
        "permitirRegistro": True
    }


def test_total_balance_sums_all_records():
    assert total_balance_of(_records(1000, 2000, -500)) == EXPECTED_TOTAL


@pytest.mark.parametrize("records", [None, []])
def test_total_balance_of_nothing_is_zero(records):
    assert total_balance_of(records) == 0


def test_total_balance_counts_missing_balance_as_zero():
    assert total_balance_of(_records(100, None, 50)) == 150


def test_matches_term_is_case_insensitive_over_name_surname_and_email():
    record = Record(name="Juan", surname="Perez", email="jp@correo.es")

    assert matches_term(record, "JUAN")
    assert matches_term(record, "pere")
    assert matches_term(record, "CORREO")
    assert not matches_term(record, "maria")


def test_matches_term_tolerates_missing_fields():
    assert not matches_term(Record(name="Juan"), "perez")


def test_filter_records_keeps_order():
    records = [
        Record(id="1", name="Juan", surname="Lopez"),
        Record(id="2", name="Maria", surname="Juarez"),
        Record(id="3", name="Ana", surname="Garcia"),
    ]

    assert [r.id for r in filter_records(records, "ju")] == ["1", "2"]
