"""Tests for row/record/entity mappers."""

from datetime import date, datetime, UTC
from decimal import Decimal

from ledgerdesk.domain.entities import MovementLine, Transaction
from ledgerdesk.remote.mappers import (
    account_from_record,
    account_group_record,
    account_record,
    amount_to_json,
    cost_center_record,
    iso_day,
    movement_payload,
    parse_day,
    parse_timestamp,
    transaction_from_record,
    transaction_record,
    transaction_to_record,
)


class TestAccountMapper:
    """Tests for Account mapping."""

    def test_account_record(self):
        record = account_record(
            {
                "id_cuenta": "12",
                "codigo": "1.1.02",
                "nombre": "Banco",
                "id_grupo_cuenta": "3",
                "tipo_cuenta": "ACTIVO",
                "moneda": "BOB",
                "id_version": 4,
                "created_at": "2026-01-02T10:00:00Z",
            }
        )

        assert record["id"] == 12
        assert record["group_id"] == 3
        assert record["register_status"] == "Activo"
        assert record["version"] == 4
        assert record["metadata"] is None

    def test_account_from_record(self):
        account = account_from_record({"id": 12, "code": "1.1.02", "created_at": "2026-01-02T10:00:00Z"})

        assert account.code == "1.1.02"
        assert account.name == ""
        assert account.created_at == datetime(2026, 1, 2, 10, 0, tzinfo=UTC)


def test_account_group_record_accepts_plain_id():
    record = account_group_record({"id": 5, "codigo": "1", "id_grupo_padre": -1})

    assert record["id"] == 5
    assert record["parent_id"] is None


def test_cost_center_record_defaults():
    record = cost_center_record({"id_centro_costo": 2})

    assert record == {
        "id": 2,
        "code": "",
        "name": "",
        "register_status": "Activo",
        "metadata": None,
        "version": None,
        "created_at": None,
        "updated_at": None,
    }


class TestTransactionMapper:
    """Tests for Transaction mapping."""

    def test_transaction_record_computes_totals(self):
        record = transaction_record(
            {
                "id_transaccion": 1,
                "fecha": "2026-01-20T04:00:00.000Z",
                "movimientos": [
                    {"id_movimiento": 1, "id_cuenta": 11, "debe": "60.25", "haber": None},
                    {"id_movimiento": 2, "id_cuenta": 12, "debe": "39.75", "haber": 0},
                    {"id_movimiento": 3, "id_cuenta": 40, "debe": 0, "haber": "100.00"},
                ],
            }
        )

        assert record["date"] == "2026-01-20"
        assert record["total_debit"] == "100.00"
        assert record["total_credit"] == "100.00"
        assert record["lines"][0]["credit"] == "0"

    def test_transaction_without_movements(self):
        txn = transaction_from_record(transaction_record({"id_transaccion": 1, "movimientos": None}))

        assert txn.lines == ()
        assert txn.total_debit == Decimal("0")

    def test_entity_record_entity(self):
        txn = Transaction(
            id=7,
            date=date(2026, 1, 20),
            transaction_type="AJUSTE",
            created_at=datetime(2026, 1, 20, 12, 0, tzinfo=UTC),
            lines=(
                MovementLine(account_id=11, debit=Decimal("5"), id=1, account_code="1.1.01"),
                MovementLine(account_id=40, credit=Decimal("5"), id=2),
            ),
            total_debit=Decimal("5"),
            total_credit=Decimal("5"),
        )

        again = transaction_from_record(transaction_to_record(txn))

        assert again.date == txn.date
        assert again.created_at == txn.created_at
        assert again.lines[0].account_code == "1.1.01"
        assert again.total_credit == Decimal("5")


def test_parse_helpers():
    assert parse_day("2026-01-20T04:00:00.000Z") == date(2026, 1, 20)
    assert parse_day("") is None
    assert parse_day("not a date") is None
    assert parse_timestamp(None) is None
    assert iso_day(datetime(2026, 1, 20, 23, 0)) == "2026-01-20"
    assert iso_day(None) == ""


def test_amount_to_json():
    assert amount_to_json(Decimal("100.00")) == 100
    assert isinstance(amount_to_json(Decimal("100.00")), int)
    assert amount_to_json(Decimal("0.5")) == 0.5


def test_movement_payload():
    line = MovementLine(account_id=11, debit=Decimal("3"), description="x")

    assert movement_payload(line) == {"id_cuenta": 11, "debe": 3, "haber": 0, "descripcion": "x"}
