"""Tests for the transaction composer."""

from datetime import date
from decimal import Decimal

from ledgerdesk.domain.composer import ComposerState, TransactionComposer
from ledgerdesk.domain.errors import OperationError
from ledgerdesk.domain.ledger import MSG_MIN_LINES, MSG_UNIFORM_CREDITS, LedgerValidator
from ledgerdesk.domain.transaction import TransactionRepository

from backend_fakes import page

LIST = "/api/contabilidad/transacciones/listar"
BATCH = "/api/contabilidad/transacciones/batch/crear"
SALE = "/api/contabilidad/transacciones/venta/registrar"


def batch_ok(transaction_id, movement_ids, record=None):
    data = {"id_transaccion": transaction_id, "movimientos_ids": movement_ids}
    if record is not None:
        data["transaccion"] = record
    return {"ok": True, "rows": [{"status": "ok", "data": {"results": [{"status": "ok", "data": data}]}}]}


def fill_balanced(composer, transaction_type="AJUSTE"):
    composer.set_header(transaction_type=transaction_type, description="Arqueo", date=date(2026, 1, 20))
    composer.update_line(0, account_id=11, debit="100")
    composer.update_line(1, account_id=40, credit="100", description="Ingreso")


def test_new_composer_starts_with_empty_draft(composer):
    assert composer.state == ComposerState.DRAFT
    assert composer.draft.date == date.today()
    assert len(composer.draft.lines) == 2
    assert composer.draft.quantity == 1


def test_line_editing(composer):
    composer.add_line(12, 0, 5)
    composer.update_line(2, credit=7)
    assert composer.draft.lines[2].credit == 7

    composer.remove_line(0)
    assert len(composer.draft.lines) == 2


def test_commit_builds_optimistic_transaction(backend, cache, session, composer):
    backend.respond(BATCH, batch_ok(100, [501, 502]))
    fill_balanced(composer)

    outcome = composer.submit()

    assert outcome.state == ComposerState.COMMITTED
    assert outcome.ok
    txn = outcome.transaction
    assert txn.id == 100
    assert txn.date == date(2026, 1, 20)
    assert txn.total_debit == Decimal("100")
    assert [line.id for line in txn.lines] == [501, 502]
    assert [line.account_code for line in txn.lines] == ["1.1.01", "4.1.01"]
    assert txn.lines[1].account_name == "Ventas"
    assert txn.created_at is not None
    assert "100" in cache.read_all(session.session_id, "transactions")


def test_commit_resets_draft_and_rereads_first_page(backend, composer):
    backend.respond(BATCH, batch_ok(100, [501, 502]))
    fill_balanced(composer)

    composer.submit()

    assert composer.draft.transaction_type == ""
    assert len(composer.draft.lines) == 2
    assert backend.last_payload(LIST)["p_offset"] == 0
    # Not yet on the server page, so the optimistic record is prepended
    assert [t.id for t in composer.transactions.rows] == [100]


def test_server_record_wins_over_local_fields(backend, composer):
    created = "2026-01-20T15:30:00Z"
    backend.respond(BATCH, batch_ok(100, [501, 502], record={"id_transaccion": 100, "created_at": created}))
    fill_balanced(composer)

    outcome = composer.submit()

    assert outcome.transaction.created_at.isoformat().startswith("2026-01-20T15:30:00")


def test_rejected_draft_is_preserved(backend, composer):
    composer.set_header(transaction_type="AJUSTE")
    composer.update_line(0, account_id=11, debit="100")

    outcome = composer.submit()

    assert outcome.state == ComposerState.REJECTED
    assert outcome.message == MSG_MIN_LINES
    assert composer.draft.lines[0].account_id == 11
    assert backend.payloads(BATCH) == []


def test_missing_type_is_rejected_before_validation(backend, composer):
    composer.update_line(0, account_id=11, debit="100")
    composer.update_line(1, account_id=40, credit="100")

    outcome = composer.submit()

    assert outcome.state == ComposerState.REJECTED
    assert outcome.message == "Transaction type is required"


def test_uniform_credits_rejected_unless_allowed(backend, transaction_repository, sample_accounts):
    backend.respond(BATCH, batch_ok(100, [1, 2, 3]))

    for validator, expected in (
        (LedgerValidator(), ComposerState.REJECTED),
        (LedgerValidator(reject_uniform_credits=False), ComposerState.COMMITTED),
    ):
        composer = TransactionComposer(transaction_repository, sample_accounts, validator=validator)
        composer.set_header(transaction_type="AJUSTE")
        composer.update_line(0, account_id=11, credit=50)
        composer.update_line(1, account_id=12, credit=50)
        composer.add_line(40, debit=100)

        outcome = composer.submit()

        assert outcome.state == expected
        if expected == ComposerState.REJECTED:
            assert outcome.message == MSG_UNIFORM_CREDITS


def test_missing_session_is_rejected_without_network(backend, cache, anonymous_session, sample_accounts):
    composer = TransactionComposer(TransactionRepository(backend, cache, anonymous_session), sample_accounts)
    fill_balanced(composer)
    calls_before = len(backend.calls)

    outcome = composer.submit()

    assert outcome.state == ComposerState.REJECTED
    assert "missing session id" in outcome.message
    assert len(backend.calls) == calls_before


def test_backend_failure_surfaces_message_verbatim(backend, cache, session, composer):
    backend.respond(BATCH, {"ok": False, "message": "Periodo contable cerrado"})
    fill_balanced(composer)

    outcome = composer.submit()

    assert outcome.state == ComposerState.FAILED
    assert outcome.message == "Periodo contable cerrado"
    assert composer.draft.description == "Arqueo"
    assert cache.read_all(session.session_id, "transactions") == {}
    assert backend.payloads(LIST) == []


def test_sale_goes_through_sale_procedure(backend, composer):
    backend.respond(SALE, {"ok": True, "rows": [{"status": "ok", "data": {"id_transaccion": 200, "movimientos_ids": [601, 602]}}]})
    fill_balanced(composer, transaction_type="VENTA")
    composer.set_header(product_id=9, quantity="2")

    outcome = composer.submit()

    assert outcome.state == ComposerState.COMMITTED
    assert outcome.transaction.id == 200
    assert outcome.transaction.is_sale
    assert backend.payloads(BATCH) == []
    assert backend.last_payload(SALE)["p_id_producto"] == 9


def test_sale_without_product_is_rejected(backend, composer):
    fill_balanced(composer, transaction_type="VENTA")

    outcome = composer.submit()

    assert outcome.state == ComposerState.REJECTED
    assert backend.payloads(SALE) == []


def test_failed_reread_does_not_undo_commit(backend, composer):
    backend.respond(BATCH, batch_ok(100, [501, 502]))
    backend.respond(LIST, OperationError("Could not reach backend"))
    fill_balanced(composer)

    outcome = composer.submit()

    assert outcome.state == ComposerState.COMMITTED
    assert composer.transactions.error == "Could not reach backend"
    assert composer.transactions.find(100) is not None


def test_reread_merges_with_server_page(backend, composer):
    backend.respond(BATCH, batch_ok(100, [501, 502]))
    backend.respond(LIST, page({"id_transaccion": 99, "fecha": "2026-01-19", "tipo_transaccion": "AJUSTE"}))
    fill_balanced(composer)

    composer.submit()

    assert [t.id for t in composer.transactions.rows] == [100, 99]


def test_load_copies_transaction_into_draft(backend, composer):
    backend.respond(BATCH, batch_ok(100, [501, 502]))
    fill_balanced(composer)
    txn = composer.submit().transaction

    draft = composer.load(txn)

    assert draft.transaction_type == "AJUSTE"
    assert [(line.account_id, line.debit, line.credit) for line in draft.lines] == [
        (11, Decimal("100"), Decimal("0")),
        (40, Decimal("0"), Decimal("100")),
    ]


def test_batch_without_transaction_id_fails(backend, cache, session, composer):
    backend.respond(BATCH, batch_ok(None, []))
    fill_balanced(composer)

    outcome = composer.submit()

    assert outcome.state == ComposerState.FAILED
    assert "no id returned" in outcome.message
    assert composer.transactions.rows == []
    assert cache.read_all(session.session_id, "transactions") == {}
