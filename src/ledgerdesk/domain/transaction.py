"""Transaction (ledger entry) repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ledgerdesk.database.overlay import Record
from ledgerdesk.domain.entities import (
    ACTIVE,
    INACTIVE,
    MovementLine,
    Transaction,
    TransactionDraft,
)
from ledgerdesk.domain.errors import (
    OperationError,
    ValidationError,
    required_field,
)
from ledgerdesk.domain.ledger import normalize_lines
from ledgerdesk.domain.repository import EntityRepository
from ledgerdesk.remote.endpoints import SALE_REGISTER, TRANSACTIONS
from ledgerdesk.remote.mappers import (
    amount_to_json,
    iso_day,
    movement_payload,
    transaction_from_record,
    transaction_record,
    transaction_to_record,
)
from ledgerdesk.utils.amount_parser import to_decimal
from ledgerdesk.utils.ids import normalize_optional_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchItem:
    """Per-transaction outcome of a batch registration."""

    status: str
    message: str = ""
    transaction_id: Any = None
    movement_ids: list[Any] = field(default_factory=list)
    record: Optional[dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return str(self.status).lower() == "ok"


@dataclass(frozen=True)
class SaleReceipt:
    """Identifiers returned by the sale registration procedure."""

    transaction_id: Any
    movement_ids: list[Any] = field(default_factory=list)
    record: Optional[dict[str, Any]] = None


def _batch_item(raw: dict[str, Any]) -> BatchItem:
    data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
    record = data.get("transaccion") if isinstance(data.get("transaccion"), dict) else None
    transaction_id = data.get("id_transaccion") or (record or {}).get("id_transaccion")
    movement_ids = data.get("movimientos_ids")
    return BatchItem(
        status=str(raw.get("status") or ""),
        message=raw.get("message") or "",
        transaction_id=transaction_id,
        movement_ids=list(movement_ids) if isinstance(movement_ids, list) else [],
        record=record,
    )


class TransactionRepository(EntityRepository[Transaction]):
    """Ledger entries.

    New entries go through ``create`` (batch procedure) or ``register_sale``;
    the composer then pushes an optimistic record through ``apply_optimistic``
    because neither procedure returns the full entry with its movements.
    """

    entity_type = "transactions"
    label = "transaction"
    id_param = "p_id_transaccion"
    response_key = "transaccion"
    endpoints = TRANSACTIONS
    sale_endpoint = SALE_REGISTER

    def to_record(self, row: dict[str, Any]) -> Record:
        return transaction_record(row)

    def from_record(self, record: Record) -> Transaction:
        return transaction_from_record(record)

    def validate_draft(self, draft: TransactionDraft) -> None:
        if not draft.date:
            raise ValidationError(required_field("Date"))
        if not str(draft.transaction_type or "").strip():
            raise ValidationError(required_field("Transaction type"))

    def filters_payload(self, filters: dict[str, Any]) -> dict[str, Any]:
        payload = super().filters_payload(filters)
        if filters.get("date_from"):
            payload["p_fecha_desde"] = iso_day(filters["date_from"])
        if filters.get("date_to"):
            payload["p_fecha_hasta"] = iso_day(filters["date_to"])
        if filters.get("transaction_type"):
            payload["p_tipo_transaccion"] = filters["transaction_type"]
        return payload

    def cached_filter(self, filters: dict[str, Any]) -> Optional[Callable[[Record], bool]]:
        date_from = iso_day(filters.get("date_from")) or None
        date_to = iso_day(filters.get("date_to")) or None
        txn_type = str(filters.get("transaction_type") or "").upper() or None
        only_active = bool(filters.get("only_active"))
        if not (date_from or date_to or txn_type or only_active):
            return None

        def include(record: Record) -> bool:
            day = record.get("date") or ""
            if date_from and (not day or day < date_from):
                return False
            if date_to and (not day or day > date_to):
                return False
            if txn_type and str(record.get("transaction_type") or "").upper() != txn_type:
                return False
            if only_active and record.get("register_status") == INACTIVE:
                return False
            return True

        return include

    def update_payload(self, draft: TransactionDraft) -> dict[str, Any]:
        return {
            "p_fecha": iso_day(draft.date),
            "p_tipo_transaccion": draft.transaction_type,
            "p_glosa": draft.description,
            "p_referencia_externa": draft.external_reference,
            "p_register_status": draft.register_status or ACTIVE,
            **self.metadata_fields(draft, creating=False),
        }

    def transaction_payload(self, draft: TransactionDraft, lines: list[MovementLine]) -> dict[str, Any]:
        """One element of the batch procedure's ``p_transacciones``."""
        return {
            "fecha": iso_day(draft.date),
            "tipo_transaccion": draft.transaction_type,
            "glosa": draft.description,
            "referencia_externa": draft.external_reference,
            "metadata": draft.metadata or {},
            "movimientos": [movement_payload(line) for line in lines],
        }

    def register_batch(self, transactions: list[dict[str, Any]], stop_on_error: bool = False) -> list[BatchItem]:
        """Submit transaction payloads through the batch procedure.

        Args:
            transactions: Payloads built by ``transaction_payload``
            stop_on_error: Ask the backend to stop at the first failing item

        Returns:
            One BatchItem per submitted transaction

        Raises:
            OperationError: If the call as a whole fails
        """
        session = self._require_session()
        endpoint = self._require_endpoint(self.endpoints.create, "batch")
        payload = {
            **session.actor_payload(),
            "p_stop_on_error": bool(stop_on_error),
            "p_transacciones": transactions,
        }
        result = self._call(endpoint, payload)
        results = result.data.get("results")
        if not isinstance(results, list):
            results = result.rows
        return [_batch_item(item) for item in results if isinstance(item, dict)]

    def create(self, draft: TransactionDraft) -> BatchItem:
        """Register one transaction through the batch procedure.

        Lines are normalized here; double-entry validation is the caller's job.

        Raises:
            OperationError: If the backend rejects the transaction or returns no
                transaction id
        """
        self._require_session()
        self.validate_draft(draft)
        lines = normalize_lines(draft.lines)
        items = self.register_batch([self.transaction_payload(draft, lines)], stop_on_error=False)
        first = items[0] if items else None
        if first is None or not first.ok:
            message = (first.message if first else "") or "Could not register the transaction"
            raise OperationError(message, first)
        if not first.transaction_id:
            raise OperationError(first.message or "Could not register the transaction (no id returned)", first)
        logger.info("Registered transaction %s", first.transaction_id)
        return first

    def register_sale(
        self,
        draft: TransactionDraft,
        lines: list[MovementLine],
    ) -> SaleReceipt:
        """Register a sale through its dedicated procedure.

        Raises:
            OperationError: If the backend fails or returns no transaction id
        """
        session = self._require_session()
        payload = {
            **session.actor_payload(),
            "p_fecha": iso_day(draft.date),
            "p_glosa": draft.description,
            "p_referencia_externa": draft.external_reference,
            "p_metadata": draft.metadata or {},
            "p_movimientos": [movement_payload(line) for line in lines],
            "p_cantidad": amount_to_json(to_decimal(draft.quantity)),
            "p_id_producto": normalize_optional_id(draft.product_id),
            "p_id_cita": normalize_optional_id(draft.appointment_id),
        }
        result = self._call(self.sale_endpoint, payload)
        data = result.data
        transaction_id = data.get("id_transaccion")
        if not transaction_id:
            message = (result.response or {}).get("message") or "Could not register the sale transaction"
            raise OperationError(message, result.response)
        movement_ids = data.get("movimientos_ids")
        record = data.get("transaccion") if isinstance(data.get("transaccion"), dict) else None
        logger.info("Registered sale transaction %s", transaction_id)
        return SaleReceipt(
            transaction_id=transaction_id,
            movement_ids=list(movement_ids) if isinstance(movement_ids, list) else [],
            record=record,
        )

    def apply_optimistic(self, transaction: Transaction) -> Transaction:
        """Cache a locally built transaction and overlay it on the current list."""
        return self.store(transaction_to_record(transaction))

    def search_lines(self, query: str = "") -> list[tuple[Transaction, MovementLine]]:
        """Flattened (transaction, line) pairs matching a free-text query.

        Matches the transaction id, description, external reference and the
        line's account code or name, case-insensitively.
        """
        q = query.strip().lower()
        out = []
        for txn in self.rows:
            for line in txn.lines:
                haystack = (
                    str(txn.id),
                    txn.description.lower(),
                    txn.external_reference.lower(),
                    line.account_name.lower(),
                    line.account_code.lower(),
                )
                if not q or any(q in value for value in haystack):
                    out.append((txn, line))
        return out
