"""Mapper functions between backend rows, canonical records and entities.

Backend rows use the Spanish column names of the accounting schema.
Canonical records are JSON-ready dicts keyed by entity field name; they are
what the overlay cache stores and merges. Entities are built from canonical
records at the edge of each repository.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from dateutil import parser as date_parser

from ledgerdesk.domain import entities as domain
from ledgerdesk.utils.amount_parser import to_decimal
from ledgerdesk.utils.ids import coerce_id, normalize_optional_id

Record = dict[str, Any]


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        return None


def parse_day(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return date_parser.isoparse(text.split("T")[0]).date()
    except (ValueError, OverflowError):
        return None


def iso_day(value: Any) -> str:
    """'2026-01-20T04:00:00.000Z' and '2026-01-20' both become '2026-01-20'."""
    if not value:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    text = str(value)
    return text.split("T")[0] if "T" in text else text


def _timestamp_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


# Accounts


def account_record(row: dict[str, Any]) -> Record:
    """Convert a backend account row to a canonical record."""
    return {
        "id": coerce_id(row.get("id_cuenta")),
        "code": row.get("codigo") or "",
        "name": row.get("nombre") or "",
        "group_id": normalize_optional_id(row.get("id_grupo_cuenta")),
        "group_name": row.get("grupo_cuenta_nombre") or "",
        "account_type": row.get("tipo_cuenta") or "",
        "sub_type": row.get("sub_tipo") or "",
        "category": row.get("categoria") or "",
        "currency": row.get("moneda") or "",
        "register_status": row.get("register_status") or domain.ACTIVE,
        "metadata": row.get("metadata"),
        "version": row.get("id_version"),
        "created_at": _timestamp_text(row.get("created_at")),
        "updated_at": _timestamp_text(row.get("updated_at")),
    }


def account_from_record(record: Record) -> domain.Account:
    """Convert a canonical record to an Account entity."""
    return domain.Account(
        id=coerce_id(record.get("id")),
        code=record.get("code") or "",
        name=record.get("name") or "",
        group_id=normalize_optional_id(record.get("group_id")),
        group_name=record.get("group_name") or "",
        account_type=record.get("account_type") or "",
        sub_type=record.get("sub_type") or "",
        category=record.get("category") or "",
        currency=record.get("currency") or "",
        register_status=record.get("register_status") or domain.ACTIVE,
        metadata=record.get("metadata"),
        version=record.get("version"),
        created_at=parse_timestamp(record.get("created_at")),
        updated_at=parse_timestamp(record.get("updated_at")),
    )


# Account groups


def account_group_record(row: dict[str, Any]) -> Record:
    """Convert a backend account group row to a canonical record."""
    return {
        "id": coerce_id(row.get("id_grupo_cuenta", row.get("id"))),
        "code": row.get("codigo") or "",
        "name": row.get("nombre") or "",
        "group_type": row.get("tipo_grupo") or "",
        # Some endpoints answer 0 or "0" for a root group
        "parent_id": normalize_optional_id(row.get("id_grupo_padre")),
        "parent_name": row.get("grupo_padre_nombre"),
        "register_status": row.get("register_status") or domain.ACTIVE,
        "metadata": row.get("metadata"),
        "version": row.get("id_version"),
        "created_at": _timestamp_text(row.get("created_at")),
        "updated_at": _timestamp_text(row.get("updated_at")),
    }


def account_group_from_record(record: Record) -> domain.AccountGroup:
    """Convert a canonical record to an AccountGroup entity."""
    return domain.AccountGroup(
        id=coerce_id(record.get("id")),
        code=record.get("code") or "",
        name=record.get("name") or "",
        group_type=record.get("group_type") or "",
        parent_id=normalize_optional_id(record.get("parent_id")),
        parent_name=record.get("parent_name"),
        register_status=record.get("register_status") or domain.ACTIVE,
        metadata=record.get("metadata"),
        version=record.get("version"),
        created_at=parse_timestamp(record.get("created_at")),
        updated_at=parse_timestamp(record.get("updated_at")),
    )


# Cost centers


def cost_center_record(row: dict[str, Any]) -> Record:
    """Convert a backend cost center row to a canonical record."""
    return {
        "id": coerce_id(row.get("id_centro_costo")),
        "code": row.get("codigo") or "",
        "name": row.get("nombre") or "",
        "register_status": row.get("register_status") or domain.ACTIVE,
        "metadata": row.get("metadata"),
        "version": row.get("id_version"),
        "created_at": _timestamp_text(row.get("created_at")),
        "updated_at": _timestamp_text(row.get("updated_at")),
    }


def cost_center_from_record(record: Record) -> domain.CostCenter:
    """Convert a canonical record to a CostCenter entity."""
    return domain.CostCenter(
        id=coerce_id(record.get("id")),
        code=record.get("code") or "",
        name=record.get("name") or "",
        register_status=record.get("register_status") or domain.ACTIVE,
        metadata=record.get("metadata"),
        version=record.get("version"),
        created_at=parse_timestamp(record.get("created_at")),
        updated_at=parse_timestamp(record.get("updated_at")),
    )


# Transactions


def movement_record(row: dict[str, Any]) -> Record:
    return {
        "id": coerce_id(row.get("id_movimiento")),
        "account_id": normalize_optional_id(row.get("id_cuenta")),
        "account_code": row.get("cuenta_codigo") or "",
        "account_name": row.get("cuenta_nombre") or "",
        "description": row.get("descripcion") or "",
        "debit": str(to_decimal(row.get("debe"))),
        "credit": str(to_decimal(row.get("haber"))),
    }


def transaction_record(row: dict[str, Any]) -> Record:
    """Convert a backend transaction row (with movimientos) to a canonical record."""
    movements = row.get("movimientos")
    lines = [movement_record(m) for m in movements if isinstance(m, dict)] if isinstance(movements, list) else []
    total_debit = sum((to_decimal(line["debit"]) for line in lines), Decimal("0"))
    total_credit = sum((to_decimal(line["credit"]) for line in lines), Decimal("0"))
    return {
        "id": coerce_id(row.get("id_transaccion")),
        "date": iso_day(row.get("fecha")),
        "transaction_type": row.get("tipo_transaccion") or "",
        "description": row.get("glosa") or "",
        "external_reference": row.get("referencia_externa") or "",
        "created_at": _timestamp_text(row.get("created_at")),
        "register_status": row.get("register_status") or domain.ACTIVE,
        "metadata": row.get("metadata"),
        "lines": lines,
        "total_debit": str(total_debit),
        "total_credit": str(total_credit),
    }


def movement_from_record(record: Record) -> domain.MovementLine:
    return domain.MovementLine(
        id=coerce_id(record.get("id")),
        account_id=normalize_optional_id(record.get("account_id")),
        account_code=record.get("account_code") or "",
        account_name=record.get("account_name") or "",
        description=record.get("description") or "",
        debit=to_decimal(record.get("debit")),
        credit=to_decimal(record.get("credit")),
    )


def transaction_from_record(record: Record) -> domain.Transaction:
    """Convert a canonical record to a Transaction entity."""
    lines = tuple(movement_from_record(m) for m in record.get("lines") or [] if isinstance(m, dict))
    return domain.Transaction(
        id=coerce_id(record.get("id")),
        date=parse_day(record.get("date")),
        transaction_type=record.get("transaction_type") or "",
        description=record.get("description") or "",
        external_reference=record.get("external_reference") or "",
        register_status=record.get("register_status") or domain.ACTIVE,
        metadata=record.get("metadata"),
        created_at=parse_timestamp(record.get("created_at")),
        lines=lines,
        total_debit=sum((line.debit for line in lines), Decimal("0")),
        total_credit=sum((line.credit for line in lines), Decimal("0")),
    )


def transaction_to_record(transaction: domain.Transaction) -> Record:
    """Convert a Transaction entity back to a canonical record."""
    return {
        "id": transaction.id,
        "date": iso_day(transaction.date),
        "transaction_type": transaction.transaction_type,
        "description": transaction.description,
        "external_reference": transaction.external_reference,
        "created_at": _timestamp_text(transaction.created_at),
        "register_status": transaction.register_status,
        "metadata": transaction.metadata,
        "lines": [
            {
                "id": line.id,
                "account_id": line.account_id,
                "account_code": line.account_code,
                "account_name": line.account_name,
                "description": line.description or "",
                "debit": str(line.debit),
                "credit": str(line.credit),
            }
            for line in transaction.lines
        ],
        "total_debit": str(transaction.total_debit),
        "total_credit": str(transaction.total_credit),
    }


def amount_to_json(amount: Decimal) -> Any:
    """JSON number for an amount: int when integral, float otherwise."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def movement_payload(line: domain.MovementLine) -> dict[str, Any]:
    """Convert a normalized movement line to the backend's movement shape."""
    return {
        "id_cuenta": line.account_id,
        "debe": amount_to_json(line.debit),
        "haber": amount_to_json(line.credit),
        "descripcion": line.description,
    }
