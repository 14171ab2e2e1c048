"""Domain model entities for ledgerdesk.

These are pure data classes representing the accounting back-office
concepts, independent of the backend's column names. Mappers in
``ledgerdesk.remote.mappers`` translate between backend rows, canonical
records (plain dicts kept in the overlay cache) and these entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

ACTIVE = "Activo"
INACTIVE = "Inactivo"
SALE_TYPE = "VENTA"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: Any
    code: str = ""
    name: str = ""
    group_id: Optional[int] = None
    group_name: str = ""
    account_type: str = ""
    sub_type: str = ""
    category: str = ""
    currency: str = ""
    register_status: str = ACTIVE
    metadata: Optional[dict[str, Any]] = None
    version: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AccountGroup:
    """Account group with optional parent group."""

    id: Any
    code: str = ""
    name: str = ""
    group_type: str = ""
    parent_id: Optional[int] = None
    parent_name: Optional[str] = None
    register_status: str = ACTIVE
    metadata: Optional[dict[str, Any]] = None
    version: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class CostCenter:
    """Cost center domain entity."""

    id: Any
    code: str = ""
    name: str = ""
    register_status: str = ACTIVE
    metadata: Optional[dict[str, Any]] = None
    version: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class MovementLine:
    """One debit or credit entry against an account.

    ``account_code`` and ``account_name`` are denormalized for display only.
    """

    account_id: Optional[int]
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    description: Optional[str] = None
    id: Optional[int] = None
    account_code: str = ""
    account_name: str = ""


@dataclass(frozen=True)
class Transaction:
    """Ledger entry composed of movement lines."""

    id: Any
    date: Optional[date] = None
    transaction_type: str = ""
    description: str = ""
    external_reference: str = ""
    register_status: str = ACTIVE
    metadata: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    lines: tuple[MovementLine, ...] = ()
    total_debit: Decimal = Decimal("0")
    total_credit: Decimal = Decimal("0")

    @property
    def is_sale(self) -> bool:
        return self.transaction_type.strip().upper() == SALE_TYPE


@dataclass
class DraftLine:
    """Editable movement line; amounts may still be raw user input."""

    account_id: Any = None
    debit: Any = 0
    credit: Any = 0
    description: Optional[str] = ""


@dataclass
class TransactionDraft:
    """Editable transaction header plus movement lines.

    ``id`` is only set when editing the header of a persisted transaction.
    """

    date: Optional[date] = None
    transaction_type: str = ""
    description: str = ""
    external_reference: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    lines: list[DraftLine] = field(default_factory=list)
    # Sale-only fields
    product_id: Optional[int] = None
    quantity: Any = 1
    appointment_id: Optional[int] = None
    id: Any = None
    register_status: Optional[str] = None
    metadata_touched: bool = False

    @property
    def is_sale(self) -> bool:
        return str(self.transaction_type or "").strip().upper() == SALE_TYPE

    @classmethod
    def empty(cls, today: Optional[date] = None) -> "TransactionDraft":
        """Fresh draft with today's date and two blank lines."""
        return cls(
            date=today or date.today(),
            lines=[DraftLine(), DraftLine()],
        )


@dataclass
class AccountDraft:
    """Form values for creating or editing an account.

    ``metadata`` only reaches the backend on update when ``metadata_touched``
    is set; the list endpoint never returns metadata, so sending an untouched
    value would overwrite what is stored.
    """

    code: str = ""
    name: str = ""
    id: Any = None
    group_id: Any = None
    account_type: str = ""
    sub_type: str = ""
    category: str = ""
    currency: str = ""
    register_status: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    metadata_touched: bool = False


@dataclass
class AccountGroupDraft:
    """Form values for creating or editing an account group."""

    code: str = ""
    name: str = ""
    id: Any = None
    group_type: str = ""
    parent_id: Any = None
    clear_parent: bool = False
    register_status: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    metadata_touched: bool = False


@dataclass
class CostCenterDraft:
    """Form values for creating or editing a cost center."""

    code: str = ""
    name: str = ""
    id: Any = None
    register_status: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    metadata_touched: bool = False
