"""Transaction composer.

Assembles a draft ledger entry, validates it, routes it to the batch or the
sale procedure, and on success pushes an optimistic record into the
transaction repository before re-reading the first page.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Optional

from ledgerdesk.domain.account import AccountRepository
from ledgerdesk.domain.entities import (
    ACTIVE,
    DraftLine,
    MovementLine,
    Transaction,
    TransactionDraft,
)
from ledgerdesk.domain.errors import (
    DomainError,
    OperationError,
    PreconditionError,
    ValidationError,
    required_field,
)
from ledgerdesk.domain.ledger import LedgerValidator, ValidatedDraft
from ledgerdesk.domain.transaction import TransactionRepository
from ledgerdesk.remote.mappers import parse_timestamp

logger = logging.getLogger(__name__)


class ComposerState(str, Enum):
    DRAFT = "DRAFT"
    VALIDATING = "VALIDATING"
    REJECTED = "REJECTED"
    SUBMITTING = "SUBMITTING"
    COMMITTED = "COMMITTED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of one submit attempt, for the presentation layer to render."""

    state: ComposerState
    transaction: Optional[Transaction] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.state == ComposerState.COMMITTED


class TransactionComposer:
    """Drives a TransactionDraft through validation and submission."""

    def __init__(
        self,
        transactions: TransactionRepository,
        accounts: AccountRepository,
        validator: Optional[LedgerValidator] = None,
        draft: Optional[TransactionDraft] = None,
    ):
        """Initialize composer.

        Args:
            transactions: Repository receiving the committed entry
            accounts: Loaded accounts, used to denormalize code and name
            validator: Ledger validator (default settings if None)
            draft: Starting draft (an empty one if None)
        """
        self.transactions = transactions
        self.accounts = accounts
        self.validator = validator or LedgerValidator()
        self.draft = draft or TransactionDraft.empty()
        self.state = ComposerState.DRAFT
        self.last_message = ""

    # Draft editing

    def reset(self) -> TransactionDraft:
        self.draft = TransactionDraft.empty()
        self.state = ComposerState.DRAFT
        self.last_message = ""
        return self.draft

    def set_header(self, **fields: Any) -> None:
        for name, value in fields.items():
            if not hasattr(self.draft, name) or name == "lines":
                raise AttributeError(f"Unknown draft field '{name}'")
            setattr(self.draft, name, value)
        self.state = ComposerState.DRAFT

    def add_line(self, account_id: Any = None, debit: Any = 0, credit: Any = 0, description: str = "") -> DraftLine:
        line = DraftLine(account_id=account_id, debit=debit, credit=credit, description=description)
        self.draft.lines.append(line)
        self.state = ComposerState.DRAFT
        return line

    def update_line(self, index: int, **patch: Any) -> DraftLine:
        line = self.draft.lines[index]
        for name, value in patch.items():
            if not hasattr(line, name):
                raise AttributeError(f"Unknown line field '{name}'")
            setattr(line, name, value)
        self.state = ComposerState.DRAFT
        return line

    def remove_line(self, index: int) -> None:
        del self.draft.lines[index]
        self.state = ComposerState.DRAFT

    def load(self, transaction: Transaction) -> TransactionDraft:
        """Show a persisted transaction in the draft (read-only view)."""
        self.draft = TransactionDraft(
            date=transaction.date,
            transaction_type=transaction.transaction_type,
            description=transaction.description,
            external_reference=transaction.external_reference,
            metadata=dict(transaction.metadata or {}),
            lines=[
                DraftLine(
                    account_id=line.account_id,
                    debit=line.debit,
                    credit=line.credit,
                    description=line.description or "",
                )
                for line in transaction.lines
            ],
        )
        self.state = ComposerState.DRAFT
        return self.draft

    # Submission

    def _check_header(self) -> None:
        if not self.transactions.session.session_id:
            raise PreconditionError("Invalid session (missing session id)")
        if not self.draft.date:
            raise ValidationError(required_field("Date"))
        if not str(self.draft.transaction_type or "").strip():
            raise ValidationError(required_field("Transaction type"))

    def _reject(self, error: DomainError) -> SubmitOutcome:
        self.state = ComposerState.REJECTED
        self.last_message = str(error)
        logger.info("Draft rejected: %s", error)
        return SubmitOutcome(state=self.state, message=self.last_message)

    def submit(self) -> SubmitOutcome:
        """Validate and submit the current draft.

        The draft is preserved on rejection or failure. On commit the draft
        is reset and the first page of transactions is re-read.

        Returns:
            SubmitOutcome with the final state
        """
        self.state = ComposerState.VALIDATING
        try:
            self._check_header()
            validated = self.validator.validate(self.draft)
        except (PreconditionError, ValidationError) as e:
            return self._reject(e)

        self.state = ComposerState.SUBMITTING
        try:
            transaction = self._submit(validated)
        except OperationError as e:
            self.state = ComposerState.FAILED
            self.last_message = e.message
            logger.warning("Transaction submission failed: %s", e.message)
            return SubmitOutcome(state=self.state, message=self.last_message)

        self.transactions.apply_optimistic(transaction)
        self.state = ComposerState.COMMITTED
        self.last_message = ""
        self._refresh()
        self.draft = TransactionDraft.empty()
        return SubmitOutcome(state=self.state, transaction=transaction)

    def _submit(self, validated: ValidatedDraft) -> Transaction:
        draft = self.draft
        created_at = datetime.now(UTC)
        register_status = ACTIVE

        if draft.is_sale:
            receipt = self.transactions.register_sale(draft, validated.lines)
            transaction_id = receipt.transaction_id
            movement_ids = receipt.movement_ids
        else:
            item = self.transactions.create(draft)
            record = item.record or {}
            transaction_id = item.transaction_id
            movement_ids = item.movement_ids
            created_at = parse_timestamp(record.get("created_at")) or created_at
            register_status = record.get("register_status") or register_status

        return Transaction(
            id=transaction_id,
            date=draft.date,
            transaction_type=draft.transaction_type,
            description=draft.description,
            external_reference=draft.external_reference,
            register_status=register_status,
            metadata=dict(draft.metadata or {}),
            created_at=created_at,
            lines=self._optimistic_lines(validated.lines, movement_ids),
            total_debit=validated.totals.debit_total,
            total_credit=validated.totals.credit_total,
        )

    def _optimistic_lines(self, lines: list[MovementLine], movement_ids: list[Any]) -> tuple[MovementLine, ...]:
        accounts = self.accounts.by_id()
        out = []
        for index, line in enumerate(lines):
            account = accounts.get(line.account_id)
            out.append(
                MovementLine(
                    id=movement_ids[index] if index < len(movement_ids) else None,
                    account_id=line.account_id,
                    account_code=account.code if account else "",
                    account_name=account.name if account else "",
                    description=line.description or "",
                    debit=line.debit,
                    credit=line.credit,
                )
            )
        return tuple(out)

    def _refresh(self) -> None:
        try:
            self.transactions.list(offset=0)
        except DomainError as e:
            # The commit stands; the next successful read reconciles
            logger.warning("Re-reading transactions after commit failed: %s", e)
