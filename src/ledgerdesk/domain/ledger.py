"""Double-entry checks run on a draft before it is submitted."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from ledgerdesk.domain.entities import MovementLine, TransactionDraft
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.utils.amount_parser import to_decimal
from ledgerdesk.utils.ids import normalize_optional_id

MIN_LINES = 2

MSG_MIN_LINES = "At least 2 movements (with an account) are required"
MSG_UNBALANCED = "The entry is not balanced (debit total must equal credit total)"
MSG_NOT_POSITIVE = "The debit/credit total must be greater than 0"
MSG_UNIFORM_CREDITS = (
    "Several credit lines share the same amount. Check for a duplicated movement."
)
MSG_SALE_PRODUCT = "A sale requires a catalog item (product)"
MSG_SALE_QUANTITY = "A sale requires a quantity greater than 0"


@dataclass(frozen=True)
class Totals:
    debit_total: Decimal
    credit_total: Decimal


def _line_value(line: Any, name: str, default: Any = None) -> Any:
    if isinstance(line, dict):
        return line.get(name, default)
    return getattr(line, name, default)


def normalize_lines(raw_lines: Iterable[Any]) -> list[MovementLine]:
    """Normalize draft lines for validation and submission.

    Lines without an account are dropped, amounts become Decimal (garbage
    becomes 0), blank descriptions become None, and repeated
    (account, debit, credit, description) tuples keep only the first.

    Args:
        raw_lines: DraftLine objects or dicts with the same keys

    Returns:
        List of MovementLine
    """
    seen: set[tuple] = set()
    lines: list[MovementLine] = []
    for raw in raw_lines:
        account_id = normalize_optional_id(_line_value(raw, "account_id"))
        if account_id is None:
            continue
        description = str(_line_value(raw, "description") or "").strip() or None
        line = MovementLine(
            account_id=account_id,
            debit=to_decimal(_line_value(raw, "debit")),
            credit=to_decimal(_line_value(raw, "credit")),
            description=description,
        )
        key = (line.account_id, line.debit, line.credit, line.description or "")
        if key in seen:
            continue
        seen.add(key)
        lines.append(line)
    return lines


def compute_totals(lines: Iterable[Any]) -> Totals:
    """Sum the debit and credit columns."""
    debit_total = Decimal("0")
    credit_total = Decimal("0")
    for line in lines:
        debit_total += to_decimal(_line_value(line, "debit"))
        credit_total += to_decimal(_line_value(line, "credit"))
    return Totals(debit_total=debit_total, credit_total=credit_total)


def has_uniform_credits(lines: Iterable[MovementLine]) -> bool:
    """True when two or more lines carry a positive credit and all are equal."""
    credits = [line.credit for line in lines if line.credit > 0]
    return len(credits) >= 2 and all(c == credits[0] for c in credits)


@dataclass(frozen=True)
class ValidatedDraft:
    """Lines and totals of a draft that passed validation."""

    lines: list[MovementLine]
    totals: Totals


class LedgerValidator:
    """Stateless double-entry validator.

    ``reject_uniform_credits`` toggles the duplicated-credit heuristic. It
    guards against a double-submitted credit line and also rejects genuine
    entries whose credit lines happen to share one amount.
    """

    def __init__(self, reject_uniform_credits: bool = True):
        self.reject_uniform_credits = reject_uniform_credits

    def validate(self, draft: TransactionDraft) -> ValidatedDraft:
        """Validate a draft, raising ValidationError on the first violated rule.

        Args:
            draft: Transaction draft

        Returns:
            ValidatedDraft with normalized lines and totals

        Raises:
            ValidationError: With the reason of the violated rule
        """
        lines = normalize_lines(draft.lines)
        if len(lines) < MIN_LINES:
            raise ValidationError(MSG_MIN_LINES)

        totals = compute_totals(lines)
        if totals.debit_total != totals.credit_total:
            raise ValidationError(MSG_UNBALANCED)
        if totals.debit_total <= 0:
            raise ValidationError(MSG_NOT_POSITIVE)

        if self.reject_uniform_credits and has_uniform_credits(lines):
            raise ValidationError(MSG_UNIFORM_CREDITS)

        if draft.is_sale:
            if normalize_optional_id(draft.product_id) is None:
                raise ValidationError(MSG_SALE_PRODUCT)
            if to_decimal(draft.quantity) <= 0:
                raise ValidationError(MSG_SALE_QUANTITY)

        return ValidatedDraft(lines=lines, totals=totals)

    def check(self, draft: TransactionDraft) -> Optional[str]:
        """Return the rejection reason, or None when the draft is valid."""
        try:
            self.validate(draft)
        except ValidationError as e:
            return str(e)
        return None


def validate(draft: TransactionDraft, reject_uniform_credits: bool = True) -> ValidatedDraft:
    """Validate with a default LedgerValidator."""
    return LedgerValidator(reject_uniform_credits=reject_uniform_credits).validate(draft)

