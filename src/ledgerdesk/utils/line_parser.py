"""Parsing of movement lines given on the command line."""

from ledgerdesk.domain.entities import DraftLine
from ledgerdesk.utils.amount_parser import parse_amount


def parse_line(spec: str) -> tuple[str, DraftLine]:
    """Parse ``ACCOUNT:DEBIT:CREDIT[:DESCRIPTION]``.

    ACCOUNT is an account id or code and is returned separately so the
    caller can resolve it. Empty amount columns mean 0. The description may
    itself contain colons.

    Examples:
        "11:150.00::Cash in" -> debit 150.00 on account 11
        "4.1.01::150.00"     -> credit 150.00 on account code 4.1.01

    Raises:
        ValueError: If the line has fewer than three fields or bad amounts
    """
    parts = (spec or "").split(":", 3)
    if len(parts) < 3 or not parts[0].strip():
        raise ValueError(f"Invalid line '{spec}': expected ACCOUNT:DEBIT:CREDIT[:DESCRIPTION]")

    account_ref = parts[0].strip()
    debit = parse_amount(parts[1])
    credit = parse_amount(parts[2])
    description = parts[3].strip() if len(parts) > 3 else ""
    return account_ref, DraftLine(account_id=None, debit=debit, credit=credit, description=description)
