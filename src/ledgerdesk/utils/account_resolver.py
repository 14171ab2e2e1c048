"""Utility for resolving account references to loaded accounts."""

from typing import Any

from ledgerdesk.domain.account import AccountRepository
from ledgerdesk.domain.entities import Account
from ledgerdesk.domain.errors import NotFoundError, entity_not_found


def resolve_account(accounts: AccountRepository, ref: Any) -> Account:
    """Resolve an account id or code against the loaded account list.

    Numeric references are tried as ids first, then as codes, since account
    codes are often numeric too ("1.1.01" is a code, "12" may be either).

    Args:
        accounts: AccountRepository with rows already listed
        ref: Account id (int or digit string) or account code

    Returns:
        The matching Account

    Raises:
        NotFoundError: If no loaded account matches
    """
    text = str(ref).strip()
    if text.isdigit():
        account = accounts.find(int(text))
        if account is not None:
            return account

    account = accounts.find_by_code(text)
    if account is None:
        raise NotFoundError(entity_not_found("Account", ref))
    return account
