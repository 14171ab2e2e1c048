"""Account repository."""

from typing import Any

from ledgerdesk.domain.entities import ACTIVE, Account, AccountDraft
from ledgerdesk.domain.repository import EntityRepository
from ledgerdesk.remote.endpoints import ACCOUNTS
from ledgerdesk.remote.mappers import account_from_record, account_record
from ledgerdesk.utils.ids import normalize_optional_id


class AccountRepository(EntityRepository[Account]):
    """Chart of accounts, backed by the cuentas procedures."""

    entity_type = "accounts"
    label = "account"
    id_param = "p_id_cuenta"
    response_key = "cuenta"
    endpoints = ACCOUNTS
    clear_on_list_error = True

    def to_record(self, row: dict[str, Any]) -> dict[str, Any]:
        return account_record(row)

    def from_record(self, record: dict[str, Any]) -> Account:
        return account_from_record(record)

    def _fields(self, draft: AccountDraft) -> dict[str, Any]:
        payload = {
            "p_nombre": draft.name,
            "p_codigo": draft.code,
            "p_tipo_cuenta": draft.account_type,
            "p_sub_tipo": draft.sub_type,
            "p_categoria": draft.category,
            "p_moneda": draft.currency,
        }
        # Absent group is omitted, never sent as null
        group_id = normalize_optional_id(draft.group_id)
        if group_id is not None:
            payload["p_id_grupo_cuenta"] = group_id
        return payload

    def create_payload(self, draft: AccountDraft) -> dict[str, Any]:
        return {**self._fields(draft), **self.metadata_fields(draft, creating=True)}

    def update_payload(self, draft: AccountDraft) -> dict[str, Any]:
        return {
            **self._fields(draft),
            "p_register_status": draft.register_status or ACTIVE,
            **self.metadata_fields(draft, creating=False),
        }

    def find_by_code(self, code: str) -> Account | None:
        for account in self.rows:
            if account.code == code:
                return account
        return None
