"""Account group repository."""

from typing import Any, Optional

from ledgerdesk.domain.entities import ACTIVE, AccountGroup, AccountGroupDraft
from ledgerdesk.domain.errors import ValidationError, self_parent
from ledgerdesk.domain.repository import EntityRepository
from ledgerdesk.remote.endpoints import ACCOUNT_GROUPS
from ledgerdesk.remote.mappers import account_group_from_record, account_group_record
from ledgerdesk.utils.ids import normalize_optional_id


class AccountGroupRepository(EntityRepository[AccountGroup]):
    """Account groups, backed by the grupos-cuenta procedures."""

    entity_type = "account_groups"
    label = "account group"
    id_param = "p_id_grupo_cuenta"
    response_key = "grupo_cuenta"
    endpoints = ACCOUNT_GROUPS
    clear_on_list_error = True

    def to_record(self, row: dict[str, Any]) -> dict[str, Any]:
        return account_group_record(row)

    def from_record(self, record: dict[str, Any]) -> AccountGroup:
        return account_group_from_record(record)

    def validate_draft(self, draft: AccountGroupDraft) -> None:
        super().validate_draft(draft)
        parent_id = normalize_optional_id(draft.parent_id)
        if parent_id is not None and draft.id is not None and str(parent_id) == str(draft.id):
            raise ValidationError(self_parent(draft.id))

    def create_payload(self, draft: AccountGroupDraft) -> dict[str, Any]:
        return {
            "p_codigo": draft.code,
            "p_nombre": draft.name,
            "p_id_grupo_padre": normalize_optional_id(draft.parent_id),
            "p_tipo_grupo": draft.group_type,
            **self.metadata_fields(draft, creating=True),
        }

    def update_payload(self, draft: AccountGroupDraft) -> dict[str, Any]:
        payload = {
            "p_codigo": draft.code,
            "p_nombre": draft.name,
            "p_tipo_grupo": draft.group_type,
            "p_register_status": draft.register_status or ACTIVE,
            **self.metadata_fields(draft, creating=False),
        }
        # An absent parent must not erase the stored one
        parent_id = normalize_optional_id(draft.parent_id)
        if draft.clear_parent:
            payload["p_id_grupo_padre"] = None
        elif parent_id is not None:
            payload["p_id_grupo_padre"] = parent_id
        return payload

    def parent_candidates(self, group_id: Optional[Any] = None) -> list[AccountGroup]:
        """Groups that may be chosen as parent of ``group_id`` (never itself)."""
        return [g for g in self.rows if group_id is None or str(g.id) != str(group_id)]

    def children(self, group_id: Any) -> list[AccountGroup]:
        return [g for g in self.rows if g.parent_id is not None and str(g.parent_id) == str(group_id)]
