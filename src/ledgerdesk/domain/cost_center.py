"""Cost center repository."""

from typing import Any

from ledgerdesk.domain.entities import ACTIVE, CostCenter, CostCenterDraft
from ledgerdesk.domain.repository import EntityRepository
from ledgerdesk.remote.endpoints import COST_CENTERS
from ledgerdesk.remote.mappers import cost_center_from_record, cost_center_record


class CostCenterRepository(EntityRepository[CostCenter]):
    """Cost centers, backed by the centros-costo procedures.

    The list procedure never returns metadata.
    """

    entity_type = "cost_centers"
    label = "cost center"
    id_param = "p_id_centro_costo"
    response_key = "centro_costo"
    endpoints = COST_CENTERS

    def to_record(self, row: dict[str, Any]) -> dict[str, Any]:
        return cost_center_record(row)

    def from_record(self, record: dict[str, Any]) -> CostCenter:
        return cost_center_from_record(record)

    def create_payload(self, draft: CostCenterDraft) -> dict[str, Any]:
        return {
            "p_codigo": draft.code,
            "p_nombre": draft.name,
            **self.metadata_fields(draft, creating=True),
        }

    def update_payload(self, draft: CostCenterDraft) -> dict[str, Any]:
        return {
            "p_codigo": draft.code,
            "p_nombre": draft.name,
            "p_register_status": draft.register_status or ACTIVE,
            **self.metadata_fields(draft, creating=False),
        }
