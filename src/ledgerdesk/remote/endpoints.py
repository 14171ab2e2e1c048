"""Remote procedure routes for the accounting back-office."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EntityEndpoints:
    """Routes serving one entity type."""

    list: str
    create: Optional[str] = None
    update: Optional[str] = None
    deactivate: Optional[str] = None


ACCOUNT_GROUPS = EntityEndpoints(
    list="/api/contabilidad/grupos-cuenta/listar",
    create="/api/contabilidad/grupos-cuenta/crear",
    update="/api/contabilidad/grupos-cuenta/editar",
    deactivate="/api/contabilidad/grupos-cuenta/apagar",
)

ACCOUNTS = EntityEndpoints(
    list="/api/contabilidad/cuentas/listar",
    create="/api/contabilidad/cuentas/crear",
    update="/api/contabilidad/cuentas/editar",
    deactivate="/api/contabilidad/cuentas/apagar",
)

COST_CENTERS = EntityEndpoints(
    list="/api/contabilidad/centros-costo/listar",
    create="/api/contabilidad/centros-costo/crear",
    update="/api/contabilidad/centros-costo/editar",
    deactivate="/api/contabilidad/centros-costo/apagar",
)

TRANSACTIONS = EntityEndpoints(
    list="/api/contabilidad/transacciones/listar",
    create="/api/contabilidad/transacciones/batch/crear",
    update="/api/contabilidad/transacciones/editar",
    deactivate="/api/contabilidad/transacciones/apagar",
)

TRANSACTIONS_BATCH = TRANSACTIONS.create
SALE_REGISTER = "/api/contabilidad/transacciones/venta/registrar"

DEFAULT_API_URL = "https://apidev.corazondemigrante.com"
