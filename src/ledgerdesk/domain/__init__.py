"""Domain layer for ledgerdesk application."""

# Resolved lazily: the repositories import the cache layer, which in turn
# imports ledgerdesk.domain.errors.
_EXPORTS = {
    "AccountRepository": "ledgerdesk.domain.account",
    "AccountGroupRepository": "ledgerdesk.domain.account_group",
    "CostCenterRepository": "ledgerdesk.domain.cost_center",
    "TransactionRepository": "ledgerdesk.domain.transaction",
    "TransactionComposer": "ledgerdesk.domain.composer",
    "LedgerValidator": "ledgerdesk.domain.ledger",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    if name in _EXPORTS:
        import importlib

        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
