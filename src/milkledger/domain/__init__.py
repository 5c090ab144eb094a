"""Domain layer for milkledger application."""

# Import services lazily to avoid circular dependencies: database.base imports
# domain.entities, which runs this file, and the services import database.base.
_SERVICES = {
    "PersonService": "milkledger.domain.person",
    "EntryService": "milkledger.domain.entry",
    "PaymentService": "milkledger.domain.payment",
    "ReportService": "milkledger.domain.report",
    "ExportService": "milkledger.domain.export",
    "SyncCoordinator": "milkledger.domain.sync",
}


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = list(_SERVICES)
