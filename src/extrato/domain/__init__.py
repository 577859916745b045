"""Domain layer for extrato application."""

# Services are imported lazily: utils depend on domain.errors/entities and the
# services depend on utils.
_SERVICES = {
    "AccountService": "extrato.domain.account",
    "CategoryService": "extrato.domain.category",
    "CSVImportService": "extrato.domain.csv_import",
    "RuleService": "extrato.domain.rule",
    "ClassificationService": "extrato.domain.classification",
    "OverrideService": "extrato.domain.override",
    "TransactionService": "extrato.domain.transaction",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
