"""Domain layer for renqing application."""

__all__ = [
    "LedgerService",
    "ImportService",
    "TagService",
    "AnalyticsService",
]

_SERVICES = {
    "LedgerService": "renqing.domain.ledger",
    "ImportService": "renqing.domain.json_import",
    "TagService": "renqing.domain.tags",
    "AnalyticsService": "renqing.domain.analytics",
}


# Services are imported lazily: the storage layer imports domain entities,
# and the services import the storage layer.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
