"""API route modules."""

from buildstock.api.routes.health import router as health_router
from buildstock.api.routes.ledger import router as ledger_router
from buildstock.api.routes.materials import router as materials_router
from buildstock.api.routes.projects import router as projects_router
from buildstock.api.routes.suppliers import router as suppliers_router
from buildstock.api.routes.warehouses import router as warehouses_router

__all__ = [
    "health_router",
    "ledger_router",
    "materials_router",
    "projects_router",
    "suppliers_router",
    "warehouses_router",
]
