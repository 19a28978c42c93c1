"""API route modules."""

from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.inventory import router as inventory_router
from stockledger.api.routes.kitting import router as kitting_router
from stockledger.api.routes.materials import router as materials_router

__all__ = [
    "health_router",
    "materials_router",
    "inventory_router",
    "kitting_router",
]
