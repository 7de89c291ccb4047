"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.bom import router as bom_router
from routes.inventory import router as inventory_router
from routes.dashboard import router as dashboard_router

__all__ = [
    "bom_router",
    "inventory_router",
    "dashboard_router",
]
