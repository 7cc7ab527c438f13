from stocktake.routers.dashboard import router as dashboard_router
from stocktake.routers.health import router as health_router
from stocktake.routers.ingest import router as ingest_router
from stocktake.routers.inventories import router as inventories_router
from stocktake.routers.products import router as products_router

__all__ = [
    "dashboard_router",
    "health_router",
    "ingest_router",
    "inventories_router",
    "products_router",
]
