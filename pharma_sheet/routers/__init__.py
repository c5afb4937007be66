from pharma_sheet.routers.health import router as health_router
from pharma_sheet.routers.medicines import router as medicines_router
from pharma_sheet.routers.sync import router as sync_router
from pharma_sheet.routers.warehouses import router as warehouses_router

__all__ = ["health_router", "medicines_router", "sync_router", "warehouses_router"]
