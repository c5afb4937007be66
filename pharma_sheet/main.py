from fastapi import FastAPI

from pharma_sheet.config import Settings, get_settings
from pharma_sheet.core.logging import setup_logging
from pharma_sheet.database import init_db
from pharma_sheet.routers import health_router, medicines_router, sync_router, warehouses_router

setup_logging()
settings: Settings = get_settings()

init_db()

app = FastAPI(title=settings.APP_NAME)

app.include_router(health_router)
app.include_router(warehouses_router)
app.include_router(sync_router)
app.include_router(medicines_router)


__all__ = ["app"]
