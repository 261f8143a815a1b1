import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_app.api.errors import install_exception_handlers
from inventory_app.api.routes.cities import router as cities_router
from inventory_app.api.routes.products import router as products_router
from inventory_app.api.routes.transactions import router as transactions_router
from inventory_app.api.routes.warehouses import router as warehouses_router
from inventory_app.core.config import settings
from inventory_app.core.logging import setup_logging
from inventory_app.db.database import init_db
from inventory_app.services.weather import build_weather_lookup

logger = logging.getLogger("inventory")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    if settings.auto_create_tables:
        init_db()
    async with httpx.AsyncClient(timeout=settings.weather_timeout_seconds) as http:
        app.state.weather_lookup = build_weather_lookup(http, settings)
        logger.info("%s started", settings.app_name)
        yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_exception_handlers(app)
app.include_router(products_router)
app.include_router(warehouses_router)
app.include_router(transactions_router)
app.include_router(cities_router)


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}
