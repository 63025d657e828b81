"""API v1 router aggregation."""

from fastapi import APIRouter

from metalpulse.api.v1.cron import router as cron_router
from metalpulse.api.v1.health import router as health_router
from metalpulse.api.v1.metal_prices import router as metal_prices_router
from metalpulse.api.v1.settings import router as settings_router

api_router = APIRouter(prefix="/api/v1")

# Include all routers
api_router.include_router(health_router)
api_router.include_router(settings_router)
api_router.include_router(metal_prices_router)
api_router.include_router(cron_router)
