"""Liveness endpoint; never contacts an upstream API."""

import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request

from metalpulse.config import settings
from metalpulse.schemas.base import CamelModel

router = APIRouter(prefix="/health", tags=["Health"])


class HealthReport(CamelModel):
    status: str = "healthy"
    app: str
    version: str
    timestamp: str
    uptime_seconds: Optional[float] = None


def uptime_since(started_at: Optional[float]) -> Optional[float]:
    """Seconds since the lifespan recorded startup, or None outside it."""
    if started_at is None:
        return None
    return round(time.monotonic() - started_at, 2)


@router.get("", response_model=HealthReport, summary="Liveness check")
async def health(request: Request) -> HealthReport:
    return HealthReport(
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=uptime_since(getattr(request.app.state, "started_at", None)),
    )
