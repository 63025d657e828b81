"""Cycle trigger endpoint for external schedulers."""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse

from metalpulse.config import settings
from metalpulse.schemas.cycle import CycleErrorResponse, CycleResult
from metalpulse.services.cycle_service import CycleService, get_cycle_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["Cron"])


async def verify_cron_secret(
    authorization: Optional[str] = Header(None),
) -> None:
    """Require "Bearer <CRON_SECRET>" when CRON_SECRET is configured."""
    if not settings.CRON_SECRET:
        return
    expected = f"Bearer {settings.CRON_SECRET}".encode("utf-8")
    # Header values arrive latin-1 decoded; compare_digest rejects non-ASCII str
    if not authorization or not secrets.compare_digest(
        authorization.encode("latin-1", "replace"), expected
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


@router.post(
    "",
    response_model=CycleResult,
    summary="Run one bot cycle",
    description=(
        "Refresh metal prices, look for relevant news, then generate and publish "
        "a post. Branch failures are reported in the body with a 200 status."
    ),
    responses={500: {"model": CycleErrorResponse}},
    dependencies=[Depends(verify_cron_secret)],
)
async def run_cycle(
    service: CycleService = Depends(get_cycle_service),
):
    """Run one cycle and return the per-branch report."""
    try:
        return await service.run_cycle()
    except Exception as e:
        logger.exception("Cycle failed outside its guarded branches")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=CycleErrorResponse(details=str(e) or type(e).__name__).model_dump(),
        )
