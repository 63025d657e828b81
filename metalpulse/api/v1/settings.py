"""Bot settings API endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status

from metalpulse.core.exceptions import SettingsValidationError
from metalpulse.schemas.settings import BotSettings, UpdateBotSettingsResponse
from metalpulse.services.settings_service import SettingsService, get_settings_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get(
    "",
    response_model=BotSettings,
    summary="Get bot settings",
    description="Return the stored bot settings, or defaults if none are stored.",
)
async def get_bot_settings(
    service: SettingsService = Depends(get_settings_service),
):
    """Get bot settings."""
    return service.read()


@router.post(
    "",
    response_model=UpdateBotSettingsResponse,
    summary="Update bot settings",
    description="Validate and store postFrequency, tone and personality.",
    responses={400: {"description": "Invalid settings"}},
)
async def update_bot_settings(
    body: Dict[str, Any] = Body(...),
    service: SettingsService = Depends(get_settings_service),
):
    """
    Update bot settings.

    - **postFrequency**: Minutes between posts, 5 to 120
    - **tone**: casual, professional, witty, friendly or formal
    - **personality**: Free text added to the generation prompt
    """
    try:
        stored = service.write(body)
    except SettingsValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except OSError as e:
        logger.error("Failed to write settings: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update settings: {e}",
        )

    return UpdateBotSettingsResponse(settings=stored)
