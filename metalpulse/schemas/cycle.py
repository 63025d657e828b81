"""Cycle report schemas returned by POST /cron."""

from typing import Dict, Optional

from metalpulse.schemas.base import CamelModel
from metalpulse.schemas.metal_prices import MetalPrices


class PriceOutcome(CamelModel):
    """Result of the price branch."""

    success: bool
    last_updated: Optional[str] = None
    prices: Optional[MetalPrices] = None
    error: Optional[str] = None


class NewsOutcome(CamelModel):
    """Result of the relevance-pipeline branch."""

    success: bool
    articles_found: int = 0
    article_title: Optional[str] = None
    articles_checked: int = 0
    message: Optional[str] = None
    feed_errors: Dict[str, str] = {}
    error: Optional[str] = None


class PostOutcome(CamelModel):
    """Result of the compose-and-publish branch."""

    success: bool
    source: Optional[str] = None
    post_id: Optional[str] = None
    post_text: Optional[str] = None
    error: Optional[str] = None


class CycleResult(CamelModel):
    """Aggregate report of one cycle; branch failures are data, not errors."""

    success: bool = True
    message: str = "Cycle completed"
    metal_prices: PriceOutcome
    news: NewsOutcome
    post: PostOutcome


class CycleErrorResponse(CamelModel):
    """Body returned when a cycle fails outside its guarded branches."""

    error: str = "Failed to execute cycle"
    details: str


