"""One bot cycle: refresh prices, find relevant news, compose and publish a post.

Each branch is guarded on its own, so a failure in one is recorded in the
CycleResult and never stops the others from running.
"""

import logging
from typing import List, Optional, Tuple

from metalpulse.schemas.cycle import CycleResult, NewsOutcome, PostOutcome, PriceOutcome
from metalpulse.schemas.metal_prices import PriceSnapshot
from metalpulse.services.metal_price_service import MetalPriceService, get_metal_price_service
from metalpulse.services.news_service import NewsArticle
from metalpulse.services.post_generator import (
    PostGenerator,
    classify_source,
    get_post_generator,
)
from metalpulse.services.publisher import Publisher, get_publisher
from metalpulse.services.relevance_pipeline import RelevancePipeline
from metalpulse.services.settings_service import SettingsService, get_settings_service

logger = logging.getLogger(__name__)

NO_RELEVANT_NEWS_MESSAGE = "No relevant precious metals news found"


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class CycleService:
    """Runs the price, news and post branches in order."""

    def __init__(
        self,
        price_service: Optional[MetalPriceService] = None,
        pipeline: Optional[RelevancePipeline] = None,
        generator: Optional[PostGenerator] = None,
        publisher: Optional[Publisher] = None,
        settings_service: Optional[SettingsService] = None,
    ) -> None:
        self.price_service = price_service or get_metal_price_service()
        self.pipeline = pipeline or RelevancePipeline()
        self.generator = generator or get_post_generator()
        self.publisher = publisher or get_publisher()
        self.settings_service = settings_service or get_settings_service()

    async def _price_branch(self) -> Tuple[PriceOutcome, Optional[PriceSnapshot]]:
        try:
            snapshot = await self.price_service.refresh()
        except Exception as e:
            logger.error("Error fetching metal prices: %s", e)
            return PriceOutcome(success=False, error=_error_message(e)), None
        return (
            PriceOutcome(
                success=True,
                last_updated=snapshot.last_updated,
                prices=snapshot.prices,
            ),
            snapshot,
        )

    async def _news_branch(self) -> Tuple[NewsOutcome, Optional[List[NewsArticle]]]:
        try:
            report = await self.pipeline.run()
        except Exception as e:
            logger.error("Error fetching news: %s", e)
            return NewsOutcome(success=False, error=_error_message(e)), None

        articles = report.articles
        if not articles:
            return (
                NewsOutcome(
                    success=False,
                    articles_checked=len(report.verdicts),
                    message=NO_RELEVANT_NEWS_MESSAGE,
                    feed_errors=report.feed_errors,
                ),
                None,
            )
        return (
            NewsOutcome(
                success=True,
                articles_found=len(articles),
                article_title=articles[0].title,
                articles_checked=len(report.verdicts),
                feed_errors=report.feed_errors,
            ),
            articles,
        )

    async def _post_branch(
        self,
        articles: Optional[List[NewsArticle]],
        snapshot: Optional[PriceSnapshot],
    ) -> PostOutcome:
        article = articles[0] if articles else None
        source = classify_source(article, snapshot)
        logger.info("Composing post from %s", source.value)

        try:
            bot_settings = self.settings_service.read()
            post = await self.generator.compose(article, snapshot, bot_settings)
            receipt = await self.publisher.publish(post.text)
        except Exception as e:
            logger.error("Error generating/posting: %s", e)
            return PostOutcome(success=False, source=source.value, error=_error_message(e))

        return PostOutcome(
            success=True,
            source=post.source.value,
            post_id=receipt.post_id,
            post_text=receipt.text or post.text,
        )

    async def run_cycle(self) -> CycleResult:
        """
        Run one cycle.

        Returns:
            CycleResult with one outcome per branch

        Raises:
            Exception: Only for failures outside the three guarded branches
        """
        logger.info("Starting bot cycle")
        price_outcome, snapshot = await self._price_branch()
        news_outcome, articles = await self._news_branch()
        post_outcome = await self._post_branch(articles, snapshot)

        logger.info(
            "Bot cycle finished: prices=%s, news=%s, post=%s",
            price_outcome.success, news_outcome.success, post_outcome.success,
        )
        return CycleResult(
            metal_prices=price_outcome,
            news=news_outcome,
            post=post_outcome,
        )


def get_cycle_service() -> CycleService:
    """Build a CycleService wired to the shared service singletons."""
    return CycleService()
