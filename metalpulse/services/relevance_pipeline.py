"""Relevance pipeline: both feeds in, up to a few relevant articles out."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from metalpulse.config import settings
from metalpulse.services.news_filter_service import (
    RelevanceVerdict,
    get_news_filter_service,
)
from metalpulse.services.news_service import FeedKind, NewsArticle, get_news_service

logger = logging.getLogger(__name__)

FeedFetcher = Callable[[FeedKind], Awaitable[List[NewsArticle]]]
Classifier = Callable[[NewsArticle], Awaitable[RelevanceVerdict]]

# Crypto results come first in the candidate list
FEED_ORDER = (FeedKind.CRYPTO, FeedKind.MARKET)


@dataclass
class RelevanceReport:
    """Everything one pipeline run learned, for the cycle report and logs."""

    accepted: List[NewsArticle] = field(default_factory=list)
    verdicts: List[Tuple[NewsArticle, RelevanceVerdict]] = field(default_factory=list)
    feed_errors: Dict[str, str] = field(default_factory=dict)
    candidates: int = 0

    @property
    def articles(self) -> Optional[List[NewsArticle]]:
        """Accepted articles, or None when nothing was accepted."""
        return list(self.accepted) if self.accepted else None

    def count(self, verdict: RelevanceVerdict) -> int:
        return sum(1 for _, v in self.verdicts if v == verdict)


class RelevancePipeline:
    """
    Fetch both feeds concurrently, then classify candidates one at a time.

    Classification is sequential and stops at the acceptance cap, so the
    number of LLM calls stays proportional to the articles actually needed.
    """

    def __init__(
        self,
        fetch_feed: Optional[FeedFetcher] = None,
        classify: Optional[Classifier] = None,
        per_feed_limit: Optional[int] = None,
        max_relevant: Optional[int] = None,
    ) -> None:
        self._fetch_feed = fetch_feed
        self._classify = classify
        self.per_feed_limit = per_feed_limit or settings.NEWS_PER_FEED_LIMIT
        self.max_relevant = max_relevant or settings.MAX_RELEVANT_ARTICLES

    async def _fetch_all(self) -> Tuple[List[NewsArticle], Dict[str, str]]:
        fetch_feed = self._fetch_feed or get_news_service().fetch_feed
        results = await asyncio.gather(
            *(fetch_feed(kind) for kind in FEED_ORDER),
            return_exceptions=True,
        )

        candidates: List[NewsArticle] = []
        feed_errors: Dict[str, str] = {}
        for kind, result in zip(FEED_ORDER, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Failed to fetch %s news: %s", kind.value, result)
                feed_errors[kind.value] = str(result) or type(result).__name__
                continue
            candidates.extend(result[: self.per_feed_limit])
        return candidates, feed_errors

    async def run(self) -> RelevanceReport:
        """Run the pipeline and return the full report."""
        candidates, feed_errors = await self._fetch_all()
        report = RelevanceReport(feed_errors=feed_errors, candidates=len(candidates))

        if not candidates:
            logger.info("No news articles fetched")
            return report

        classify = self._classify or get_news_filter_service().classify
        for article in candidates:
            if len(report.accepted) >= self.max_relevant:
                break
            verdict = await classify(article)
            report.verdicts.append((article, verdict))
            if verdict == RelevanceVerdict.RELEVANT:
                report.accepted.append(article)

        logger.info(
            "Relevance pipeline: %d candidates, %d checked, %d relevant, %d undetermined",
            len(candidates),
            len(report.verdicts),
            len(report.accepted),
            report.count(RelevanceVerdict.UNDETERMINED),
        )
        if not report.accepted:
            logger.info("No relevant precious metals news found")
        return report

    async def collect_relevant(self) -> Optional[List[NewsArticle]]:
        """Return 1..max_relevant relevant articles, or None if none found."""
        report = await self.run()
        return report.articles
