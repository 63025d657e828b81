"""NewsData.io feed fetching for the crypto and market/business feeds."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import httpx

from metalpulse.config import settings
from metalpulse.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

SOURCE = "newsdata"

# Query used for the market feed (category must be a single value)
MARKET_NEWS_CATEGORY = "business"
MARKET_NEWS_QUERY = "market economy inflation fed interest currency"


class FeedKind(str, Enum):
    """Upstream news feeds."""

    CRYPTO = "crypto"
    MARKET = "market"


@dataclass(frozen=True)
class NewsArticle:
    """News article as returned by NewsData.io. Never persisted."""

    title: str
    link: str
    published_at: str
    description: Optional[str] = None
    content: Optional[str] = None
    source: Optional[str] = None
    keywords: Tuple[str, ...] = field(default_factory=tuple)
    article_id: Optional[str] = None
    creator: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> Optional["NewsArticle"]:
        """Build an article from one NewsData.io result, or None if unusable."""
        title = item.get("title")
        link = item.get("link")
        if not isinstance(title, str) or not title.strip() or not isinstance(link, str):
            return None

        def _str_tuple(value: Any) -> Tuple[str, ...]:
            if not isinstance(value, list):
                return ()
            return tuple(v for v in value if isinstance(v, str))

        def _opt_str(value: Any) -> Optional[str]:
            return value if isinstance(value, str) and value else None

        return cls(
            title=title.strip(),
            link=link,
            published_at=item.get("pubDate") or "",
            description=_opt_str(item.get("description")),
            content=_opt_str(item.get("content")),
            source=_opt_str(item.get("source_id")),
            keywords=_str_tuple(item.get("keywords")),
            article_id=_opt_str(item.get("article_id")),
            creator=_str_tuple(item.get("creator")),
        )

    def to_prompt_dict(self) -> Dict[str, Any]:
        """Fields handed to the post generator."""
        return {
            "title": self.title,
            "content": self.content or self.description or "",
            "source": self.source or "News",
            "publishedAt": self.published_at,
            "link": self.link,
            "category": "Market/Crypto",
        }


class NewsService:
    """Fetches candidate articles from the two NewsData.io feeds."""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self._http_client = http_client

    def _build_request(self, kind: FeedKind, api_key: str) -> Tuple[str, Dict[str, str]]:
        base_url = settings.NEWS_DATA_API_URL.rstrip("/")
        if kind == FeedKind.CRYPTO:
            return f"{base_url}/crypto", {"apikey": api_key}
        return f"{base_url}/latest", {
            "apikey": api_key,
            "category": MARKET_NEWS_CATEGORY,
            "q": MARKET_NEWS_QUERY,
        }

    async def _get(self, url: str, params: Dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.get(url, params=params)
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            return await client.get(url, params=params)

    async def fetch_feed(self, kind: FeedKind) -> List[NewsArticle]:
        """
        Fetch one feed.

        Args:
            kind: Which feed to query

        Returns:
            Articles in the order the provider returned them

        Raises:
            ConfigError: If NEWS_DATA_API is not set
            UpstreamError: On transport failure, non-2xx status or error status
        """
        (api_key,) = settings.require("NEWS_DATA_API")
        url, params = self._build_request(kind, api_key)

        try:
            response = await self._get(url, params)
        except httpx.RequestError as e:
            logger.error("Error fetching %s news: %s", kind.value, e)
            raise UpstreamError(
                f"NewsData.io request failed: {e}", source=SOURCE
            ) from e

        if not response.is_success:
            try:
                error_data = response.json()
                details = (
                    error_data.get("message")
                    if isinstance(error_data, dict) and error_data.get("message")
                    else response.text
                )
            except ValueError:
                details = response.reason_phrase
            logger.error(
                "NewsData.io %s feed error: %d %s", kind.value, response.status_code, details
            )
            raise UpstreamError(
                f"NewsData.io API error: {response.status_code} {response.reason_phrase}. "
                f"Details: {details}",
                source=SOURCE,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("NewsData.io returned invalid JSON", source=SOURCE) from e

        if not isinstance(data, dict) or data.get("status") != "success":
            status = data.get("status") if isinstance(data, dict) else None
            raise UpstreamError(
                f"NewsData.io API returned error status: {status}", source=SOURCE
            )

        articles = []
        for item in data.get("results") or []:
            if not isinstance(item, dict):
                continue
            article = NewsArticle.from_api(item)
            if article is not None:
                articles.append(article)

        logger.info("Fetched %d %s news articles", len(articles), kind.value)
        return articles


_news_service: Optional[NewsService] = None


def get_news_service() -> NewsService:
    """Get the singleton NewsService instance."""
    global _news_service
    if _news_service is None:
        _news_service = NewsService()
    return _news_service
