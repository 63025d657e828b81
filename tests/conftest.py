"""
Pytest configuration and fixtures for MetalPulse tests.
"""
from typing import List, Optional

import pytest

from metalpulse.config import settings
from metalpulse.core.llm import ChatRequest, ChatResponse
from metalpulse.schemas.metal_prices import MetalPrices, PriceSnapshot
from metalpulse.services.news_service import NewsArticle


class FakeGateway:
    """LLM gateway stand-in returning canned replies in order."""

    def __init__(self, replies: Optional[List[object]] = None):
        self.replies = list(replies or [])
        self.requests: List[ChatRequest] = []

    async def chat(self, request: ChatRequest, *, purpose: str = "") -> ChatResponse:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, BaseException):
            raise reply
        return ChatResponse(content=reply, model=request.model)

    @property
    def last_prompt(self) -> str:
        return self.requests[-1].messages[-1].content


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point persisted state at a temp dir and clear credentials."""
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "CRON_SECRET", None)
    for name in (
        "METAL_PRICE_API",
        "NEWS_DATA_API",
        "OPENAI_API_KEY",
        "CONSUMER_KEY",
        "CONSUMER_KEY_SECRET",
        "ACCESS_TOKEN",
        "ACCESS_TOKEN_SECRET",
    ):
        monkeypatch.setattr(settings, name, None)
    return settings


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


def make_article(index: int, title: Optional[str] = None, **kwargs) -> NewsArticle:
    return NewsArticle(
        title=title or f"Article {index}",
        link=f"https://example.com/news/{index}",
        published_at="2026-10-18 08:00:00",
        description=kwargs.pop("description", f"Description {index}"),
        **kwargs,
    )


@pytest.fixture
def sample_articles():
    """Twelve distinct articles."""
    return [make_article(i) for i in range(12)]


@pytest.fixture
def sample_snapshot():
    """A fetched gold/silver snapshot."""
    return PriceSnapshot(
        last_updated="2026-10-18T08:00:00+00:00",
        prices=MetalPrices(XAU=4012.5, XAG=50.125),
        base="USD",
    )


@pytest.fixture
def sample_newsdata_results():
    """NewsData.io result items as returned by the API."""
    return [
        {
            "article_id": "a1",
            "title": "Fed holds rates steady as inflation cools",
            "link": "https://example.com/fed",
            "description": "The Federal Reserve kept rates unchanged.",
            "content": "Full content about the Fed.",
            "pubDate": "2026-10-18 07:00:00",
            "source_id": "reuters",
            "keywords": ["fed", "inflation"],
            "creator": ["Jane Doe"],
        },
        {
            "article_id": "a2",
            "title": "Bitcoin rallies",
            "link": "https://example.com/btc",
            "pubDate": "2026-10-18 06:00:00",
            "source_id": None,
            "keywords": None,
        },
        {
            # No title: skipped
            "article_id": "a3",
            "link": "https://example.com/untitled",
            "pubDate": "2026-10-18 05:00:00",
        },
    ]
