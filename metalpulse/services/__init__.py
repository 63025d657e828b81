# Services module
from metalpulse.services.cycle_service import CycleService, get_cycle_service
from metalpulse.services.metal_price_service import (
    MetalPriceService,
    describe_payload_shape,
    get_metal_price_service,
    normalize_price_payload,
)
from metalpulse.services.news_filter_service import (
    NewsFilterService,
    RelevanceVerdict,
    get_news_filter_service,
)
from metalpulse.services.news_service import (
    FeedKind,
    NewsArticle,
    NewsService,
    get_news_service,
)
from metalpulse.services.post_generator import (
    GeneratedPost,
    PostGenerator,
    PostSource,
    get_post_generator,
)
from metalpulse.services.publisher import PostReceipt, Publisher, get_publisher
from metalpulse.services.relevance_pipeline import RelevancePipeline, RelevanceReport
from metalpulse.services.settings_service import SettingsService, get_settings_service

__all__ = [
    "CycleService",
    "get_cycle_service",
    "MetalPriceService",
    "describe_payload_shape",
    "get_metal_price_service",
    "normalize_price_payload",
    "NewsFilterService",
    "RelevanceVerdict",
    "get_news_filter_service",
    "FeedKind",
    "NewsArticle",
    "NewsService",
    "get_news_service",
    "GeneratedPost",
    "PostGenerator",
    "PostSource",
    "get_post_generator",
    "PostReceipt",
    "Publisher",
    "get_publisher",
    "RelevancePipeline",
    "RelevanceReport",
    "SettingsService",
    "get_settings_service",
]
