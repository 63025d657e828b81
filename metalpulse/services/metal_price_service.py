"""
Gold and silver spot prices from Metal Price API with a single-slot file cache.

The provider's response shape has varied over time (flat, wrapped in a
"data" object, different key casing), so the payload is normalized before it
becomes a PriceSnapshot. Reading the cache never raises.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx

from metalpulse.config import settings
from metalpulse.core.exceptions import UpstreamError
from metalpulse.schemas.metal_prices import (
    BASE_CURRENCY,
    INSTRUMENTS,
    MetalPrices,
    PriceSnapshot,
)
from metalpulse.services.settings_service import write_json_atomic

logger = logging.getLogger(__name__)

CACHE_FILENAME = "metal-prices.json"
SOURCE = "metalpriceapi"

# Limits for describe_payload_shape()
SHAPE_SUMMARY_MAX_CHARS = 200
SHAPE_MAX_DEPTH = 3
SHAPE_MAX_KEYS = 8


def _lookup(mapping: Mapping[str, Any], key: str) -> Any:
    """Case-insensitive dict lookup."""
    if key in mapping:
        return mapping[key]
    lowered = key.lower()
    for k, v in mapping.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    return None


def _as_price(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    value = float(value)
    if value != value or value <= 0:  # NaN or non-positive
        return None
    return value


def _extract_rates(block: Mapping[str, Any]) -> Dict[str, Optional[float]]:
    """Read XAU/XAG from one rate block.

    "USDXAU" style keys are USD per ounce and win over the bare symbol.
    """
    rates: Dict[str, Optional[float]] = {}
    for symbol in INSTRUMENTS:
        price = _as_price(_lookup(block, f"{BASE_CURRENCY}{symbol}"))
        if price is None:
            price = _as_price(_lookup(block, symbol))
        rates[symbol] = price
    return rates


def normalize_price_payload(payload: Any) -> MetalPrices:
    """
    Normalize a provider response into MetalPrices.

    Accepted shapes (keys matched case-insensitively):
        {"rates": {"XAU": ..}}
        {"data": {"rates": {"XAU": ..}}}
        {"data": {"XAU": ..}}
        {"XAU": ..}

    Raises:
        UpstreamError: If no recognizable price is found. The message
            describes the payload shape, never its raw content.
    """
    candidates = []
    if isinstance(payload, Mapping):
        data = _lookup(payload, "data")
        if isinstance(data, Mapping):
            nested = _lookup(data, "rates")
            if isinstance(nested, Mapping):
                candidates.append(nested)
            candidates.append(data)
        rates = _lookup(payload, "rates")
        if isinstance(rates, Mapping):
            candidates.append(rates)
        candidates.append(payload)

    for block in candidates:
        rates = _extract_rates(block)
        if any(v is not None for v in rates.values()):
            return MetalPrices(**rates)

    raise UpstreamError(
        f"No recognizable price data in API response: {describe_payload_shape(payload)}",
        source=SOURCE,
    )


def describe_payload_shape(payload: Any) -> str:
    """
    Summarize the structure of a payload for diagnostics.

    Only key names and value types are reported. Self-references are shown
    as "<cycle>", nesting is cut at SHAPE_MAX_DEPTH, and the result is
    truncated to SHAPE_SUMMARY_MAX_CHARS.
    """

    def describe(value: Any, depth: int, seen: frozenset) -> str:
        if isinstance(value, (Mapping, list, tuple)):
            if id(value) in seen:
                return "<cycle>"
            if depth >= SHAPE_MAX_DEPTH:
                return "{...}" if isinstance(value, Mapping) else "[...]"
            seen = seen | {id(value)}
            if isinstance(value, Mapping):
                keys = list(value.keys())
                parts = [
                    f"{k}: {describe(value[k], depth + 1, seen)}"
                    for k in keys[:SHAPE_MAX_KEYS]
                ]
                if len(keys) > SHAPE_MAX_KEYS:
                    parts.append(f"+{len(keys) - SHAPE_MAX_KEYS} more")
                return "{" + ", ".join(parts) + "}"
            if not value:
                return "[]"
            return f"[{describe(value[0], depth + 1, seen)} x{len(value)}]"
        if value is None:
            return "null"
        return type(value).__name__

    summary = describe(payload, 0, frozenset())
    if len(summary) > SHAPE_SUMMARY_MAX_CHARS:
        summary = summary[: SHAPE_SUMMARY_MAX_CHARS - 3] + "..."
    return summary


class MetalPriceService:
    """Fetches live spot prices and manages the cached snapshot."""

    def __init__(
        self,
        cache_path: Optional[Path] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._cache_path = cache_path
        self._http_client = http_client

    @property
    def cache_path(self) -> Path:
        return self._cache_path or settings.data_path / CACHE_FILENAME

    async def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        if self._http_client is not None:
            response = await self._http_client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
                response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def fetch_live(self) -> PriceSnapshot:
        """
        Fetch current gold and silver prices.

        Raises:
            ConfigError: If METAL_PRICE_API is not set
            UpstreamError: On transport failure, HTTP error or unusable payload
        """
        (api_key,) = settings.require("METAL_PRICE_API")
        url = f"{settings.METAL_PRICE_API_URL.rstrip('/')}/latest"
        params = {
            "api_key": api_key,
            "base": BASE_CURRENCY,
            "currencies": ",".join(INSTRUMENTS),
        }

        try:
            payload = await self._get_json(url, params)
        except httpx.HTTPStatusError as e:
            logger.error("Metal Price API error: %s", e.response.status_code)
            raise UpstreamError(
                f"Metal Price API error: {e.response.status_code} {e.response.reason_phrase}",
                source=SOURCE,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("Metal Price API request error: %s", e)
            raise UpstreamError(f"Metal Price API request failed: {e}", source=SOURCE) from e
        except ValueError as e:
            raise UpstreamError("Metal Price API returned invalid JSON", source=SOURCE) from e

        if isinstance(payload, Mapping) and payload.get("success") is False:
            detail = payload.get("error")
            if isinstance(detail, Mapping):
                detail = detail.get("info") or detail.get("message")
            raise UpstreamError(
                f"Metal Price API returned an error: {detail or 'unknown error'}",
                source=SOURCE,
            )

        prices = normalize_price_payload(payload)
        snapshot = PriceSnapshot(
            last_updated=datetime.now(timezone.utc).isoformat(),
            prices=prices,
            base=BASE_CURRENCY,
        )
        logger.info("Fetched metal prices: XAU=%s, XAG=%s", prices.XAU, prices.XAG)
        return snapshot

    def read(self) -> PriceSnapshot:
        """Return the cached snapshot, or the default snapshot. Never raises."""
        try:
            if not self.cache_path.exists():
                return PriceSnapshot.default()
            with open(self.cache_path, "r", encoding="utf-8") as f:
                cache = json.load(f)
            prices = cache.get("prices") or {}
            return PriceSnapshot(
                last_updated=cache.get("lastUpdated") or None,
                prices=MetalPrices(
                    XAU=_as_price(prices.get("XAU")),
                    XAG=_as_price(prices.get("XAG")),
                ),
                base=cache.get("base") or BASE_CURRENCY,
            )
        except Exception as e:
            logger.warning("Error reading metal prices cache: %s", e)
            return PriceSnapshot.default()

    def write(self, snapshot: PriceSnapshot) -> None:
        """Persist the snapshot, replacing any previous one.

        Raises:
            OSError: If the cache file cannot be written
        """
        try:
            write_json_atomic(self.cache_path, snapshot.model_dump(mode="json"))
        except OSError as e:
            logger.error("Error writing metal prices cache: %s", e)
            raise
        logger.debug("Metal prices cached at %s", self.cache_path)

    async def refresh(self) -> PriceSnapshot:
        """Fetch live prices and persist them. No write happens on failure."""
        snapshot = await self.fetch_live()
        self.write(snapshot)
        return snapshot


_price_service: Optional[MetalPriceService] = None


def get_metal_price_service() -> MetalPriceService:
    """Get the singleton MetalPriceService instance."""
    global _price_service
    if _price_service is None:
        _price_service = MetalPriceService()
    return _price_service
