"""
Tests for the metal price fetcher and its cache.
"""
import json

import httpx
import pytest

from metalpulse.core.exceptions import ConfigError, UpstreamError
from metalpulse.schemas.metal_prices import MetalPrices, PriceSnapshot
from metalpulse.services.metal_price_service import (
    CACHE_FILENAME,
    SHAPE_SUMMARY_MAX_CHARS,
    MetalPriceService,
    describe_payload_shape,
    normalize_price_payload,
)


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestNormalizePricePayload:
    """Tests for response shape normalization."""

    def test_data_wrapped_rates(self):
        prices = normalize_price_payload({"data": {"rates": {"XAU": 4000, "XAG": 50}}})
        assert prices == MetalPrices(XAU=4000.0, XAG=50.0)

    def test_flat_rates(self):
        prices = normalize_price_payload({"success": True, "base": "USD", "rates": {"XAU": 4000, "XAG": 50}})
        assert prices == MetalPrices(XAU=4000.0, XAG=50.0)

    def test_data_without_rates(self):
        prices = normalize_price_payload({"data": {"XAU": 4000, "XAG": 50}})
        assert prices == MetalPrices(XAU=4000.0, XAG=50.0)

    def test_top_level_symbols(self):
        prices = normalize_price_payload({"XAU": 4000, "XAG": 50})
        assert prices == MetalPrices(XAU=4000.0, XAG=50.0)

    def test_case_varied_keys(self):
        prices = normalize_price_payload({"Data": {"RATES": {"xau": "4000.5", "Xag": 50}}})
        assert prices == MetalPrices(XAU=4000.5, XAG=50.0)

    def test_usd_prefixed_keys_preferred(self):
        prices = normalize_price_payload(
            {"rates": {"XAU": 0.00025, "USDXAU": 4000, "XAG": 0.02, "USDXAG": 50}}
        )
        assert prices == MetalPrices(XAU=4000.0, XAG=50.0)

    def test_one_instrument_missing_is_null(self):
        prices = normalize_price_payload({"rates": {"XAU": 4000}})
        assert prices.XAU == 4000.0
        assert prices.XAG is None

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"rates": {}},
            {"data": {"rates": {"EUR": 0.9}}},
            {"rates": {"XAU": "n/a", "XAG": None}},
            {"rates": {"XAU": 0, "XAG": -1}},
            [1, 2, 3],
            None,
        ],
    )
    def test_unrecognizable_payload_raises(self, payload):
        with pytest.raises(UpstreamError) as exc_info:
            normalize_price_payload(payload)
        assert "No recognizable price data" in str(exc_info.value)

    def test_error_describes_shape_not_values(self):
        with pytest.raises(UpstreamError) as exc_info:
            normalize_price_payload({"secret": "sk-very-secret", "rates": {"EUR": 0.9}})
        message = str(exc_info.value)
        assert "sk-very-secret" not in message
        assert "secret: str" in message
        assert "rates: {EUR: float}" in message


class TestDescribePayloadShape:
    """Tests for the diagnostic shape summary."""

    def test_scalar_types(self):
        assert describe_payload_shape({"a": 1, "b": None, "c": [1, 2]}) == "{a: int, b: null, c: [int x2]}"

    def test_self_reference_terminates(self):
        payload = {"name": "loop"}
        payload["self"] = payload
        summary = describe_payload_shape(payload)
        assert "<cycle>" in summary

    def test_truncated(self):
        payload = {f"key_{i}": {"nested": {"deeper": {"deepest": i}}} for i in range(50)}
        summary = describe_payload_shape(payload)
        assert len(summary) <= SHAPE_SUMMARY_MAX_CHARS
        assert summary.endswith("...")


class TestCache:
    """Tests for cache read/write."""

    def test_read_missing_returns_default(self, data_dir):
        service = MetalPriceService()
        snapshot = service.read()
        assert snapshot == PriceSnapshot.default()
        assert snapshot.model_dump(mode="json") == {
            "lastUpdated": None,
            "prices": {"XAU": None, "XAG": None},
            "base": "USD",
        }

    @pytest.mark.parametrize("content", ["not json", "[]", '{"prices": "oops"}', ""])
    def test_read_corrupt_returns_default(self, data_dir, content):
        data_dir.mkdir(parents=True)
        (data_dir / CACHE_FILENAME).write_text(content, encoding="utf-8")
        assert MetalPriceService().read() == PriceSnapshot.default()

    def test_write_creates_directory_and_round_trips(self, data_dir, sample_snapshot):
        service = MetalPriceService()
        service.write(sample_snapshot)

        assert (data_dir / CACHE_FILENAME).exists()
        assert service.read() == sample_snapshot

    def test_write_replaces_previous_snapshot(self, sample_snapshot):
        service = MetalPriceService()
        service.write(sample_snapshot)
        newer = PriceSnapshot(
            last_updated="2026-10-18T09:00:00+00:00",
            prices=MetalPrices(XAU=4100.0),
        )
        service.write(newer)
        assert service.read() == newer


class TestFetchLive:
    """Tests for live price fetching."""

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        service = MetalPriceService(http_client=mock_client(lambda r: httpx.Response(200)))
        with pytest.raises(ConfigError) as exc_info:
            await service.fetch_live()
        assert "METAL_PRICE_API" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_fetch_and_normalize(self, monkeypatch, isolated_settings):
        monkeypatch.setattr(isolated_settings, "METAL_PRICE_API", "test-key")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"data": {"rates": {"XAU": 4000, "XAG": 50}}})

        service = MetalPriceService(http_client=mock_client(handler))
        snapshot = await service.fetch_live()

        assert snapshot.prices == MetalPrices(XAU=4000.0, XAG=50.0)
        assert snapshot.base == "USD"
        assert snapshot.last_updated is not None
        assert seen["params"] == {"api_key": "test-key", "base": "USD", "currencies": "XAU,XAG"}

    @pytest.mark.asyncio
    async def test_http_error(self, monkeypatch, isolated_settings):
        monkeypatch.setattr(isolated_settings, "METAL_PRICE_API", "test-key")
        service = MetalPriceService(
            http_client=mock_client(lambda r: httpx.Response(503, text="down"))
        )
        with pytest.raises(UpstreamError) as exc_info:
            await service.fetch_live()
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_provider_error_body(self, monkeypatch, isolated_settings):
        monkeypatch.setattr(isolated_settings, "METAL_PRICE_API", "test-key")
        service = MetalPriceService(
            http_client=mock_client(
                lambda r: httpx.Response(200, json={"success": False, "error": {"info": "Invalid API key"}})
            )
        )
        with pytest.raises(UpstreamError) as exc_info:
            await service.fetch_live()
        assert "Invalid API key" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_refresh_failure_writes_nothing(self, monkeypatch, isolated_settings, data_dir):
        monkeypatch.setattr(isolated_settings, "METAL_PRICE_API", "test-key")
        service = MetalPriceService(
            http_client=mock_client(lambda r: httpx.Response(200, json={"unexpected": {"shape": 1}}))
        )
        with pytest.raises(UpstreamError):
            await service.refresh()
        assert not (data_dir / CACHE_FILENAME).exists()

    @pytest.mark.asyncio
    async def test_refresh_persists_snapshot(self, monkeypatch, isolated_settings, data_dir):
        monkeypatch.setattr(isolated_settings, "METAL_PRICE_API", "test-key")
        service = MetalPriceService(
            http_client=mock_client(lambda r: httpx.Response(200, json={"rates": {"XAU": 4000, "XAG": 50}}))
        )
        snapshot = await service.refresh()

        on_disk = json.loads((data_dir / CACHE_FILENAME).read_text(encoding="utf-8"))
        assert on_disk["prices"] == {"XAU": 4000.0, "XAG": 50.0}
        assert on_disk["lastUpdated"] == snapshot.last_updated
