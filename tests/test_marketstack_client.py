"""
Tests for MarketStackClient using ``httpx.MockTransport``.
"""

from datetime import date

import httpx
import pytest

from investimentos.clients.marketstack import MarketStackClient
from investimentos.core.config import ProviderConfig

BASE_URL = "https://ms.test/v1"

EOD_PAGE = {
    "pagination": {"limit": 100, "offset": 0, "count": 1, "total": 1},
    "data": [
        {
            "symbol": "AAPL",
            "exchange": "XNAS",
            "date": "2024-01-02T00:00:00+0000",
            "open": 187.15,
            "high": 188.44,
            "low": 183.89,
            "close": 185.64,
            "volume": 82488700.0,
            "adj_close": 185.64,
        }
    ],
}


def _client(handler, api_key: str = "ms-key") -> MarketStackClient:
    config = ProviderConfig(api_key=api_key, base_url=BASE_URL, timeout=5)
    return MarketStackClient(config, transport=httpx.MockTransport(handler))


class TestConfiguration:
    def test_unconfigured_without_key(self):
        assert _client(lambda r: httpx.Response(200), api_key="").is_configured is False
        assert _client(lambda r: httpx.Response(200)).is_configured is True


class TestEod:
    @pytest.mark.asyncio
    async def test_query_parameters(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=EOD_PAGE)

        page = await _client(handler).get_eod(
            "AAPL", date_from=date(2024, 1, 1), date_to=date(2024, 1, 31), limit=10
        )

        assert seen["path"] == "/v1/eod"
        assert seen["params"] == {
            "access_key": "ms-key",
            "symbols": "AAPL",
            "date_from": "2024-01-01",
            "date_to": "2024-01-31",
            "limit": "10",
            "offset": "0",
        }
        assert page.pagination.total == 1
        assert page.data[0].close == pytest.approx(185.64)
        assert page.data[0].adj_close == pytest.approx(185.64)

    @pytest.mark.asyncio
    async def test_eod_by_date_path(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json=EOD_PAGE)

        await _client(handler).get_eod_by_date("AAPL", date(2024, 1, 2))

        assert seen["path"] == "/v1/eod/2024-01-02"

    @pytest.mark.asyncio
    async def test_error_body_returns_none(self):
        body = {"error": {"code": "invalid_access_key", "message": "You have not supplied a valid API Access Key."}}
        client = _client(lambda r: httpx.Response(200, json=body))

        assert await client.get_latest_eod("AAPL") is None

    @pytest.mark.asyncio
    async def test_http_401_returns_none(self):
        client = _client(lambda r: httpx.Response(401, json={"error": {"code": "unauthorized"}}))

        assert await client.get_eod("AAPL") is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        assert await _client(handler).get_eod("AAPL") is None


class TestReferenceData:
    @pytest.mark.asyncio
    async def test_single_ticker(self):
        body = {
            "name": "Apple Inc",
            "symbol": "AAPL",
            "stock_exchange": {"name": "NASDAQ Stock Exchange", "acronym": "NASDAQ", "mic": "XNAS"},
        }
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json=body)

        ticker = await _client(handler).get_ticker("AAPL")

        assert seen["path"] == "/v1/tickers/AAPL"
        assert ticker.stock_exchange.mic == "XNAS"

    @pytest.mark.asyncio
    async def test_exchange_with_timezone(self):
        body = {
            "name": "NASDAQ Stock Exchange",
            "mic": "XNAS",
            "country_code": "US",
            "timezone": {"timezone": "America/New_York", "abbr": "EST", "abbr_dst": "EDT"},
        }

        exchange = await _client(lambda r: httpx.Response(200, json=body)).get_exchange("XNAS")

        assert exchange.country_code == "US"
        assert exchange.timezone.abbr_dst == "EDT"

    @pytest.mark.asyncio
    async def test_search_is_omitted_when_absent(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"pagination": None, "data": []})

        page = await _client(handler).get_tickers(exchange="XNAS")

        assert "search" not in seen["params"]
        assert seen["params"]["exchange"] == "XNAS"
        assert page.data == []

    @pytest.mark.asyncio
    async def test_unexpected_shape_returns_none(self):
        client = _client(lambda r: httpx.Response(200, json={"data": "not-a-list"}))

        assert await client.get_dividends("AAPL") is None
