"""
MarketStack client (``https://api.marketstack.com/v1``).

Authenticates with the ``access_key`` query parameter. Optional filters are
only sent when given; dates go out as ``YYYY-MM-DD``. List endpoints return
the ``{pagination, data}`` envelope, single-resource endpoints a bare object.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from investimentos.clients.base import ProviderClient
from investimentos.schemas.marketstack import (
    DividendPage,
    EodPage,
    Exchange,
    ExchangePage,
    IntradayPage,
    SplitPage,
    Ticker,
    TickerPage,
)

logger = logging.getLogger(__name__)

INTRADAY_INTERVALS = (
    "1min", "5min", "10min", "15min", "30min",
    "1hour", "3hour", "6hour", "12hour", "24hour",
)

M = TypeVar("M", bound=BaseModel)


class MarketStackClient(ProviderClient):
    """Async MarketStack client. Every method returns ``None`` on failure."""

    PROVIDER_NAME = "MarketStack"

    def _provider_error(self, payload: Any) -> Optional[str]:
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error = payload["error"]
            return f"{error.get('code', 'error')}: {error.get('message', '')}"
        return None

    def _params(self, **params: Any) -> Dict[str, Any]:
        query: Dict[str, Any] = {"access_key": self._config.api_key}
        for key, value in params.items():
            if value is None or value == "":
                continue
            query[key] = value.isoformat() if isinstance(value, date) else value
        return query

    async def _fetch(self, path: str, model: Type[M], context: str, **params: Any) -> Optional[M]:
        payload = await self._get_json(path, self._params(**params), context)
        if payload is None:
            return None
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.error(
                "Unexpected MarketStack payload on /%s for %s: %s", path, context, e,
                extra={"symbol": context},
            )
            return None

    # ── End-of-day ──

    async def get_eod(
        self,
        symbols: str,
        exchange: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Optional[EodPage]:
        logger.info("Fetching EOD data for %s", symbols, extra={"symbol": symbols})
        return await self._fetch(
            "eod", EodPage, symbols,
            symbols=symbols, exchange=exchange, date_from=date_from, date_to=date_to,
            limit=limit, offset=offset,
        )

    async def get_latest_eod(self, symbols: str, exchange: Optional[str] = None) -> Optional[EodPage]:
        return await self._fetch("eod/latest", EodPage, symbols, symbols=symbols, exchange=exchange)

    async def get_eod_by_date(
        self, symbols: str, day: date, exchange: Optional[str] = None
    ) -> Optional[EodPage]:
        return await self._fetch(
            f"eod/{day.isoformat()}", EodPage, symbols, symbols=symbols, exchange=exchange
        )

    # ── Intraday ──

    async def get_intraday(
        self,
        symbols: str,
        exchange: Optional[str] = None,
        interval: str = "1hour",
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Optional[IntradayPage]:
        logger.info("Fetching intraday (%s) data for %s", interval, symbols, extra={"symbol": symbols})
        return await self._fetch(
            "intraday", IntradayPage, symbols,
            symbols=symbols, exchange=exchange, interval=interval,
            date_from=date_from, date_to=date_to, limit=limit, offset=offset,
        )

    async def get_latest_intraday(
        self, symbols: str, exchange: Optional[str] = None, interval: str = "1hour"
    ) -> Optional[IntradayPage]:
        return await self._fetch(
            "intraday/latest", IntradayPage, symbols,
            symbols=symbols, exchange=exchange, interval=interval,
        )

    # ── Reference data ──

    async def get_tickers(
        self,
        exchange: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Optional[TickerPage]:
        return await self._fetch(
            "tickers", TickerPage, search or "*",
            exchange=exchange, search=search, limit=limit, offset=offset,
        )

    async def get_ticker(self, symbol: str) -> Optional[Ticker]:
        return await self._fetch(f"tickers/{symbol}", Ticker, symbol)

    async def get_exchanges(
        self, search: Optional[str] = None, limit: int = 100, offset: int = 0
    ) -> Optional[ExchangePage]:
        return await self._fetch(
            "exchanges", ExchangePage, search or "*", search=search, limit=limit, offset=offset
        )

    async def get_exchange(self, mic: str) -> Optional[Exchange]:
        return await self._fetch(f"exchanges/{mic}", Exchange, mic)

    # ── Corporate actions ──

    async def get_dividends(
        self,
        symbols: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Optional[DividendPage]:
        return await self._fetch(
            "dividends", DividendPage, symbols,
            symbols=symbols, date_from=date_from, date_to=date_to, limit=limit, offset=offset,
        )

    async def get_splits(
        self,
        symbols: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Optional[SplitPage]:
        return await self._fetch(
            "splits", SplitPage, symbols,
            symbols=symbols, date_from=date_from, date_to=date_to, limit=limit, offset=offset,
        )
