"""
Alpha Vantage client (``https://www.alphavantage.co/query``).

All functions share one endpoint selected by the ``function`` query
parameter. Responses use numbered keys and string numbers; this module maps
them onto :mod:`investimentos.schemas.alpha_vantage` models. Numbers that do
not parse become ``0`` rather than failing the whole quote.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from investimentos.clients.base import ProviderClient
from investimentos.schemas.alpha_vantage import (
    DailyBar,
    StockQuote,
    SymbolMatch,
    TechnicalIndicator,
    TimeSeries,
)

logger = logging.getLogger(__name__)

INVALID_CALL_MARKER = "Invalid API call"


def parse_float(value: Any) -> float:
    """Lenient number parsing: ``"1.5%"`` → 1.5, ``None``/garbage → 0.0."""
    if value is None:
        return 0.0
    try:
        return float(str(value).replace("%", "").strip())
    except ValueError:
        return 0.0


def parse_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def parse_timestamp(value: Optional[str]) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def quote_from_payload(raw: Dict[str, Any], symbol: str) -> StockQuote:
    """Map a ``"Global Quote"`` object onto :class:`StockQuote`."""
    return StockQuote(
        symbol=raw.get("01. symbol") or symbol,
        open_price=parse_float(raw.get("02. open")),
        high_price=parse_float(raw.get("03. high")),
        low_price=parse_float(raw.get("04. low")),
        current_price=parse_float(raw.get("05. price")),
        volume=parse_int(raw.get("06. volume")),
        last_updated=parse_timestamp(raw.get("07. latest trading day")),
        previous_close=parse_float(raw.get("08. previous close")),
        change=parse_float(raw.get("09. change")),
        change_percent=parse_float(raw.get("10. change percent")),
        currency="USD",
    )


def _strip_numbering(key: str) -> str:
    """``"3. Last Refreshed"`` → ``"Last Refreshed"``."""
    head, sep, tail = key.partition(". ")
    return tail if sep and head.isdigit() else key


class AlphaVantageClient(ProviderClient):
    """Async Alpha Vantage client. Every method returns ``None`` on failure."""

    PROVIDER_NAME = "Alpha Vantage"

    def _provider_error(self, payload: Any) -> Optional[str]:
        if isinstance(payload, dict) and "Error Message" in payload:
            return str(payload["Error Message"])
        return None

    async def _query(self, function: str, context: str, **params: Any) -> Optional[Dict[str, Any]]:
        query = {"function": function, **params, "apikey": self._config.api_key}
        payload = await self._get_json("", query, context)
        if payload is not None and not isinstance(payload, dict):
            logger.error("Unexpected %s payload for %s", function, context, extra={"symbol": context})
            return None
        return payload

    async def get_quote(self, symbol: str) -> Optional[StockQuote]:
        logger.info("Fetching quote for %s", symbol, extra={"symbol": symbol})
        payload = await self._query("GLOBAL_QUOTE", symbol, symbol=symbol)
        if payload is None:
            return None
        if any(isinstance(v, str) and INVALID_CALL_MARKER in v for v in payload.values()):
            logger.error("Alpha Vantage rejected quote call for %s", symbol, extra={"symbol": symbol})
            return None
        raw = payload.get("Global Quote")
        if not raw:
            logger.warning("Empty quote from Alpha Vantage for %s", symbol, extra={"symbol": symbol})
            return None
        return quote_from_payload(raw, symbol)

    async def get_daily_time_series(
        self, symbol: str, output_size: str = "compact"
    ) -> Optional[TimeSeries]:
        logger.info("Fetching daily series for %s (%s)", symbol, output_size, extra={"symbol": symbol})
        payload = await self._query(
            "TIME_SERIES_DAILY", symbol, symbol=symbol, outputsize=output_size
        )
        if payload is None:
            return None
        series = payload.get("Time Series (Daily)")
        if not isinstance(series, dict):
            logger.warning("No daily series from Alpha Vantage for %s", symbol, extra={"symbol": symbol})
            return None
        bars = [
            DailyBar(
                date=day,
                open=parse_float(values.get("1. open")),
                high=parse_float(values.get("2. high")),
                low=parse_float(values.get("3. low")),
                close=parse_float(values.get("4. close")),
                volume=parse_int(values.get("5. volume")),
            )
            for day, values in series.items()
        ]
        bars.sort(key=lambda bar: bar.date, reverse=True)
        metadata = {_strip_numbering(k): str(v) for k, v in payload.get("Meta Data", {}).items()}
        return TimeSeries(symbol=symbol, metadata=metadata, bars=bars)

    async def search_symbol(self, keywords: str) -> Optional[List[SymbolMatch]]:
        logger.info("Searching symbols for '%s'", keywords, extra={"symbol": keywords})
        payload = await self._query("SYMBOL_SEARCH", keywords, keywords=keywords)
        if payload is None:
            return None
        matches = payload.get("bestMatches")
        if matches is None:
            return None
        return [
            SymbolMatch(
                symbol=m.get("1. symbol", ""),
                name=m.get("2. name", ""),
                type=m.get("3. type", ""),
                region=m.get("4. region", ""),
                market_open=m.get("5. marketOpen", ""),
                market_close=m.get("6. marketClose", ""),
                timezone=m.get("7. timezone", ""),
                currency=m.get("8. currency", ""),
                match_score=parse_float(m.get("9. matchScore")),
            )
            for m in matches
        ]

    async def get_technical_indicator(
        self,
        symbol: str,
        indicator: str,
        interval: str = "daily",
        time_period: int = 20,
    ) -> Optional[TechnicalIndicator]:
        logger.info(
            "Fetching %s(%d, %s) for %s", indicator, time_period, interval, symbol,
            extra={"symbol": symbol},
        )
        payload = await self._query(
            indicator,
            symbol,
            symbol=symbol,
            interval=interval,
            time_period=time_period,
            series_type="close",
        )
        if payload is None:
            return None
        series_key = next((k for k in payload if k.startswith("Technical Analysis")), None)
        if series_key is None:
            logger.warning(
                "No %s data from Alpha Vantage for %s", indicator, symbol, extra={"symbol": symbol}
            )
            return None
        values = {
            day: {name: parse_float(v) for name, v in point.items()}
            for day, point in sorted(payload[series_key].items(), reverse=True)
        }
        metadata = {_strip_numbering(k): str(v) for k, v in payload.get("Meta Data", {}).items()}
        return TechnicalIndicator(indicator=indicator, metadata=metadata, values=values)
