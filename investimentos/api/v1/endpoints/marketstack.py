"""
MarketStack pass-through endpoints (``/marketstack``).

Returns 503 when no MarketStack API key is configured, 404 when the provider
returns nothing usable. ``limit`` is capped at 1000 like the provider.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from investimentos.clients.marketstack import INTRADAY_INTERVALS, MarketStackClient
from investimentos.core.exceptions import (
    AppException,
    BadRequestException,
    ServiceUnavailableException,
)
from investimentos.schemas.common import ErrorResponse
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

router = APIRouter()

RESPONSES = {
    404: {"model": ErrorResponse, "description": "No data returned by MarketStack"},
    503: {"model": ErrorResponse, "description": "MarketStack API key not configured"},
}


def _get_marketstack(request: Request) -> MarketStackClient:
    client: MarketStackClient = request.app.state.marketstack
    if not client.is_configured:
        raise ServiceUnavailableException("MarketStack API key is not configured")
    return client


def _require_symbols(symbols: str) -> str:
    cleaned = symbols.strip()
    if not cleaned:
        raise BadRequestException("Symbols are required")
    return cleaned


def _check_interval(interval: str) -> str:
    if interval not in INTRADAY_INTERVALS:
        raise BadRequestException(f"Invalid interval. Valid values: {', '.join(INTRADAY_INTERVALS)}")
    return interval


def _found(result, message: str):
    if result is None:
        raise AppException(status_code=404, message=message)
    return result


# ── End-of-day ──


@router.get("/eod", response_model=EodPage, responses=RESPONSES)
async def get_eod(
    symbols: str = Query(..., description="Comma-separated, e.g. AAPL,MSFT"),
    exchange: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    client: MarketStackClient = Depends(_get_marketstack),
) -> EodPage:
    result = await client.get_eod(
        _require_symbols(symbols), exchange, date_from, date_to, limit, offset
    )
    return _found(result, "No end-of-day data found for the given symbols")


@router.get("/eod/latest", response_model=EodPage, responses=RESPONSES)
async def get_latest_eod(
    symbols: str = Query(...),
    exchange: Optional[str] = Query(None),
    client: MarketStackClient = Depends(_get_marketstack),
) -> EodPage:
    result = await client.get_latest_eod(_require_symbols(symbols), exchange)
    return _found(result, "No end-of-day data found for the given symbols")


@router.get("/eod/{day}", response_model=EodPage, responses=RESPONSES)
async def get_eod_by_date(
    day: date,
    symbols: str = Query(...),
    exchange: Optional[str] = Query(None),
    client: MarketStackClient = Depends(_get_marketstack),
) -> EodPage:
    result = await client.get_eod_by_date(_require_symbols(symbols), day, exchange)
    return _found(result, f"No end-of-day data found for {day.isoformat()}")


# ── Intraday ──


@router.get("/intraday", response_model=IntradayPage, responses=RESPONSES)
async def get_intraday(
    symbols: str = Query(...),
    exchange: Optional[str] = Query(None),
    interval: str = Query("1hour"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    client: MarketStackClient = Depends(_get_marketstack),
) -> IntradayPage:
    result = await client.get_intraday(
        _require_symbols(symbols),
        exchange,
        _check_interval(interval),
        date_from,
        date_to,
        limit,
        offset,
    )
    return _found(result, "No intraday data found for the given symbols")


@router.get("/intraday/latest", response_model=IntradayPage, responses=RESPONSES)
async def get_latest_intraday(
    symbols: str = Query(...),
    exchange: Optional[str] = Query(None),
    interval: str = Query("1hour"),
    client: MarketStackClient = Depends(_get_marketstack),
) -> IntradayPage:
    result = await client.get_latest_intraday(
        _require_symbols(symbols), exchange, _check_interval(interval)
    )
    return _found(result, "No intraday data found for the given symbols")


# ── Reference data ──


@router.get("/tickers", response_model=TickerPage, responses=RESPONSES)
async def get_tickers(
    exchange: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    client: MarketStackClient = Depends(_get_marketstack),
) -> TickerPage:
    result = await client.get_tickers(exchange, search, limit, offset)
    return _found(result, "No ticker matched the given filters")


@router.get("/tickers/{symbol}", response_model=Ticker, responses=RESPONSES)
async def get_ticker(
    symbol: str,
    client: MarketStackClient = Depends(_get_marketstack),
) -> Ticker:
    result = await client.get_ticker(_require_symbols(symbol))
    return _found(result, f"Ticker '{symbol}' not found")


@router.get("/exchanges", response_model=ExchangePage, responses=RESPONSES)
async def get_exchanges(
    search: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    client: MarketStackClient = Depends(_get_marketstack),
) -> ExchangePage:
    result = await client.get_exchanges(search, limit, offset)
    return _found(result, "No exchange found")


@router.get("/exchanges/{mic}", response_model=Exchange, responses=RESPONSES)
async def get_exchange(
    mic: str,
    client: MarketStackClient = Depends(_get_marketstack),
) -> Exchange:
    if not mic.strip():
        raise BadRequestException("MIC code is required")
    result = await client.get_exchange(mic.strip())
    return _found(result, f"Exchange with MIC '{mic}' not found")


# ── Corporate actions ──


@router.get("/dividends", response_model=DividendPage, responses=RESPONSES)
async def get_dividends(
    symbols: str = Query(...),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    client: MarketStackClient = Depends(_get_marketstack),
) -> DividendPage:
    result = await client.get_dividends(
        _require_symbols(symbols), date_from, date_to, limit, offset
    )
    return _found(result, "No dividend found for the given symbols")


@router.get("/splits", response_model=SplitPage, responses=RESPONSES)
async def get_splits(
    symbols: str = Query(...),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    client: MarketStackClient = Depends(_get_marketstack),
) -> SplitPage:
    result = await client.get_splits(
        _require_symbols(symbols), date_from, date_to, limit, offset
    )
    return _found(result, "No split found for the given symbols")
