"""
Alpha Vantage pass-through endpoints (``/alphavantage``).

Inputs are validated here before any upstream call. An absent upstream
result (provider error, timeout, unknown symbol) is reported as 404.
``compare`` and ``analysis`` fan out concurrently with ``asyncio.gather``.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Literal

from fastapi import APIRouter, Depends, Query, Request

from investimentos.clients.alpha_vantage import AlphaVantageClient
from investimentos.core.exceptions import AppException, BadRequestException
from investimentos.schemas.alpha_vantage import (
    AnalysisResponse,
    ComparisonResponse,
    HistoricalResponse,
    StockQuote,
    SymbolMatch,
    TechnicalAnalysis,
    TechnicalResponse,
)
from investimentos.schemas.common import ErrorResponse
from investimentos.services import stock_analysis

logger = logging.getLogger(__name__)

router = APIRouter()

VALID_INDICATORS = ("SMA", "EMA", "RSI", "MACD", "STOCH", "BBANDS")
VALID_INTERVALS = ("daily", "weekly", "monthly")
MAX_COMPARE_SYMBOLS = 10
HISTORY_LIMIT = 100

NOT_FOUND = {404: {"model": ErrorResponse, "description": "No data returned by Alpha Vantage"}}


def _get_alpha_vantage(request: Request) -> AlphaVantageClient:
    """The process-wide client created in ``main.lifespan``."""
    return request.app.state.alpha_vantage


def _not_found(message: str) -> AppException:
    return AppException(status_code=404, message=message)


def normalise_symbol(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    if not cleaned:
        raise BadRequestException("Symbol is required")
    return cleaned


def parse_symbol_list(symbols: str) -> List[str]:
    """``" aapl, MSFT,aapl,, "`` → ``["AAPL", "MSFT"]`` (order kept, duplicates dropped)."""
    parsed: List[str] = []
    for raw in symbols.split(","):
        symbol = raw.strip().upper()
        if symbol and symbol not in parsed:
            parsed.append(symbol)
    if not parsed:
        raise BadRequestException("No valid symbol supplied")
    if len(parsed) > MAX_COMPARE_SYMBOLS:
        raise BadRequestException(f"At most {MAX_COMPARE_SYMBOLS} symbols can be compared")
    return parsed


@router.get("/quote/{symbol}", response_model=StockQuote, responses=NOT_FOUND)
async def get_quote(
    symbol: str,
    client: AlphaVantageClient = Depends(_get_alpha_vantage),
) -> StockQuote:
    symbol = normalise_symbol(symbol)
    quote = await client.get_quote(symbol)
    if quote is None:
        raise _not_found(f"No quote found for symbol {symbol}")
    return quote


@router.get("/historical/{symbol}", response_model=HistoricalResponse, responses=NOT_FOUND)
async def get_historical(
    symbol: str,
    output_size: Literal["compact", "full"] = Query("compact", alias="outputSize"),
    client: AlphaVantageClient = Depends(_get_alpha_vantage),
) -> HistoricalResponse:
    """Daily bars, newest first, capped at the latest 100 days."""
    symbol = normalise_symbol(symbol)
    series = await client.get_daily_time_series(symbol, output_size)
    if series is None:
        raise _not_found(f"No historical data found for {symbol}")
    bars = series.bars[:HISTORY_LIMIT]
    return HistoricalResponse(
        symbol=symbol,
        metadata=series.metadata,
        data_count=len(bars),
        time_series=bars,
    )


@router.get("/search", response_model=List[SymbolMatch], responses=NOT_FOUND)
async def search_symbols(
    keywords: str = Query(..., description="At least 2 characters, e.g. 'Apple'"),
    client: AlphaVantageClient = Depends(_get_alpha_vantage),
) -> List[SymbolMatch]:
    if len(keywords.strip()) < 2:
        raise BadRequestException("Keywords must be at least 2 characters long")
    matches = await client.search_symbol(keywords.strip())
    if not matches:
        raise _not_found(f"No symbol found for '{keywords}'")
    return matches


@router.get(
    "/technical/{symbol}/{indicator}",
    response_model=TechnicalResponse,
    responses=NOT_FOUND,
)
async def get_technical_indicator(
    symbol: str,
    indicator: str,
    interval: str = Query("daily"),
    time_period: int = Query(20, alias="timePeriod", ge=1, le=200),
    client: AlphaVantageClient = Depends(_get_alpha_vantage),
) -> TechnicalResponse:
    symbol = normalise_symbol(symbol)
    indicator = indicator.strip().upper()
    if indicator not in VALID_INDICATORS:
        raise BadRequestException(f"Indicator must be one of: {', '.join(VALID_INDICATORS)}")
    interval = interval.strip().lower()
    if interval not in VALID_INTERVALS:
        raise BadRequestException(f"Interval must be one of: {', '.join(VALID_INTERVALS)}")

    data = await client.get_technical_indicator(symbol, indicator, interval, time_period)
    if data is None:
        raise _not_found(f"No {indicator} data found for {symbol}")
    return TechnicalResponse(
        symbol=symbol,
        indicator=indicator,
        interval=interval,
        time_period=time_period,
        metadata=data.metadata,
        data=data.values,
    )


@router.get("/compare", response_model=ComparisonResponse, responses=NOT_FOUND)
async def compare_stocks(
    symbols: str = Query(..., description="Comma-separated, e.g. AAPL,MSFT,GOOGL"),
    client: AlphaVantageClient = Depends(_get_alpha_vantage),
) -> ComparisonResponse:
    """Quotes for up to 10 symbols, best daily change first. Failed lookups are dropped."""
    symbol_list = parse_symbol_list(symbols)
    results = await asyncio.gather(
        *(client.get_quote(s) for s in symbol_list), return_exceptions=True
    )
    quotes = []
    for symbol, result in zip(symbol_list, results):
        if isinstance(result, Exception):
            logger.error("Quote lookup for %s raised: %s", symbol, result, extra={"symbol": symbol})
            continue
        quotes.append(result)

    comparison = stock_analysis.build_comparison(quotes)
    if not comparison:
        raise _not_found("Could not fetch data for any of the requested symbols")
    return ComparisonResponse(
        requested_symbols=symbol_list,
        successful_quotes=len(comparison),
        comparison=comparison,
        summary=stock_analysis.summarize_comparison(comparison),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/analysis/{symbol}", response_model=AnalysisResponse, responses=NOT_FOUND)
async def get_analysis(
    symbol: str,
    client: AlphaVantageClient = Depends(_get_alpha_vantage),
) -> AnalysisResponse:
    """Quote, recent history, SMA(20) and RSI(14) combined into one report."""
    symbol = normalise_symbol(symbol)
    quote, history, sma, rsi = await asyncio.gather(
        client.get_quote(symbol),
        client.get_daily_time_series(symbol, "compact"),
        client.get_technical_indicator(symbol, "SMA", "daily", 20),
        client.get_technical_indicator(symbol, "RSI", "daily", 14),
    )
    if quote is None:
        raise _not_found(f"No quote found for symbol {symbol}")

    change = quote.change_percent
    return AnalysisResponse(
        symbol=symbol,
        timestamp=datetime.now(timezone.utc),
        current_quote=quote,
        technical_analysis=TechnicalAnalysis(
            trend=stock_analysis.determine_trend(change),
            recommendation=stock_analysis.generate_recommendation(change),
            risk_level=stock_analysis.calculate_risk_level(change),
            sma20=stock_analysis.latest_indicator_value(sma, "SMA"),
            rsi14=stock_analysis.latest_indicator_value(rsi, "RSI"),
        ),
        recent_performance=stock_analysis.recent_performance(history.bars if history else None),
    )
