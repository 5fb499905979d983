"""
Pydantic schemas for MarketStack responses.

MarketStack already returns JSON objects with snake_case keys; the models
accept those keys (``populate_by_name``) and re-emit them as camelCase.
Every list endpoint shares the ``{pagination, data}`` envelope, modelled by
the generic :class:`MarketStackPage`.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import Field

from investimentos.schemas.common import CamelModel

T = TypeVar("T")


class Pagination(CamelModel):
    limit: int = 0
    offset: int = 0
    count: int = 0
    total: int = 0


class MarketStackPage(CamelModel, Generic[T]):
    pagination: Optional[Pagination] = None
    data: List[T] = Field(default_factory=list)


class EodBar(CamelModel):
    symbol: Optional[str] = None
    exchange: Optional[str] = None
    date: Optional[str] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    volume: Optional[float] = None
    adj_open: Optional[float] = None
    adj_high: Optional[float] = None
    adj_low: Optional[float] = None
    adj_close: Optional[float] = None
    adj_volume: Optional[float] = None
    split_factor: Optional[float] = None
    dividend: Optional[float] = None


class IntradayBar(CamelModel):
    symbol: Optional[str] = None
    exchange: Optional[str] = None
    date: Optional[str] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    last: Optional[float] = None
    volume: Optional[float] = None


class StockExchange(CamelModel):
    name: Optional[str] = None
    acronym: Optional[str] = None
    mic: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    city: Optional[str] = None
    website: Optional[str] = None


class Ticker(CamelModel):
    name: Optional[str] = None
    symbol: Optional[str] = None
    stock_exchange: Optional[StockExchange] = None


class ExchangeTimezone(CamelModel):
    timezone: Optional[str] = None
    abbr: Optional[str] = None
    abbr_dst: Optional[str] = None


class Exchange(StockExchange):
    timezone: Optional[ExchangeTimezone] = None


class Dividend(CamelModel):
    symbol: Optional[str] = None
    date: Optional[str] = None
    dividend: Optional[float] = None


class Split(CamelModel):
    symbol: Optional[str] = None
    date: Optional[str] = None
    split_factor: Optional[float] = None


EodPage = MarketStackPage[EodBar]
IntradayPage = MarketStackPage[IntradayBar]
TickerPage = MarketStackPage[Ticker]
ExchangePage = MarketStackPage[Exchange]
DividendPage = MarketStackPage[Dividend]
SplitPage = MarketStackPage[Split]
