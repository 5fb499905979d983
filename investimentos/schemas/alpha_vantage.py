"""
Pydantic schemas for Alpha Vantage data.

Alpha Vantage answers with numbered, space-separated keys
(``"05. price"``, ``"4. close"``) and string-typed numbers. The client maps
those payloads onto the models below, so everything downstream works with
typed attributes and the API emits camelCase JSON.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from investimentos.schemas.common import CamelModel


class StockQuote(CamelModel):
    """Latest quote for one symbol (``GLOBAL_QUOTE``)."""

    symbol: str
    company_name: str = ""
    current_price: float = 0.0
    open_price: float = 0.0
    high_price: float = 0.0
    low_price: float = 0.0
    previous_close: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    volume: int = 0
    last_updated: datetime
    currency: str = "USD"


class DailyBar(CamelModel):
    """One trading day of ``TIME_SERIES_DAILY``."""

    date: str
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    volume: int = 0


class TimeSeries(CamelModel):
    """Daily series, newest day first."""

    symbol: str
    metadata: Dict[str, str] = Field(default_factory=dict)
    bars: List[DailyBar] = Field(default_factory=list)


class SymbolMatch(CamelModel):
    """One ``SYMBOL_SEARCH`` hit."""

    symbol: str
    name: str = ""
    type: str = ""
    region: str = ""
    market_open: str = ""
    market_close: str = ""
    timezone: str = ""
    currency: str = ""
    match_score: float = 0.0


class TechnicalIndicator(CamelModel):
    """
    A technical-indicator series keyed by date (newest first).

    Each point maps the indicator's output names to values, e.g.
    ``{"SMA": 181.2}`` or ``{"MACD": 1.2, "MACD_Signal": 0.9, "MACD_Hist": 0.3}``.
    """

    indicator: str
    metadata: Dict[str, str] = Field(default_factory=dict)
    values: Dict[str, Dict[str, float]] = Field(default_factory=dict)


class HistoricalResponse(CamelModel):
    symbol: str
    metadata: Dict[str, str] = Field(default_factory=dict)
    data_count: int
    time_series: List[DailyBar]


class TechnicalResponse(CamelModel):
    symbol: str
    indicator: str
    interval: str
    time_period: int
    metadata: Dict[str, str] = Field(default_factory=dict)
    data: Dict[str, Dict[str, float]] = Field(default_factory=dict)


class ComparisonEntry(CamelModel):
    symbol: str
    company_name: str = ""
    current_price: float
    change: float
    change_percent: float
    volume: int
    last_updated: datetime


class ComparisonSummary(CamelModel):
    best_performer: Optional[ComparisonEntry] = None
    worst_performer: Optional[ComparisonEntry] = None
    average_change: float = 0.0


class ComparisonResponse(CamelModel):
    requested_symbols: List[str]
    successful_quotes: int
    comparison: List[ComparisonEntry]
    summary: ComparisonSummary
    timestamp: datetime


class TechnicalAnalysis(CamelModel):
    trend: str
    recommendation: str
    risk_level: str
    sma20: Optional[float] = None
    rsi14: Optional[float] = None


class ClosePoint(CamelModel):
    date: str
    close: float
    volume: int


class PriceRange(CamelModel):
    high: float
    low: float


class RecentPerformance(CamelModel):
    last30_days: List[ClosePoint] = Field(default_factory=list)
    average_volume: float = 0.0
    price_range30d: Optional[PriceRange] = None


class AnalysisResponse(CamelModel):
    symbol: str
    timestamp: datetime
    current_quote: StockQuote
    technical_analysis: TechnicalAnalysis
    recent_performance: RecentPerformance
