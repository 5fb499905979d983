"""
Pure helpers behind ``/alphavantage/compare`` and ``/alphavantage/analysis``.

All classifications use the day's change percent and strict ``>`` bounds:

- trend: > 2 Forte Alta, > 0 Alta, > -2 Baixa, otherwise Forte Baixa;
- recommendation: > 5 sobrecompra warning, > 2 Comprar, > -2 Manter,
  > -5 Vender, otherwise Evitar;
- risk level on ``abs(change)``: > 5 Alto, > 2 Médio, otherwise Baixo.
"""

from typing import List, Optional, Sequence

from investimentos.schemas.alpha_vantage import (
    ClosePoint,
    ComparisonEntry,
    ComparisonSummary,
    DailyBar,
    PriceRange,
    RecentPerformance,
    StockQuote,
    TechnicalIndicator,
)


def determine_trend(change_percent: float) -> str:
    if change_percent > 2:
        return "Forte Alta"
    if change_percent > 0:
        return "Alta"
    if change_percent > -2:
        return "Baixa"
    return "Forte Baixa"


def generate_recommendation(change_percent: float) -> str:
    if change_percent > 5:
        return "Atenção - Possível sobrecompra"
    if change_percent > 2:
        return "Comprar"
    if change_percent > -2:
        return "Manter"
    if change_percent > -5:
        return "Vender"
    return "Evitar"


def calculate_risk_level(change_percent: float) -> str:
    magnitude = abs(change_percent)
    if magnitude > 5:
        return "Alto"
    if magnitude > 2:
        return "Médio"
    return "Baixo"


def latest_indicator_value(indicator: Optional[TechnicalIndicator], name: str) -> Optional[float]:
    """Most recent value of output ``name`` (e.g. ``"SMA"``), or ``None``."""
    if indicator is None or not indicator.values:
        return None
    latest_day = max(indicator.values)
    return indicator.values[latest_day].get(name)


def build_comparison(quotes: Sequence[Optional[StockQuote]]) -> List[ComparisonEntry]:
    """Drop failed lookups and order the rest by change percent, best first."""
    entries = [
        ComparisonEntry(
            symbol=q.symbol,
            company_name=q.company_name,
            current_price=q.current_price,
            change=q.change,
            change_percent=q.change_percent,
            volume=q.volume,
            last_updated=q.last_updated,
        )
        for q in quotes
        if q is not None
    ]
    entries.sort(key=lambda e: e.change_percent, reverse=True)
    return entries


def summarize_comparison(entries: Sequence[ComparisonEntry]) -> ComparisonSummary:
    if not entries:
        return ComparisonSummary()
    return ComparisonSummary(
        best_performer=entries[0],
        worst_performer=entries[-1],
        average_change=sum(e.change_percent for e in entries) / len(entries),
    )


def recent_performance(bars: Optional[Sequence[DailyBar]], days: int = 30) -> RecentPerformance:
    """Closes and volumes of the latest ``days`` bars, with their average volume and range."""
    if not bars:
        return RecentPerformance()
    recent = sorted(bars, key=lambda b: b.date, reverse=True)[:days]
    points = [ClosePoint(date=b.date, close=b.close, volume=b.volume) for b in recent]
    closes = [p.close for p in points]
    return RecentPerformance(
        last30_days=points,
        average_volume=sum(p.volume for p in points) / len(points),
        price_range30d=PriceRange(high=max(closes), low=min(closes)),
    )
