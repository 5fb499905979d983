"""
Unit tests for the quote classification and comparison helpers.
"""

from datetime import datetime, timezone

import pytest

from investimentos.schemas.alpha_vantage import DailyBar, StockQuote, TechnicalIndicator
from investimentos.services.stock_analysis import (
    build_comparison,
    calculate_risk_level,
    determine_trend,
    generate_recommendation,
    latest_indicator_value,
    recent_performance,
    summarize_comparison,
)


def _quote(symbol: str, change_percent: float) -> StockQuote:
    return StockQuote(
        symbol=symbol,
        current_price=100.0,
        change=change_percent,
        change_percent=change_percent,
        volume=1000,
        last_updated=datetime(2024, 1, 2, tzinfo=timezone.utc),
    )


class TestClassification:
    @pytest.mark.parametrize(
        "change, expected",
        [(2.5, "Forte Alta"), (2.0, "Alta"), (0.1, "Alta"), (0.0, "Baixa"), (-2.0, "Forte Baixa")],
    )
    def test_trend(self, change, expected):
        assert determine_trend(change) == expected

    @pytest.mark.parametrize(
        "change, expected",
        [
            (5.1, "Atenção - Possível sobrecompra"),
            (3.0, "Comprar"),
            (0.0, "Manter"),
            (-3.0, "Vender"),
            (-5.0, "Evitar"),
        ],
    )
    def test_recommendation(self, change, expected):
        assert generate_recommendation(change) == expected

    @pytest.mark.parametrize(
        "change, expected",
        [(-6.0, "Alto"), (5.0, "Médio"), (-2.5, "Médio"), (2.0, "Baixo"), (0.0, "Baixo")],
    )
    def test_risk_level(self, change, expected):
        assert calculate_risk_level(change) == expected


class TestComparison:
    def test_failed_lookups_dropped_and_sorted(self):
        entries = build_comparison([_quote("MSFT", 1.0), None, _quote("AAPL", 3.0), _quote("IBM", -2.0)])

        assert [e.symbol for e in entries] == ["AAPL", "MSFT", "IBM"]

    def test_summary(self):
        entries = build_comparison([_quote("MSFT", 1.0), _quote("AAPL", 3.0), _quote("IBM", -1.0)])

        summary = summarize_comparison(entries)

        assert summary.best_performer.symbol == "AAPL"
        assert summary.worst_performer.symbol == "IBM"
        assert summary.average_change == pytest.approx(1.0)

    def test_summary_of_nothing(self):
        summary = summarize_comparison([])
        assert summary.best_performer is None
        assert summary.average_change == 0.0


class TestIndicators:
    def test_latest_value_picks_newest_date(self):
        indicator = TechnicalIndicator(
            indicator="SMA",
            values={"2024-01-02": {"SMA": 181.2}, "2024-01-03": {"SMA": 182.0}},
        )
        assert latest_indicator_value(indicator, "SMA") == 182.0

    def test_missing_indicator(self):
        assert latest_indicator_value(None, "RSI") is None
        assert latest_indicator_value(TechnicalIndicator(indicator="RSI"), "RSI") is None


class TestRecentPerformance:
    def test_window_and_stats(self):
        bars = [
            DailyBar(date=f"2024-01-{day:02d}", close=float(day), volume=day * 10)
            for day in range(1, 32)
        ]

        perf = recent_performance(bars, days=30)

        assert len(perf.last30_days) == 30
        assert perf.last30_days[0].date == "2024-01-31"
        assert perf.price_range30d.high == 31.0
        assert perf.price_range30d.low == 2.0
        assert perf.average_volume == pytest.approx(sum(range(2, 32)) * 10 / 30)

    def test_no_history(self):
        perf = recent_performance(None)
        assert perf.last30_days == []
        assert perf.price_range30d is None
