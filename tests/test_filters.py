"""
Unit tests for the query composer and the age → birth-date conversion.
"""

from datetime import date
from decimal import Decimal

from investimentos.models.investment import Investment
from investimentos.models.investor import Investor
from investimentos.repositories.filters import (
    FilterBuilder,
    birth_date_window,
    subtract_years,
)


class TestSubtractYears:
    def test_regular_day(self):
        assert subtract_years(date(2024, 6, 15), 10) == date(2014, 6, 15)

    def test_leap_day_falls_back_to_feb_28(self):
        assert subtract_years(date(2024, 2, 29), 1) == date(2023, 2, 28)

    def test_leap_day_to_leap_year_is_kept(self):
        assert subtract_years(date(2024, 2, 29), 4) == date(2020, 2, 29)

    def test_before_year_one_clamps_to_min(self):
        assert subtract_years(date(2024, 1, 1), 2024) == date.min
        assert subtract_years(date(2024, 2, 29), 5000) == date.min


class TestBirthDateWindow:
    def test_thirty_to_forty(self):
        earliest, latest = birth_date_window(30, 40, date(2024, 1, 1))
        assert earliest == date(1984, 1, 1)
        assert latest == date(1994, 1, 1)

    def test_single_age(self):
        earliest, latest = birth_date_window(18, 18, date(2024, 3, 10))
        assert earliest == latest == date(2006, 3, 10)

    def test_inverted_range_is_empty(self):
        earliest, latest = birth_date_window(40, 30, date(2024, 1, 1))
        assert earliest > latest

    def test_huge_maximum_age_is_unbounded(self):
        earliest, latest = birth_date_window(0, 5000, date(2024, 1, 1))
        assert earliest == date.min
        assert latest == date(2024, 1, 1)


class TestFilterBuilder:
    def test_no_inputs_adds_no_clause(self):
        builder = (
            FilterBuilder()
            .contains_text(Investor.nome, None)
            .equals_text(Investor.perfil_risco, "")
            .between(Investor.saldo_total, None, None)
        )
        assert len(builder) == 0
        # Still a usable predicate: TRUE
        assert builder.build() is not None

    def test_each_present_input_adds_one_clause(self):
        builder = (
            FilterBuilder()
            .contains_text(Investment.nome, "selic")
            .equals_text(Investment.tipo, "Renda Fixa")
            .equals_text(Investment.status, "Ativo")
            .at_least(Investment.rentabilidade, Decimal("5"))
        )
        assert len(builder) == 4

    def test_zero_is_a_real_bound(self):
        builder = FilterBuilder().between(Investor.saldo_total, Decimal("0"), Decimal("0"))
        assert len(builder) == 2

    def test_empty_text_is_absent(self):
        builder = FilterBuilder().contains_text(Investor.nome, "").equals_text(Investor.cpf, None)
        assert len(builder) == 0

    def test_text_match_is_case_insensitive(self):
        sql = str(FilterBuilder().contains_text(Investor.nome, "ANA").build())
        assert "lower" in sql.lower()
