"""
Repository tests for InvestmentRepository against an in-memory SQLite database.
"""

from datetime import date
from decimal import Decimal

import pytest

from investimentos.repositories.investment_repo import InvestmentRepository
from investimentos.repositories.investor_repo import InvestorRepository

from .conftest import make_investment, make_investor


async def _owner(db_session) -> int:
    investor = make_investor(id=None)
    assert await InvestorRepository(db_session).add(investor)
    return investor.id


async def _seed(db_session):
    owner = await _owner(db_session)
    repo = InvestmentRepository(db_session)
    investments = [
        make_investment(
            id=None,
            nome="Tesouro Selic 2029",
            tipo="Renda Fixa",
            valor_inicial=Decimal("10000.00"),
            valor_atual=Decimal("10850.25"),
            rentabilidade=Decimal("8.50"),
            data_inicio=date(2024, 1, 15),
            investidor_id=owner,
            status="Ativo",
        ),
        make_investment(
            id=None,
            nome="PETR4",
            tipo="Ações",
            valor_inicial=Decimal("50000.00"),
            valor_atual=Decimal("46200.00"),
            rentabilidade=Decimal("-7.60"),
            data_inicio=date(2023, 6, 2),
            investidor_id=owner,
            status="Ativo",
        ),
        make_investment(
            id=None,
            nome="CDB Banco Inter",
            tipo="Renda Fixa",
            valor_inicial=Decimal("20000.00"),
            valor_atual=Decimal("23100.00"),
            rentabilidade=Decimal("15.50"),
            data_inicio=date(2021, 4, 5),
            data_vencimento=date(2024, 4, 5),
            investidor_id=owner,
            status="Vencido",
        ),
    ]
    for investment in investments:
        assert await repo.add(investment) is True
    return repo, owner


class TestInvestmentWrites:
    @pytest.mark.asyncio
    async def test_add_with_missing_investor_is_rejected(self, db_session):
        repo = InvestmentRepository(db_session)

        assert await repo.add(make_investment(id=None, investidor_id=999)) is False
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_add_and_get(self, db_session):
        owner = await _owner(db_session)
        repo = InvestmentRepository(db_session)
        investment = make_investment(id=None, investidor_id=owner)

        assert await repo.add(investment) is True
        stored = await repo.get(investment.id)
        assert stored.nome == "Tesouro Selic 2029"
        assert stored.investidor_id == owner

    @pytest.mark.asyncio
    async def test_update_to_missing_investor_is_rejected(self, db_session):
        owner = await _owner(db_session)
        repo = InvestmentRepository(db_session)
        investment = make_investment(id=None, investidor_id=owner)
        await repo.add(investment)

        moved = make_investment(id=investment.id, investidor_id=owner + 100)
        assert await repo.update(moved) is False
        assert (await repo.get(investment.id)).investidor_id == owner

    @pytest.mark.asyncio
    async def test_update_missing_investment_returns_false(self, db_session):
        owner = await _owner(db_session)
        repo = InvestmentRepository(db_session)

        assert await repo.update(make_investment(id=77, investidor_id=owner)) is False

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        repo, _ = await _seed(db_session)
        first = (await repo.get_all())[0]

        assert await repo.delete(first.id) is True
        assert await repo.count() == 2


class TestInvestmentSearches:
    @pytest.mark.asyncio
    async def test_by_investidor(self, db_session):
        repo, owner = await _seed(db_session)

        assert len(await repo.get_by_investidor_id(owner)) == 3
        assert await repo.get_by_investidor_id(owner + 1) == []

    @pytest.mark.asyncio
    async def test_by_tipo_best_return_first(self, db_session):
        repo, _ = await _seed(db_session)

        result = await repo.get_by_tipo("renda fixa")
        assert [i.nome for i in result] == ["CDB Banco Inter", "Tesouro Selic 2029"]

    @pytest.mark.asyncio
    async def test_by_status_oldest_first(self, db_session):
        repo, _ = await _seed(db_session)

        result = await repo.get_by_status("ATIVO")
        assert [i.nome for i in result] == ["PETR4", "Tesouro Selic 2029"]

    @pytest.mark.asyncio
    async def test_by_rentabilidade_range_allows_negative(self, db_session):
        repo, _ = await _seed(db_session)

        result = await repo.get_by_rentabilidade_range(Decimal("-10"), Decimal("8.50"))
        assert [i.nome for i in result] == ["Tesouro Selic 2029", "PETR4"]

    @pytest.mark.asyncio
    async def test_by_valor_range_uses_current_value(self, db_session):
        repo, _ = await _seed(db_session)

        result = await repo.get_by_valor_range(Decimal("10000"), Decimal("25000"))
        assert [i.nome for i in result] == ["CDB Banco Inter", "Tesouro Selic 2029"]

    @pytest.mark.asyncio
    async def test_by_periodo_inclusive(self, db_session):
        repo, _ = await _seed(db_session)

        result = await repo.get_by_periodo(date(2021, 4, 5), date(2023, 6, 2))
        assert [i.nome for i in result] == ["CDB Banco Inter", "PETR4"]

    @pytest.mark.asyncio
    async def test_multiple_filters(self, db_session):
        repo, _ = await _seed(db_session)

        result = await repo.search_multiple_filters(tipo="Renda Fixa", status="Ativo")
        assert [i.nome for i in result] == ["Tesouro Selic 2029"]

        result = await repo.search_multiple_filters(rentabilidade_minima=Decimal("0"))
        assert [i.nome for i in result] == ["CDB Banco Inter", "Tesouro Selic 2029"]

        result = await repo.search_multiple_filters()
        assert [i.nome for i in result] == ["CDB Banco Inter", "Tesouro Selic 2029", "PETR4"]

    @pytest.mark.asyncio
    async def test_top_rentaveis(self, db_session):
        repo, _ = await _seed(db_session)

        result = await repo.get_top_rentaveis(2)
        assert [i.nome for i in result] == ["CDB Banco Inter", "Tesouro Selic 2029"]
        assert len(await repo.get_top_rentaveis(10)) == 3


class TestInvestmentAggregations:
    @pytest.mark.asyncio
    async def test_empty_store(self, db_session):
        repo = InvestmentRepository(db_session)

        assert await repo.get_total_investido() == Decimal("0")
        assert await repo.get_total_atual() == Decimal("0")
        assert await repo.get_media_rentabilidade_by_tipo("Renda Fixa") == Decimal("0")
        assert await repo.count_by_tipo("Renda Fixa") == 0

    @pytest.mark.asyncio
    async def test_totals_and_means(self, db_session):
        repo, _ = await _seed(db_session)

        assert await repo.get_total_investido() == Decimal("80000.00")
        assert await repo.get_total_atual() == Decimal("80150.25")
        media = await repo.get_media_rentabilidade_by_tipo("Renda Fixa")
        assert media.quantize(Decimal("0.01")) == Decimal("12.00")
        assert await repo.count_by_tipo("renda fixa") == 2

    @pytest.mark.asyncio
    async def test_tipo_with_accented_capitals(self, db_session):
        repo, _ = await _seed(db_session)

        assert await repo.count_by_tipo("AÇÕES") == 1
        assert [i.nome for i in await repo.get_by_tipo("ações")] == ["PETR4"]
