"""
Repository tests for InvestorRepository against an in-memory SQLite database.

Tests cover:
- CRUD outcomes reported as booleans
- Searches and their orderings
- Aggregations, including the empty-set cases
- Refusing to delete an investor that still owns investments
"""

from datetime import date
from decimal import Decimal

import pytest

from investimentos.repositories.investment_repo import InvestmentRepository
from investimentos.repositories.investor_repo import InvestorRepository

from .conftest import make_investment, make_investor


async def _seed(repo: InvestorRepository):
    investors = [
        make_investor(
            id=None,
            nome="Carla Mendes",
            cpf="333",
            email="carla@exemplo.com",
            data_nascimento=date(1965, 2, 14),
            saldo_total=Decimal("82000.00"),
            perfil_risco="Conservador",
        ),
        make_investor(
            id=None,
            nome="Ana Souza",
            cpf="111",
            email="ana@exemplo.com",
            data_nascimento=date(1990, 5, 1),
            saldo_total=Decimal("15000.50"),
            perfil_risco="Moderado",
        ),
        make_investor(
            id=None,
            nome="Bruno Lima",
            cpf="222",
            email="bruno@exemplo.com",
            data_nascimento=date(1984, 1, 1),
            saldo_total=Decimal("250000.00"),
            perfil_risco="Moderado",
        ),
    ]
    for investor in investors:
        assert await repo.add(investor) is True
    return investors


class TestInvestorCrud:
    @pytest.mark.asyncio
    async def test_add_assigns_id(self, db_session):
        repo = InvestorRepository(db_session)
        investor = make_investor(id=None)

        assert await repo.add(investor) is True
        assert investor.id is not None

        stored = await repo.get(investor.id)
        assert stored.nome == "Ana Souza"
        assert stored.data_nascimento == date(1990, 5, 1)

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, db_session):
        repo = InvestorRepository(db_session)
        assert await repo.get(999) is None

    @pytest.mark.asyncio
    async def test_get_all_ordered_by_id(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        result = await repo.get_all()
        assert [i.nome for i in result] == ["Carla Mendes", "Ana Souza", "Bruno Lima"]
        assert await repo.count() == 3

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, db_session):
        repo = InvestorRepository(db_session)
        investor = make_investor(id=None)
        await repo.add(investor)

        replacement = make_investor(
            id=investor.id, nome="Ana S. Lima", saldo_total=Decimal("2000.00")
        )
        assert await repo.update(replacement) is True

        stored = await repo.get(investor.id)
        assert stored.nome == "Ana S. Lima"
        assert Decimal(str(stored.saldo_total)) == Decimal("2000.00")

    @pytest.mark.asyncio
    async def test_update_missing_returns_false(self, db_session):
        repo = InvestorRepository(db_session)
        assert await repo.update(make_investor(id=42)) is False

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        repo = InvestorRepository(db_session)
        investor = make_investor(id=None)
        await repo.add(investor)

        assert await repo.delete(investor.id) is True
        assert await repo.get(investor.id) is None

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, db_session):
        repo = InvestorRepository(db_session)
        assert await repo.delete(42) is False

    @pytest.mark.asyncio
    async def test_delete_with_investments_is_refused(self, db_session):
        repo = InvestorRepository(db_session)
        investor = make_investor(id=None)
        await repo.add(investor)
        investor_id = investor.id
        assert await InvestmentRepository(db_session).add(
            make_investment(id=None, investidor_id=investor_id)
        )

        assert await repo.delete(investor_id) is False
        assert await repo.get(investor_id) is not None

    @pytest.mark.asyncio
    async def test_negative_saldo_rejected_by_store(self, db_session):
        repo = InvestorRepository(db_session)
        assert await repo.add(make_investor(id=None, saldo_total=Decimal("-1"))) is False
        assert await repo.count() == 0


class TestInvestorSearches:
    @pytest.mark.asyncio
    async def test_search_by_name_case_insensitive_alphabetical(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        result = await repo.search_by_name("LI")
        assert [i.nome for i in result] == ["Bruno Lima"]

        result = await repo.search_by_name("a")
        assert [i.nome for i in result] == ["Ana Souza", "Bruno Lima", "Carla Mendes"]

    @pytest.mark.asyncio
    async def test_search_by_name_folds_accented_capitals(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)
        assert await repo.add(make_investor(id=None, nome="Álvaro Dias", cpf="444", email="alvaro@exemplo.com")) is True

        result = await repo.search_by_name("álvaro")
        assert [i.nome for i in result] == ["Álvaro Dias"]

        result = await repo.search_by_name("ÁLVARO DIAS")
        assert [i.nome for i in result] == ["Álvaro Dias"]

    @pytest.mark.asyncio
    async def test_search_by_name_treats_wildcards_literally(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        assert await repo.search_by_name("%") == []

    @pytest.mark.asyncio
    async def test_by_perfil_ordered_by_saldo(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        result = await repo.get_by_perfil_risco("moderado")
        assert [i.nome for i in result] == ["Ana Souza", "Bruno Lima"]

    @pytest.mark.asyncio
    async def test_by_saldo_range_inclusive_descending(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        result = await repo.get_by_saldo_range(Decimal("15000.50"), Decimal("82000.00"))
        assert [i.nome for i in result] == ["Carla Mendes", "Ana Souza"]

    @pytest.mark.asyncio
    async def test_by_idade_range_oldest_first(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        # Bruno turns exactly 40 on this day; Ana is 33; Carla is 58.
        result = await repo.get_by_idade_range(30, 40, today=date(2024, 1, 1))
        assert [i.nome for i in result] == ["Bruno Lima", "Ana Souza"]

    @pytest.mark.asyncio
    async def test_multiple_filters_none_returns_all_by_name(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        result = await repo.search_multiple_filters()
        assert [i.nome for i in result] == ["Ana Souza", "Bruno Lima", "Carla Mendes"]

    @pytest.mark.asyncio
    async def test_multiple_filters_are_combined(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        result = await repo.search_multiple_filters(
            perfil_risco="Moderado", saldo_minimo=Decimal("20000")
        )
        assert [i.nome for i in result] == ["Bruno Lima"]

        result = await repo.search_multiple_filters(nome="", saldo_maximo=Decimal("0"))
        assert result == []


class TestInvestorAggregations:
    @pytest.mark.asyncio
    async def test_empty_store(self, db_session):
        repo = InvestorRepository(db_session)

        assert await repo.get_total_saldo() == Decimal("0")
        assert await repo.count_by_perfil_risco("Moderado") == 0
        assert await repo.get_media_saldo_by_perfil("Moderado") == Decimal("0")

    @pytest.mark.asyncio
    async def test_totals_and_means(self, db_session):
        repo = InvestorRepository(db_session)
        await _seed(repo)

        assert await repo.get_total_saldo() == Decimal("347000.50")
        assert await repo.count_by_perfil_risco("MODERADO") == 2
        media = await repo.get_media_saldo_by_perfil("Moderado")
        assert media.quantize(Decimal("0.01")) == Decimal("132500.25")

    @pytest.mark.asyncio
    async def test_profile_aggregates_ignore_case(self, db_session):
        repo = InvestorRepository(db_session)
        assert await repo.add(
            make_investor(id=None, perfil_risco="conservador", saldo_total=Decimal("500"))
        ) is True

        assert await repo.count_by_perfil_risco("CONSERVADOR") == 1
        assert await repo.get_media_saldo_by_perfil("Conservador") == Decimal("500")
