"""
Investor repository — data-access layer for the ``investidores`` table.

Adds name/profile/balance/age searches, the combined multi-filter search and
the balance aggregations on top of the generic CRUD.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select

from investimentos.models.investor import Investor
from investimentos.repositories.base import BaseRepository, to_decimal
from investimentos.repositories.filters import (
    FilterBuilder,
    birth_date_window,
    icontains,
    iequals,
)


class InvestorRepository(BaseRepository[Investor]):
    """Concrete repository for :class:`Investor` entities."""

    def __init__(self, db):
        super().__init__(Investor, db)

    async def search_by_name(self, nome: str) -> List[Investor]:
        """Case-insensitive substring match on ``nome``, alphabetical."""
        stmt = (
            select(Investor)
            .where(icontains(Investor.nome, nome))
            .order_by(Investor.nome)
        )
        return await self._all(stmt)

    async def get_by_perfil_risco(self, perfil_risco: str) -> List[Investor]:
        """Exact (case-insensitive) risk profile, smallest balance first."""
        stmt = (
            select(Investor)
            .where(iequals(Investor.perfil_risco, perfil_risco))
            .order_by(Investor.saldo_total)
        )
        return await self._all(stmt)

    async def get_by_saldo_range(
        self, saldo_minimo: Decimal, saldo_maximo: Decimal
    ) -> List[Investor]:
        """Inclusive balance range, largest balance first."""
        stmt = (
            select(Investor)
            .where(Investor.saldo_total >= saldo_minimo, Investor.saldo_total <= saldo_maximo)
            .order_by(Investor.saldo_total.desc())
        )
        return await self._all(stmt)

    async def get_by_idade_range(
        self, idade_minima: int, idade_maxima: int, today: Optional[date] = None
    ) -> List[Investor]:
        """
        Investors aged between ``idade_minima`` and ``idade_maxima`` (inclusive)
        as of ``today``, oldest first.

        Ages are converted to a birth-date window, see :func:`birth_date_window`.
        """
        earliest, latest = birth_date_window(idade_minima, idade_maxima, today or date.today())
        stmt = (
            select(Investor)
            .where(Investor.data_nascimento >= earliest, Investor.data_nascimento <= latest)
            .order_by(Investor.data_nascimento)
        )
        return await self._all(stmt)

    async def search_multiple_filters(
        self,
        nome: Optional[str] = None,
        perfil_risco: Optional[str] = None,
        saldo_minimo: Optional[Decimal] = None,
        saldo_maximo: Optional[Decimal] = None,
    ) -> List[Investor]:
        """AND of whichever criteria are supplied, ordered by ``nome``."""
        predicate = (
            FilterBuilder()
            .contains_text(Investor.nome, nome)
            .equals_text(Investor.perfil_risco, perfil_risco)
            .between(Investor.saldo_total, saldo_minimo, saldo_maximo)
            .build()
        )
        return await self._all(select(Investor).where(predicate).order_by(Investor.nome))

    # ── Aggregations ──

    async def count_by_perfil_risco(self, perfil_risco: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Investor)
            .where(iequals(Investor.perfil_risco, perfil_risco))
        )
        return await self._scalar(stmt)

    async def get_total_saldo(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(Investor.saldo_total), 0))
        return to_decimal(await self._scalar(stmt))

    async def get_media_saldo_by_perfil(self, perfil_risco: str) -> Decimal:
        """Mean balance for a profile; ``0`` when no investor has it."""
        stmt = select(func.avg(Investor.saldo_total)).where(
            iequals(Investor.perfil_risco, perfil_risco)
        )
        return to_decimal(await self._scalar(stmt))
