"""
Investment repository — data-access layer for the ``investimentos`` table.

Writes check that the owning investor exists before touching the table, so a
dangling ``investidor_id`` is reported as a failed write (``False``) on every
backend, not only on those that enforce foreign keys.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select

from investimentos.models.investment import Investment
from investimentos.models.investor import Investor
from investimentos.repositories.base import BaseRepository, to_decimal
from investimentos.repositories.filters import FilterBuilder, iequals

logger = logging.getLogger(__name__)


class InvestmentRepository(BaseRepository[Investment]):
    """Concrete repository for :class:`Investment` entities."""

    def __init__(self, db):
        super().__init__(Investment, db)

    async def _investor_exists(self, investidor_id: Optional[int]) -> bool:
        if investidor_id is None:
            return False
        return await self.db.get(Investor, investidor_id) is not None

    async def add(self, entity: Investment) -> bool:
        if not await self._investor_exists(entity.investidor_id):
            logger.warning(
                "Rejected investment '%s': investor %s does not exist",
                entity.nome,
                entity.investidor_id,
            )
            return False
        return await super().add(entity)

    async def update(self, entity: Investment) -> bool:
        if not await self._investor_exists(entity.investidor_id):
            logger.warning(
                "Rejected update of investment %s: investor %s does not exist",
                entity.id,
                entity.investidor_id,
            )
            return False
        return await super().update(entity)

    # ── Searches ──

    async def get_by_investidor_id(self, investidor_id: int) -> List[Investment]:
        stmt = (
            select(Investment)
            .where(Investment.investidor_id == investidor_id)
            .order_by(Investment.id)
        )
        return await self._all(stmt)

    async def get_by_tipo(self, tipo: str) -> List[Investment]:
        """Exact (case-insensitive) type, best return first."""
        stmt = (
            select(Investment)
            .where(iequals(Investment.tipo, tipo))
            .order_by(Investment.rentabilidade.desc())
        )
        return await self._all(stmt)

    async def get_by_status(self, status: str) -> List[Investment]:
        """Exact (case-insensitive) status, oldest start date first."""
        stmt = (
            select(Investment)
            .where(iequals(Investment.status, status))
            .order_by(Investment.data_inicio)
        )
        return await self._all(stmt)

    async def get_by_rentabilidade_range(
        self, rentabilidade_minima: Decimal, rentabilidade_maxima: Decimal
    ) -> List[Investment]:
        stmt = (
            select(Investment)
            .where(
                Investment.rentabilidade >= rentabilidade_minima,
                Investment.rentabilidade <= rentabilidade_maxima,
            )
            .order_by(Investment.rentabilidade.desc())
        )
        return await self._all(stmt)

    async def get_by_valor_range(
        self, valor_minimo: Decimal, valor_maximo: Decimal
    ) -> List[Investment]:
        """Inclusive range on the *current* value, largest first."""
        stmt = (
            select(Investment)
            .where(Investment.valor_atual >= valor_minimo, Investment.valor_atual <= valor_maximo)
            .order_by(Investment.valor_atual.desc())
        )
        return await self._all(stmt)

    async def get_by_periodo(self, data_inicio: date, data_fim: date) -> List[Investment]:
        """Investments started within ``[data_inicio, data_fim]``, chronological."""
        stmt = (
            select(Investment)
            .where(Investment.data_inicio >= data_inicio, Investment.data_inicio <= data_fim)
            .order_by(Investment.data_inicio)
        )
        return await self._all(stmt)

    async def search_multiple_filters(
        self,
        nome: Optional[str] = None,
        tipo: Optional[str] = None,
        status: Optional[str] = None,
        rentabilidade_minima: Optional[Decimal] = None,
    ) -> List[Investment]:
        """AND of whichever criteria are supplied, best return first."""
        predicate = (
            FilterBuilder()
            .contains_text(Investment.nome, nome)
            .equals_text(Investment.tipo, tipo)
            .equals_text(Investment.status, status)
            .at_least(Investment.rentabilidade, rentabilidade_minima)
            .build()
        )
        stmt = select(Investment).where(predicate).order_by(Investment.rentabilidade.desc())
        return await self._all(stmt)

    async def get_top_rentaveis(self, quantidade: int) -> List[Investment]:
        stmt = select(Investment).order_by(Investment.rentabilidade.desc()).limit(quantidade)
        return await self._all(stmt)

    # ── Aggregations ──

    async def get_total_investido(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(Investment.valor_inicial), 0))
        return to_decimal(await self._scalar(stmt))

    async def get_total_atual(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(Investment.valor_atual), 0))
        return to_decimal(await self._scalar(stmt))

    async def get_media_rentabilidade_by_tipo(self, tipo: str) -> Decimal:
        """Mean return for a type; ``0`` when no investment has it."""
        stmt = select(func.avg(Investment.rentabilidade)).where(iequals(Investment.tipo, tipo))
        return to_decimal(await self._scalar(stmt))

    async def count_by_tipo(self, tipo: str) -> int:
        stmt = select(func.count()).select_from(Investment).where(iequals(Investment.tipo, tipo))
        return await self._scalar(stmt)
