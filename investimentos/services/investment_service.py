"""
Investment service — business logic layer for investment operations.

The repository already refuses writes that point at a missing investor
(``add``/``update`` return ``False``); this layer maps those outcomes to
400/404 the same way :mod:`investimentos.services.investor_service` does.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from investimentos.core.exceptions import BadRequestException, NotFoundException
from investimentos.models.investment import Investment
from investimentos.repositories.investment_repo import InvestmentRepository
from investimentos.schemas.investment import InvestmentCreate, InvestmentUpdate

logger = logging.getLogger(__name__)

RESOURCE = "Investimento"


class InvestmentService:
    """Encapsulates CRUD, searches and statistics for :class:`Investment`."""

    def __init__(self, invest_repo: InvestmentRepository):
        self._repo = invest_repo

    # ── Queries ──

    async def get_all_investments(self) -> List[Investment]:
        return await self._repo.get_all()

    async def get_investment(self, investment_id: int) -> Investment:
        investment = await self._repo.get(investment_id)
        if investment is None:
            raise NotFoundException(RESOURCE, investment_id)
        return investment

    async def get_by_investidor(self, investidor_id: int) -> List[Investment]:
        return await self._repo.get_by_investidor_id(investidor_id)

    async def get_by_tipo(self, tipo: str) -> List[Investment]:
        return await self._repo.get_by_tipo(tipo)

    async def get_by_status(self, status: str) -> List[Investment]:
        return await self._repo.get_by_status(status)

    async def get_by_rentabilidade_range(
        self, rentabilidade_minima: Decimal, rentabilidade_maxima: Decimal
    ) -> List[Investment]:
        return await self._repo.get_by_rentabilidade_range(
            rentabilidade_minima, rentabilidade_maxima
        )

    async def get_by_valor_range(
        self, valor_minimo: Decimal, valor_maximo: Decimal
    ) -> List[Investment]:
        return await self._repo.get_by_valor_range(valor_minimo, valor_maximo)

    async def get_by_periodo(self, data_inicio: date, data_fim: date) -> List[Investment]:
        return await self._repo.get_by_periodo(data_inicio, data_fim)

    async def search_advanced(
        self,
        nome: Optional[str] = None,
        tipo: Optional[str] = None,
        status: Optional[str] = None,
        rentabilidade_minima: Optional[Decimal] = None,
    ) -> List[Investment]:
        return await self._repo.search_multiple_filters(
            nome=nome,
            tipo=tipo,
            status=status,
            rentabilidade_minima=rentabilidade_minima,
        )

    async def get_top_rentaveis(self, quantidade: int) -> List[Investment]:
        return await self._repo.get_top_rentaveis(quantidade)

    # ── Statistics ──

    async def get_total_investido(self) -> Decimal:
        return await self._repo.get_total_investido()

    async def get_total_atual(self) -> Decimal:
        return await self._repo.get_total_atual()

    async def get_media_rentabilidade_by_tipo(self, tipo: str) -> Decimal:
        return await self._repo.get_media_rentabilidade_by_tipo(tipo)

    async def count_by_tipo(self, tipo: str) -> int:
        return await self._repo.count_by_tipo(tipo)

    # ── Commands ──

    async def create_investment(self, invest_in: InvestmentCreate) -> Investment:
        """
        Persist a new investment.

        Fails with 400 when the store refuses it, most commonly because
        ``investidorId`` does not reference an existing investor.
        """
        investment = Investment(**invest_in.model_dump(exclude={"id"}), id=None)
        if not await self._repo.add(investment):
            raise BadRequestException(
                "Investimento could not be created; check that investidorId exists"
            )
        logger.info(
            "Created investment %s: '%s' for investor %s",
            investment.id,
            investment.nome,
            investment.investidor_id,
        )
        return investment

    async def update_investment(self, investment_id: int, invest_in: InvestmentUpdate) -> None:
        if invest_in.id is not None and invest_in.id != investment_id:
            raise BadRequestException(
                f"Path id {investment_id} does not match body id {invest_in.id}"
            )
        investment = Investment(**invest_in.model_dump(exclude={"id"}), id=investment_id)
        if not await self._repo.update(investment):
            raise NotFoundException(RESOURCE, investment_id)
        logger.info("Updated investment %s", investment_id)

    async def delete_investment(self, investment_id: int) -> None:
        if not await self._repo.delete(investment_id):
            raise NotFoundException(RESOURCE, investment_id)
        logger.info("Deleted investment %s", investment_id)
