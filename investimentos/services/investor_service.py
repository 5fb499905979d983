"""
Investor service — business logic layer for investor operations.

Translates repository outcomes into domain errors:

- ``get`` returning ``None`` → :class:`NotFoundException` (404);
- ``add`` returning ``False`` → :class:`BadRequestException` (400);
- ``update`` / ``delete`` returning ``False`` → 404 (the record is gone, or the
  store refused the write, e.g. deleting an investor that still owns
  investments).
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from investimentos.core.exceptions import BadRequestException, NotFoundException
from investimentos.models.investor import Investor
from investimentos.repositories.investor_repo import InvestorRepository
from investimentos.schemas.investor import InvestorCreate, InvestorUpdate

logger = logging.getLogger(__name__)

RESOURCE = "Investidor"


class InvestorService:
    """Encapsulates CRUD, searches and statistics for :class:`Investor`."""

    def __init__(self, investor_repo: InvestorRepository):
        self._repo = investor_repo

    # ── Queries ──

    async def get_all_investors(self) -> List[Investor]:
        return await self._repo.get_all()

    async def get_investor(self, investor_id: int) -> Investor:
        investor = await self._repo.get(investor_id)
        if investor is None:
            raise NotFoundException(RESOURCE, investor_id)
        return investor

    async def search_by_name(self, nome: str) -> List[Investor]:
        return await self._repo.search_by_name(nome)

    async def get_by_perfil_risco(self, perfil_risco: str) -> List[Investor]:
        return await self._repo.get_by_perfil_risco(perfil_risco)

    async def get_by_saldo_range(
        self, saldo_minimo: Decimal, saldo_maximo: Decimal
    ) -> List[Investor]:
        return await self._repo.get_by_saldo_range(saldo_minimo, saldo_maximo)

    async def get_by_idade_range(
        self, idade_minima: int, idade_maxima: int, today: Optional[date] = None
    ) -> List[Investor]:
        return await self._repo.get_by_idade_range(idade_minima, idade_maxima, today)

    async def search_advanced(
        self,
        nome: Optional[str] = None,
        perfil_risco: Optional[str] = None,
        saldo_minimo: Optional[Decimal] = None,
        saldo_maximo: Optional[Decimal] = None,
    ) -> List[Investor]:
        return await self._repo.search_multiple_filters(
            nome=nome,
            perfil_risco=perfil_risco,
            saldo_minimo=saldo_minimo,
            saldo_maximo=saldo_maximo,
        )

    # ── Statistics ──

    async def get_total_saldo(self) -> Decimal:
        return await self._repo.get_total_saldo()

    async def count_by_perfil_risco(self, perfil_risco: str) -> int:
        return await self._repo.count_by_perfil_risco(perfil_risco)

    async def get_media_saldo_by_perfil(self, perfil_risco: str) -> Decimal:
        return await self._repo.get_media_saldo_by_perfil(perfil_risco)

    # ── Commands ──

    async def create_investor(self, investor_in: InvestorCreate) -> Investor:
        """
        Persist a new investor. Any client-supplied id is discarded so the
        store always assigns the identity.
        """
        investor = Investor(**investor_in.model_dump(exclude={"id"}), id=None)
        if not await self._repo.add(investor):
            raise BadRequestException("Investidor could not be created")
        logger.info("Created investor %s (%s)", investor.id, investor.nome)
        return investor

    async def update_investor(self, investor_id: int, investor_in: InvestorUpdate) -> None:
        """Full replace of investor ``investor_id``."""
        if investor_in.id is not None and investor_in.id != investor_id:
            raise BadRequestException(
                f"Path id {investor_id} does not match body id {investor_in.id}"
            )
        investor = Investor(**investor_in.model_dump(exclude={"id"}), id=investor_id)
        if not await self._repo.update(investor):
            raise NotFoundException(RESOURCE, investor_id)
        logger.info("Updated investor %s", investor_id)

    async def delete_investor(self, investor_id: int) -> None:
        if not await self._repo.delete(investor_id):
            raise NotFoundException(RESOURCE, investor_id)
        logger.info("Deleted investor %s", investor_id)
