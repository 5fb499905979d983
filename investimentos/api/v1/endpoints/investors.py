"""
Investor API endpoints (``/investidores``).

- GET    /investidores                          — List all investors
- GET    /investidores/{id}                     — Fetch one investor
- POST   /investidores                          — Create an investor
- PUT    /investidores/{id}                     — Replace an investor
- DELETE /investidores/{id}                     — Delete an investor
- GET    /investidores/buscar/...               — Searches
- GET    /investidores/estatisticas/...         — Aggregations
"""

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from investimentos.db.session import get_db
from investimentos.repositories.investor_repo import InvestorRepository
from investimentos.schemas.common import ErrorResponse, ValidationErrorResponse
from investimentos.schemas.investor import (
    CountPerfilResponse,
    InvestorCreate,
    InvestorResponse,
    InvestorUpdate,
    MediaSaldoPerfilResponse,
    TotalSaldoResponse,
)
from investimentos.services.investor_service import InvestorService

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Investor not found"}}
INVALID = {400: {"model": ValidationErrorResponse, "description": "Invalid request"}}

MAX_IDADE = 150


# ── Dependency injection ──


def _get_investor_service(db: AsyncSession = Depends(get_db)) -> InvestorService:
    """Build an InvestorService wired to the current request's DB session."""
    return InvestorService(InvestorRepository(db))


# ── CRUD ──


@router.get("", response_model=List[InvestorResponse], summary="List all investors")
async def list_investors(
    service: InvestorService = Depends(_get_investor_service),
) -> List[InvestorResponse]:
    return await service.get_all_investors()


@router.get(
    "/{investor_id}",
    response_model=InvestorResponse,
    summary="Get an investor by id",
    responses=NOT_FOUND,
)
async def get_investor(
    investor_id: int,
    service: InvestorService = Depends(_get_investor_service),
) -> InvestorResponse:
    return await service.get_investor(investor_id)


@router.post(
    "",
    response_model=InvestorResponse,
    status_code=201,
    summary="Create an investor",
    description="The id is assigned by the store; any id in the body is ignored.",
    responses=INVALID,
)
async def create_investor(
    investor: InvestorCreate,
    service: InvestorService = Depends(_get_investor_service),
) -> InvestorResponse:
    return await service.create_investor(investor)


@router.put(
    "/{investor_id}",
    status_code=204,
    summary="Replace an investor",
    description="A body ``id``, when present, must match the path id (400 otherwise).",
    responses={**INVALID, **NOT_FOUND},
)
async def update_investor(
    investor_id: int,
    investor: InvestorUpdate,
    service: InvestorService = Depends(_get_investor_service),
) -> Response:
    await service.update_investor(investor_id, investor)
    return Response(status_code=204)


@router.delete(
    "/{investor_id}",
    status_code=204,
    summary="Delete an investor",
    description="Investors that still own investments cannot be deleted (404).",
    responses=NOT_FOUND,
)
async def delete_investor(
    investor_id: int,
    service: InvestorService = Depends(_get_investor_service),
) -> Response:
    await service.delete_investor(investor_id)
    return Response(status_code=204)


# ── Searches ──


@router.get(
    "/buscar/nome/{nome}",
    response_model=List[InvestorResponse],
    summary="Search investors by name (case-insensitive substring)",
)
async def search_by_name(
    nome: str,
    service: InvestorService = Depends(_get_investor_service),
) -> List[InvestorResponse]:
    return await service.search_by_name(nome)


@router.get(
    "/buscar/perfil/{perfil_risco}",
    response_model=List[InvestorResponse],
    summary="Investors with a given risk profile",
)
async def get_by_perfil(
    perfil_risco: str,
    service: InvestorService = Depends(_get_investor_service),
) -> List[InvestorResponse]:
    return await service.get_by_perfil_risco(perfil_risco)


@router.get(
    "/buscar/saldo",
    response_model=List[InvestorResponse],
    summary="Investors within an inclusive balance range",
    responses=INVALID,
)
async def get_by_saldo(
    saldo_minimo: Decimal = Query(..., alias="saldoMinimo"),
    saldo_maximo: Decimal = Query(..., alias="saldoMaximo"),
    service: InvestorService = Depends(_get_investor_service),
) -> List[InvestorResponse]:
    return await service.get_by_saldo_range(saldo_minimo, saldo_maximo)


@router.get(
    "/buscar/idade",
    response_model=List[InvestorResponse],
    summary="Investors within an inclusive age range (as of today)",
    responses=INVALID,
)
async def get_by_idade(
    idade_minima: int = Query(..., alias="idadeMinima", ge=0, le=MAX_IDADE),
    idade_maxima: int = Query(..., alias="idadeMaxima", ge=0, le=MAX_IDADE),
    service: InvestorService = Depends(_get_investor_service),
) -> List[InvestorResponse]:
    return await service.get_by_idade_range(idade_minima, idade_maxima)


@router.get(
    "/buscar/avancada",
    response_model=List[InvestorResponse],
    summary="Combined search; omitted criteria are ignored",
)
async def search_advanced(
    nome: Optional[str] = Query(None),
    perfil_risco: Optional[str] = Query(None, alias="perfilRisco"),
    saldo_minimo: Optional[Decimal] = Query(None, alias="saldoMinimo"),
    saldo_maximo: Optional[Decimal] = Query(None, alias="saldoMaximo"),
    service: InvestorService = Depends(_get_investor_service),
) -> List[InvestorResponse]:
    return await service.search_advanced(
        nome=nome,
        perfil_risco=perfil_risco,
        saldo_minimo=saldo_minimo,
        saldo_maximo=saldo_maximo,
    )


# ── Statistics ──


@router.get("/estatisticas/total-saldo", response_model=TotalSaldoResponse)
async def total_saldo(
    service: InvestorService = Depends(_get_investor_service),
) -> TotalSaldoResponse:
    return TotalSaldoResponse(total_saldo=await service.get_total_saldo())


@router.get("/estatisticas/count-perfil/{perfil_risco}", response_model=CountPerfilResponse)
async def count_by_perfil(
    perfil_risco: str,
    service: InvestorService = Depends(_get_investor_service),
) -> CountPerfilResponse:
    return CountPerfilResponse(
        perfil_risco=perfil_risco,
        quantidade=await service.count_by_perfil_risco(perfil_risco),
    )


@router.get(
    "/estatisticas/media-saldo-perfil/{perfil_risco}",
    response_model=MediaSaldoPerfilResponse,
)
async def media_saldo_by_perfil(
    perfil_risco: str,
    service: InvestorService = Depends(_get_investor_service),
) -> MediaSaldoPerfilResponse:
    return MediaSaldoPerfilResponse(
        perfil_risco=perfil_risco,
        media_saldo=await service.get_media_saldo_by_perfil(perfil_risco),
    )
