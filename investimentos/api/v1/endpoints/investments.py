"""
Investment API endpoints (``/investimentos``).

CRUD plus per-investor listing, searches, a top-N ranking by return and
aggregate statistics. Writes referencing a nonexistent investor are
rejected (400 on create, 404 on update).
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from investimentos.db.session import get_db
from investimentos.repositories.investment_repo import InvestmentRepository
from investimentos.schemas.common import ErrorResponse, ValidationErrorResponse
from investimentos.schemas.investment import (
    CountTipoResponse,
    InvestmentCreate,
    InvestmentResponse,
    InvestmentUpdate,
    MediaRentabilidadeTipoResponse,
    TotalAtualResponse,
    TotalInvestidoResponse,
)
from investimentos.services.investment_service import InvestmentService

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Investment not found"}}
INVALID = {400: {"model": ValidationErrorResponse, "description": "Invalid request"}}


# ── Dependency injection ──


def _get_investment_service(db: AsyncSession = Depends(get_db)) -> InvestmentService:
    """Build an InvestmentService wired to the current request's DB session."""
    return InvestmentService(InvestmentRepository(db))


# ── CRUD ──


@router.get("", response_model=List[InvestmentResponse], summary="List all investments")
async def list_investments(
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_all_investments()


@router.get(
    "/{investment_id}",
    response_model=InvestmentResponse,
    summary="Get an investment by id",
    responses=NOT_FOUND,
)
async def get_investment(
    investment_id: int,
    service: InvestmentService = Depends(_get_investment_service),
) -> InvestmentResponse:
    return await service.get_investment(investment_id)


@router.get(
    "/investidor/{investidor_id}",
    response_model=List[InvestmentResponse],
    summary="All investments owned by an investor",
)
async def get_by_investidor(
    investidor_id: int,
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_by_investidor(investidor_id)


@router.post(
    "",
    response_model=InvestmentResponse,
    status_code=201,
    summary="Create an investment",
    description="``investidorId`` must reference an existing investor (400 otherwise).",
    responses=INVALID,
)
async def create_investment(
    investment: InvestmentCreate,
    service: InvestmentService = Depends(_get_investment_service),
) -> InvestmentResponse:
    return await service.create_investment(investment)


@router.put(
    "/{investment_id}",
    status_code=204,
    summary="Replace an investment",
    responses={**INVALID, **NOT_FOUND},
)
async def update_investment(
    investment_id: int,
    investment: InvestmentUpdate,
    service: InvestmentService = Depends(_get_investment_service),
) -> Response:
    await service.update_investment(investment_id, investment)
    return Response(status_code=204)


@router.delete(
    "/{investment_id}",
    status_code=204,
    summary="Delete an investment",
    responses=NOT_FOUND,
)
async def delete_investment(
    investment_id: int,
    service: InvestmentService = Depends(_get_investment_service),
) -> Response:
    await service.delete_investment(investment_id)
    return Response(status_code=204)


# ── Searches ──


@router.get("/buscar/tipo/{tipo}", response_model=List[InvestmentResponse])
async def get_by_tipo(
    tipo: str,
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_by_tipo(tipo)


@router.get("/buscar/status/{status}", response_model=List[InvestmentResponse])
async def get_by_status(
    status: str,
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_by_status(status)


@router.get(
    "/buscar/rentabilidade",
    response_model=List[InvestmentResponse],
    summary="Investments within an inclusive return range",
    responses=INVALID,
)
async def get_by_rentabilidade(
    rentabilidade_minima: Decimal = Query(..., alias="rentabilidadeMinima"),
    rentabilidade_maxima: Decimal = Query(..., alias="rentabilidadeMaxima"),
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_by_rentabilidade_range(rentabilidade_minima, rentabilidade_maxima)


@router.get(
    "/buscar/valor",
    response_model=List[InvestmentResponse],
    summary="Investments whose current value is within an inclusive range",
    responses=INVALID,
)
async def get_by_valor(
    valor_minimo: Decimal = Query(..., alias="valorMinimo"),
    valor_maximo: Decimal = Query(..., alias="valorMaximo"),
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_by_valor_range(valor_minimo, valor_maximo)


@router.get(
    "/buscar/periodo",
    response_model=List[InvestmentResponse],
    summary="Investments started within an inclusive date range",
    responses=INVALID,
)
async def get_by_periodo(
    data_inicio: date = Query(..., alias="dataInicio"),
    data_fim: date = Query(..., alias="dataFim"),
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_by_periodo(data_inicio, data_fim)


@router.get(
    "/buscar/avancada",
    response_model=List[InvestmentResponse],
    summary="Combined search; omitted criteria are ignored",
)
async def search_advanced(
    nome: Optional[str] = Query(None),
    tipo: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    rentabilidade_minima: Optional[Decimal] = Query(None, alias="rentabilidadeMinima"),
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.search_advanced(
        nome=nome,
        tipo=tipo,
        status=status,
        rentabilidade_minima=rentabilidade_minima,
    )


@router.get(
    "/top-rentaveis/{quantidade}",
    response_model=List[InvestmentResponse],
    summary="The N investments with the highest return",
)
async def get_top_rentaveis(
    quantidade: int = Path(..., ge=1),
    service: InvestmentService = Depends(_get_investment_service),
) -> List[InvestmentResponse]:
    return await service.get_top_rentaveis(quantidade)


# ── Statistics ──


@router.get("/estatisticas/total-investido", response_model=TotalInvestidoResponse)
async def total_investido(
    service: InvestmentService = Depends(_get_investment_service),
) -> TotalInvestidoResponse:
    return TotalInvestidoResponse(total_investido=await service.get_total_investido())


@router.get("/estatisticas/total-atual", response_model=TotalAtualResponse)
async def total_atual(
    service: InvestmentService = Depends(_get_investment_service),
) -> TotalAtualResponse:
    return TotalAtualResponse(total_atual=await service.get_total_atual())


@router.get(
    "/estatisticas/media-rentabilidade-tipo/{tipo}",
    response_model=MediaRentabilidadeTipoResponse,
)
async def media_rentabilidade_by_tipo(
    tipo: str,
    service: InvestmentService = Depends(_get_investment_service),
) -> MediaRentabilidadeTipoResponse:
    return MediaRentabilidadeTipoResponse(
        tipo=tipo,
        media_rentabilidade=await service.get_media_rentabilidade_by_tipo(tipo),
    )


@router.get("/estatisticas/count-tipo/{tipo}", response_model=CountTipoResponse)
async def count_by_tipo(
    tipo: str,
    service: InvestmentService = Depends(_get_investment_service),
) -> CountTipoResponse:
    return CountTipoResponse(tipo=tipo, quantidade=await service.count_by_tipo(tipo))
