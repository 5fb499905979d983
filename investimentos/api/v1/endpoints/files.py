"""
File import/export endpoints (``/arquivos``).

- GET  /arquivos/exportar/investidores/json
- GET  /arquivos/exportar/investidores/txt
- GET  /arquivos/exportar/investimentos
- POST /arquivos/importar/investidores   (multipart field ``arquivo``)
- POST /arquivos/importar/investimentos  (multipart field ``arquivo``)
"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from investimentos.core.config import settings
from investimentos.db.session import get_db
from investimentos.repositories.investment_repo import InvestmentRepository
from investimentos.repositories.investor_repo import InvestorRepository
from investimentos.schemas.common import (
    ErrorResponse,
    FileExportResponse,
    FileImportResponse,
)
from investimentos.services.file_service import FileService

router = APIRouter()

IMPORT_ERRORS = {
    400: {"model": ErrorResponse, "description": "Empty, malformed or invalid file"}
}


def _get_file_service(db: AsyncSession = Depends(get_db)) -> FileService:
    return FileService(InvestorRepository(db), InvestmentRepository(db), settings.EXPORT_DIR)


@router.get("/exportar/investidores/json", response_model=FileExportResponse)
async def export_investors_json(
    service: FileService = Depends(_get_file_service),
) -> FileExportResponse:
    return await service.export_investors_json()


@router.get("/exportar/investidores/txt", response_model=FileExportResponse)
async def export_investors_txt(
    service: FileService = Depends(_get_file_service),
) -> FileExportResponse:
    return await service.export_investors_txt()


@router.get("/exportar/investimentos", response_model=FileExportResponse)
async def export_investments(
    service: FileService = Depends(_get_file_service),
) -> FileExportResponse:
    return await service.export_investments_json()


@router.post(
    "/importar/investidores",
    response_model=FileImportResponse,
    summary="Import investors from a JSON array",
    description="All records are validated first; one invalid record rejects the whole file.",
    responses=IMPORT_ERRORS,
)
async def import_investors(
    arquivo: UploadFile = File(...),
    service: FileService = Depends(_get_file_service),
) -> FileImportResponse:
    return await service.import_investors(await arquivo.read())


@router.post(
    "/importar/investimentos",
    response_model=FileImportResponse,
    summary="Import investments from a JSON array",
    description="Investments whose investor does not exist are skipped and not counted.",
    responses=IMPORT_ERRORS,
)
async def import_investments(
    arquivo: UploadFile = File(...),
    service: FileService = Depends(_get_file_service),
) -> FileImportResponse:
    return await service.import_investments(await arquivo.read())
