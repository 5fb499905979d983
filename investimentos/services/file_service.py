"""
File service — JSON/TXT export and JSON import of investors and investments.

Exports are written under ``settings.EXPORT_DIR`` with a timestamped name
(``investidores_20240101120000.json``) and the path is returned to the caller.

Imports accept a JSON array of objects. Property names are matched
case-insensitively against either the camelCase or the snake_case field name
(``Nome``, ``nome``, ``saldoTotal``, ``SALDO_TOTAL`` …). Every record is
validated before anything is written; a single invalid record fails the
whole file with a 400. Valid files are then inserted record by record and
the response reports how many of them the store accepted.
"""

import asyncio
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Sequence, Type

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from investimentos.core.exceptions import BadRequestException, format_validation_errors
from investimentos.models.investment import Investment
from investimentos.models.investor import Investor
from investimentos.repositories.investment_repo import InvestmentRepository
from investimentos.repositories.investor_repo import InvestorRepository
from investimentos.schemas.common import FileExportResponse, FileImportResponse
from investimentos.schemas.investment import InvestmentCreate, InvestmentResponse
from investimentos.schemas.investor import InvestorCreate, InvestorResponse

logger = logging.getLogger(__name__)

TXT_HEADER = "ID,Nome,CPF,Email,DataNascimento,SaldoTotal,PerfilRisco"


def investor_to_txt_line(investor: Investor) -> str:
    """``1,Ana,111,a@a.com,1990-05-01,1000.50,Moderado``"""
    return ",".join(
        [
            str(investor.id),
            investor.nome,
            investor.cpf,
            investor.email,
            investor.data_nascimento.isoformat(),
            f"{investor.saldo_total:.2f}",
            investor.perfil_risco,
        ]
    )


def normalise_keys(record: Dict[str, Any], schema: Type[BaseModel]) -> Dict[str, Any]:
    """Map any casing of a camelCase/snake_case key onto the schema's field names."""
    lookup: Dict[str, str] = {}
    for name in schema.model_fields:
        lookup[name.lower()] = name
        lookup[to_camel(name).lower()] = name
    normalised: Dict[str, Any] = {}
    for key, value in record.items():
        field = lookup.get(str(key).lower())
        if field is not None:
            normalised[field] = value
    return normalised


def parse_records(content: bytes, schema: Type[BaseModel]) -> List[BaseModel]:
    """
    Decode an uploaded JSON array and validate every element against ``schema``.

    Raises :class:`BadRequestException` for an empty file, malformed JSON,
    a non-array document, or any element that fails validation.
    """
    if not content or not content.strip():
        raise BadRequestException("Arquivo vazio")
    try:
        document = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise BadRequestException(f"Arquivo JSON inválido: {exc}")
    if not isinstance(document, list):
        raise BadRequestException("O arquivo deve conter um array JSON")

    records: List[BaseModel] = []
    errors: List[Dict[str, Any]] = []
    for index, item in enumerate(document):
        if not isinstance(item, dict):
            errors.append({"field": f"[{index}]", "message": "Registro deve ser um objeto"})
            continue
        try:
            records.append(schema.model_validate(normalise_keys(item, schema)))
        except ValidationError as exc:
            for err in format_validation_errors(exc.errors()):
                errors.append({"field": f"[{index}] -> {err['field']}", "message": err["message"]})

    if errors:
        raise BadRequestException(
            f"{len(errors)} erro(s) de validação; nenhum registro foi importado",
            details=errors,
        )
    return records


def _write_text(path: str, text: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


class FileService:
    """Export/import orchestration over the investor and investment repositories."""

    def __init__(
        self,
        investor_repo: InvestorRepository,
        invest_repo: InvestmentRepository,
        export_dir: str,
    ):
        self._investor_repo = investor_repo
        self._invest_repo = invest_repo
        self._export_dir = export_dir

    def _export_path(self, prefix: str, extension: str) -> str:
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        return os.path.join(self._export_dir, f"{prefix}_{stamp}.{extension}")

    async def _write(self, path: str, text: str) -> None:
        await asyncio.to_thread(_write_text, path, text)

    @staticmethod
    def _to_json(rows: Sequence[Any], schema: Type[BaseModel]) -> str:
        payload = [schema.model_validate(row).model_dump(mode="json", by_alias=True) for row in rows]
        return json.dumps(payload, ensure_ascii=False, indent=2)

    # ── Export ──

    async def export_investors_json(self) -> FileExportResponse:
        investors = await self._investor_repo.get_all()
        path = self._export_path("investidores", "json")
        await self._write(path, self._to_json(investors, InvestorResponse))
        logger.info("Exported %d investors to %s", len(investors), path)
        return FileExportResponse(arquivo=path, mensagem="Investidores exportados com sucesso")

    async def export_investors_txt(self) -> FileExportResponse:
        investors = await self._investor_repo.get_all()
        lines = [TXT_HEADER] + [investor_to_txt_line(i) for i in investors]
        path = self._export_path("investidores", "txt")
        await self._write(path, "\n".join(lines) + "\n")
        logger.info("Exported %d investors to %s", len(investors), path)
        return FileExportResponse(arquivo=path, mensagem="Investidores exportados com sucesso")

    async def export_investments_json(self) -> FileExportResponse:
        investments = await self._invest_repo.get_all()
        path = self._export_path("investimentos", "json")
        await self._write(path, self._to_json(investments, InvestmentResponse))
        logger.info("Exported %d investments to %s", len(investments), path)
        return FileExportResponse(arquivo=path, mensagem="Investimentos exportados com sucesso")

    # ── Import ──

    async def import_investors(self, content: bytes) -> FileImportResponse:
        records = parse_records(content, InvestorCreate)
        imported = 0
        for record in records:
            investor = Investor(**record.model_dump(exclude={"id"}), id=None)
            if await self._investor_repo.add(investor):
                imported += 1
        logger.info("Imported %d of %d investors", imported, len(records))
        return FileImportResponse(
            mensagem=f"Importados {imported} de {len(records)} investidores",
            importados=imported,
            total=len(records),
        )

    async def import_investments(self, content: bytes) -> FileImportResponse:
        records = parse_records(content, InvestmentCreate)
        imported = 0
        for record in records:
            investment = Investment(**record.model_dump(exclude={"id"}), id=None)
            if await self._invest_repo.add(investment):
                imported += 1
        if imported < len(records):
            logger.warning(
                "Skipped %d investment(s) rejected by the store", len(records) - imported
            )
        logger.info("Imported %d of %d investments", imported, len(records))
        return FileImportResponse(
            mensagem=f"Importados {imported} de {len(records)} investimentos",
            importados=imported,
            total=len(records),
        )
