"""
Pydantic schemas for Investment API request / response serialisation.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_serializer, field_validator

from investimentos.schemas.common import CamelModel


class InvestmentBase(CamelModel):
    """Fields common to investment payloads."""

    nome: str = Field(..., min_length=1, max_length=100, examples=["Tesouro Selic 2029"])
    tipo: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Asset class, e.g. Renda Fixa, Ações, Fundos",
        examples=["Renda Fixa"],
    )
    valor_inicial: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2, examples=[10000])
    valor_atual: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2, examples=[10850.25])
    rentabilidade: Decimal = Field(
        default=Decimal("0"),
        max_digits=10,
        decimal_places=2,
        description="Return in percent; may be negative",
        examples=[8.5],
    )
    data_inicio: date = Field(..., examples=["2024-01-15"])
    data_vencimento: Optional[date] = Field(default=None, examples=["2029-03-01"])
    investidor_id: int = Field(..., ge=1, description="Owning investor")
    status: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Lifecycle state, e.g. Ativo, Resgatado, Vencido",
        examples=["Ativo"],
    )

    @field_validator("nome", "tipo", "status")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_serializer("valor_inicial", "valor_atual", "rentabilidade")
    def serialize_decimal(self, v: Decimal) -> float:
        return float(v)


class InvestmentCreate(InvestmentBase):
    """Schema for ``POST /investimentos``. Any body ``id`` is ignored."""

    id: Optional[int] = Field(default=None, exclude=True)


class InvestmentUpdate(InvestmentBase):
    """Schema for ``PUT /investimentos/{id}``; a body ``id`` must match the path."""

    id: Optional[int] = None


class InvestmentResponse(InvestmentBase):
    """Schema returned by investment endpoints."""

    id: int


class TotalInvestidoResponse(CamelModel):
    total_investido: Decimal

    @field_serializer("total_investido")
    def serialize_total(self, v: Decimal) -> float:
        return float(v)


class TotalAtualResponse(CamelModel):
    total_atual: Decimal

    @field_serializer("total_atual")
    def serialize_total(self, v: Decimal) -> float:
        return float(v)


class MediaRentabilidadeTipoResponse(CamelModel):
    tipo: str
    media_rentabilidade: Decimal

    @field_serializer("media_rentabilidade")
    def serialize_media(self, v: Decimal) -> float:
        return float(v)


class CountTipoResponse(CamelModel):
    tipo: str
    quantidade: int
