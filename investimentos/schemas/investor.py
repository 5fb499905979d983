"""
Pydantic schemas for Investor API request / response serialisation.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import EmailStr, Field, field_serializer, field_validator

from investimentos.schemas.common import CamelModel


class InvestorBase(CamelModel):
    """Fields common to investor payloads."""

    nome: str = Field(..., min_length=1, max_length=100, examples=["Ana Souza"])
    cpf: str = Field(..., min_length=1, max_length=14, examples=["123.456.789-00"])
    email: EmailStr = Field(..., max_length=100, examples=["ana@exemplo.com"])
    data_nascimento: date = Field(..., examples=["1990-05-01"])
    saldo_total: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=18,
        decimal_places=2,
        examples=[1000.50],
    )
    perfil_risco: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Risk profile, e.g. Conservador, Moderado, Arrojado",
        examples=["Moderado"],
    )

    @field_validator("nome", "cpf", "perfil_risco")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_serializer("saldo_total")
    def serialize_saldo(self, v: Decimal) -> float:
        return float(v)


class InvestorCreate(InvestorBase):
    """
    Schema for ``POST /investidores``.

    Any ``id`` in the body is ignored; the store assigns it.
    """

    id: Optional[int] = Field(default=None, exclude=True)


class InvestorUpdate(InvestorBase):
    """
    Schema for ``PUT /investidores/{id}``.

    ``id`` may be omitted; when present it must equal the path id.
    """

    id: Optional[int] = None


class InvestorResponse(InvestorBase):
    """Schema returned by all investor endpoints."""

    id: int
    email: str


class TotalSaldoResponse(CamelModel):
    total_saldo: Decimal

    @field_serializer("total_saldo")
    def serialize_total(self, v: Decimal) -> float:
        return float(v)


class CountPerfilResponse(CamelModel):
    perfil_risco: str
    quantidade: int


class MediaSaldoPerfilResponse(CamelModel):
    perfil_risco: str
    media_saldo: Decimal

    @field_serializer("media_saldo")
    def serialize_media(self, v: Decimal) -> float:
        return float(v)
