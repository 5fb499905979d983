"""
Investor domain model.

An investor (``Investidor``) holds a cash balance and a risk profile
(e.g. Conservador, Moderado, Arrojado) and owns zero or more investments.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from investimentos.models.investment import Investment


class Investor(SQLModel, table=True):
    """
    SQLModel / SQLAlchemy table definition for investors.

    ``id`` is ``None`` until the store assigns it on insert.
    ``saldo_total`` uses DECIMAL(18,2).
    """

    __tablename__ = "investidores"  # type: ignore[assignment]

    __table_args__ = (
        CheckConstraint("length(nome) > 0", name="ck_investidores_nome_not_empty"),
        CheckConstraint("saldo_total >= 0", name="ck_investidores_saldo_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str = Field(index=True, max_length=100)
    cpf: str = Field(max_length=14)
    email: str = Field(max_length=100)
    data_nascimento: date
    saldo_total: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    perfil_risco: str = Field(index=True, max_length=20)

    # ── Relationships ──
    # passive_deletes="all": leave child rows alone on delete so the FK rejects it.
    investimentos: List["Investment"] = Relationship(
        back_populates="investidor",
        sa_relationship_kwargs={"passive_deletes": "all"},
    )

    def __repr__(self) -> str:
        return f"<Investor id={self.id} nome='{self.nome}' perfil={self.perfil_risco}>"
