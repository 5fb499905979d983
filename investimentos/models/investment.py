"""
Investment domain model.

One position (``Investimento``) held by an investor: what it is, how much went
in, what it is worth now, and its return. The FK to ``investidores`` is
declared without a cascade rule, so the store rejects deleting an investor
that still owns investments.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from investimentos.models.investor import Investor


class Investment(SQLModel, table=True):
    """
    SQLModel / SQLAlchemy table definition for investments.

    - ``valor_inicial`` / ``valor_atual`` are DECIMAL(18,2).
    - ``rentabilidade`` is a signed percentage, DECIMAL(10,2).
    - ``data_vencimento`` is optional (open-ended positions).
    """

    __tablename__ = "investimentos"  # type: ignore[assignment]

    __table_args__ = (
        CheckConstraint("valor_inicial > 0", name="ck_investimentos_valor_inicial_positive"),
        CheckConstraint("valor_atual >= 0", name="ck_investimentos_valor_atual_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str = Field(max_length=100)
    tipo: str = Field(index=True, max_length=50)
    valor_inicial: Decimal = Field(max_digits=18, decimal_places=2)
    valor_atual: Decimal = Field(max_digits=18, decimal_places=2)
    rentabilidade: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    data_inicio: date = Field(index=True)
    data_vencimento: Optional[date] = None
    investidor_id: int = Field(foreign_key="investidores.id", index=True)
    status: str = Field(max_length=20)

    # ── Relationships ──
    investidor: Optional["Investor"] = Relationship(back_populates="investimentos")

    def __repr__(self) -> str:
        return (
            f"<Investment id={self.id} nome='{self.nome}' tipo={self.tipo} "
            f"investidor={self.investidor_id} rentabilidade={self.rentabilidade}%>"
        )
