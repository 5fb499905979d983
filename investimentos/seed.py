"""
Seed script — populates the database with sample investors and investments.

Usage:
    python -m investimentos.seed

The script is idempotent: it does nothing when investors already exist.
With ``USE_SQLITE=true`` the database is in-memory, so seeding only makes
sense against PostgreSQL.
"""

import asyncio
import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from investimentos.db.base import metadata
from investimentos.db.session import AsyncSessionLocal, engine
from investimentos.models.investment import Investment
from investimentos.models.investor import Investor

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s"
)
logger = logging.getLogger(__name__)


def sample_investors() -> list:
    return [
        Investor(
            nome="Ana Souza",
            cpf="111.222.333-44",
            email="ana.souza@exemplo.com",
            data_nascimento=date(1990, 5, 1),
            saldo_total=Decimal("15000.50"),
            perfil_risco="Moderado",
        ),
        Investor(
            nome="Bruno Lima",
            cpf="222.333.444-55",
            email="bruno.lima@exemplo.com",
            data_nascimento=date(1978, 11, 23),
            saldo_total=Decimal("250000.00"),
            perfil_risco="Arrojado",
        ),
        Investor(
            nome="Carla Mendes",
            cpf="333.444.555-66",
            email="carla.mendes@exemplo.com",
            data_nascimento=date(1965, 2, 14),
            saldo_total=Decimal("82000.00"),
            perfil_risco="Conservador",
        ),
    ]


def sample_investments(ana: Investor, bruno: Investor, carla: Investor) -> list:
    return [
        Investment(
            nome="Tesouro Selic 2029",
            tipo="Renda Fixa",
            valor_inicial=Decimal("10000.00"),
            valor_atual=Decimal("10850.25"),
            rentabilidade=Decimal("8.50"),
            data_inicio=date(2024, 1, 15),
            data_vencimento=date(2029, 3, 1),
            investidor_id=ana.id,
            status="Ativo",
        ),
        Investment(
            nome="PETR4",
            tipo="Ações",
            valor_inicial=Decimal("50000.00"),
            valor_atual=Decimal("46200.00"),
            rentabilidade=Decimal("-7.60"),
            data_inicio=date(2023, 6, 2),
            investidor_id=bruno.id,
            status="Ativo",
        ),
        Investment(
            nome="Fundo Multimercado XP",
            tipo="Fundos",
            valor_inicial=Decimal("30000.00"),
            valor_atual=Decimal("34500.00"),
            rentabilidade=Decimal("15.00"),
            data_inicio=date(2022, 9, 10),
            investidor_id=bruno.id,
            status="Ativo",
        ),
        Investment(
            nome="CDB Banco Inter 120% CDI",
            tipo="Renda Fixa",
            valor_inicial=Decimal("20000.00"),
            valor_atual=Decimal("23100.00"),
            rentabilidade=Decimal("15.50"),
            data_inicio=date(2021, 4, 5),
            data_vencimento=date(2024, 4, 5),
            investidor_id=carla.id,
            status="Vencido",
        ),
    ]


async def seed() -> None:
    """Create tables and insert sample data if the database is empty."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Investor).limit(1))
        if result.scalars().first() is not None:
            logger.info("Database already contains data — skipping seed.")
            return

        investors = sample_investors()
        session.add_all(investors)
        await session.commit()

        # Investments need the investor ids assigned by the insert above
        investments = sample_investments(*investors)
        session.add_all(investments)
        await session.commit()

        logger.info("Seeded %d investors, %d investments", len(investors), len(investments))


if __name__ == "__main__":
    asyncio.run(seed())
