"""
Shared pytest fixtures for unit tests.

All tests run with ``USE_SQLITE=true``. Service and API tests use mocked
dependencies; repository and file tests get a fresh in-memory SQLite
database per test, so no external database or network I/O is needed.
"""

import os

os.environ.setdefault("USE_SQLITE", "true")

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from investimentos.db.base import metadata  # noqa: E402
from investimentos.db.session import build_engine  # noqa: E402
from investimentos.models.investment import Investment  # noqa: E402
from investimentos.models.investor import Investor  # noqa: E402

# ────────────────────────────────────────────────────────────────────────────
# Factory helpers: create domain objects with sensible defaults
# ────────────────────────────────────────────────────────────────────────────

INVESTOR_ID = 1
INVESTMENT_ID = 10


def make_investor(
    *,
    id: Optional[int] = INVESTOR_ID,
    nome: str = "Ana Souza",
    cpf: str = "111.222.333-44",
    email: str = "ana@exemplo.com",
    data_nascimento: date = date(1990, 5, 1),
    saldo_total: Decimal = Decimal("1000.50"),
    perfil_risco: str = "Moderado",
) -> Investor:
    """Create an Investor with sensible test defaults."""
    return Investor(
        id=id,
        nome=nome,
        cpf=cpf,
        email=email,
        data_nascimento=data_nascimento,
        saldo_total=saldo_total,
        perfil_risco=perfil_risco,
    )


def make_investment(
    *,
    id: Optional[int] = INVESTMENT_ID,
    nome: str = "Tesouro Selic 2029",
    tipo: str = "Renda Fixa",
    valor_inicial: Decimal = Decimal("10000.00"),
    valor_atual: Decimal = Decimal("10850.25"),
    rentabilidade: Decimal = Decimal("8.50"),
    data_inicio: date = date(2024, 1, 15),
    data_vencimento: Optional[date] = None,
    investidor_id: int = INVESTOR_ID,
    status: str = "Ativo",
) -> Investment:
    """Create an Investment with sensible test defaults."""
    return Investment(
        id=id,
        nome=nome,
        tipo=tipo,
        valor_inicial=valor_inicial,
        valor_atual=valor_atual,
        rentabilidade=rentabilidade,
        data_inicio=data_inicio,
        data_vencimento=data_vencimento,
        investidor_id=investidor_id,
        status=status,
    )


# ────────────────────────────────────────────────────────────────────────────
# Pytest fixtures
# ────────────────────────────────────────────────────────────────────────────


@pytest.fixture()
def mock_db():
    """A mocked AsyncSession that tracks add/commit/refresh/rollback calls."""
    session = AsyncMock()
    session.add = MagicMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    return session


@pytest_asyncio.fixture()
async def db_session():
    """A session on a private in-memory SQLite database with all tables created."""
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    session_factory = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
    await engine.dispose()
