"""
Investimentos API — Application entry-point.

Initializes the FastAPI application, registers middleware, exception handlers
and routers, and manages the application lifecycle: table creation and the
market-data clients on startup, cleanup on shutdown.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from investimentos.api.v1.api import api_router
from investimentos.clients.alpha_vantage import AlphaVantageClient
from investimentos.clients.marketstack import MarketStackClient
from investimentos.core.config import settings
from investimentos.core.exceptions import add_exception_handlers
from investimentos.core.logging import setup_logging
from investimentos.db.base import metadata
from investimentos.db.session import AsyncSessionLocal, engine
from investimentos.middleware import RequestIDMiddleware, RequestTimingMiddleware

setup_logging()
logger = logging.getLogger(__name__)

DB_CONNECT_ATTEMPTS = 5


# ────────────────────────────────────────────────────────────────────────────
# Application lifespan
# ────────────────────────────────────────────────────────────────────────────


async def create_tables() -> None:
    """
    Create missing tables, waiting for the database to come up.

    Only the *initial* connection is retried (containers start in any order);
    request-time store calls are never retried. If the database stays down
    the app starts in degraded mode and ``/health`` reports it.
    """
    delay = 2
    for attempt in range(1, DB_CONNECT_ATTEMPTS + 1):
        try:
            logger.info("Connecting to database (attempt %d/%d)…", attempt, DB_CONNECT_ATTEMPTS)
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
            logger.info("Database tables ready")
            return
        except (SQLAlchemyError, OSError) as exc:
            if attempt == DB_CONNECT_ATTEMPTS:
                logger.error(
                    "Could not connect to database after %d attempts; starting in "
                    "DEGRADED mode. Last error: %s",
                    DB_CONNECT_ATTEMPTS,
                    exc,
                )
                return
            logger.warning(
                "Database connection failed (attempt %d/%d): %s — retrying in %ds…",
                attempt,
                DB_CONNECT_ATTEMPTS,
                exc,
                delay,
            )
            await asyncio.sleep(delay)
            delay *= 2


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: create tables, build one client per market-data provider from
    ``settings`` and park them on ``app.state``.

    Shutdown: close the HTTP clients and dispose of the connection pool.
    """
    await create_tables()

    app.state.alpha_vantage = AlphaVantageClient(settings.alpha_vantage)
    app.state.marketstack = MarketStackClient(settings.marketstack)
    if not settings.marketstack.is_configured:
        logger.warning("MARKETSTACK_API_KEY not set; /marketstack endpoints will return 503")

    yield

    logger.info("Shutting down — closing clients and disposing connection pool")
    await app.state.alpha_vantage.close()
    await app.state.marketstack.close()
    await engine.dispose()


# ────────────────────────────────────────────────────────────────────────────
# FastAPI application instance
# ────────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description=(
        "Manage investors and their investments, search and aggregate them, "
        "import/export files, and query Alpha Vantage / MarketStack market data."
    ),
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# ── Middleware (order matters: outermost = first to execute) ──
app.add_middleware(GZipMiddleware, minimum_size=500)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Global error handlers ──
add_exception_handlers(app)

# ── API routers ──
app.include_router(api_router, prefix=settings.API_V1_STR)


# ── Health check ──


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Liveness / readiness probe.

    Runs ``SELECT 1`` against the store and reports which market-data
    providers have credentials configured.
    """
    db_healthy = True
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check: database unreachable: %s", exc)
        db_healthy = False

    return {
        "status": "ok" if db_healthy else "degraded",
        "version": "1.0.0",
        "database": db_healthy,
        "providers": {
            "alphaVantage": settings.alpha_vantage.is_configured,
            "marketStack": settings.marketstack.is_configured,
        },
    }
