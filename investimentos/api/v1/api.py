"""
V1 API router aggregation.

All versioned endpoint routers are mounted here; ``main.py`` mounts this
router at ``/api/v1``.
"""

from fastapi import APIRouter

from investimentos.api.v1.endpoints import (
    alpha_vantage,
    files,
    investments,
    investors,
    marketstack,
)

api_router = APIRouter()

api_router.include_router(investors.router, prefix="/investidores", tags=["Investidores"])
api_router.include_router(investments.router, prefix="/investimentos", tags=["Investimentos"])
api_router.include_router(files.router, prefix="/arquivos", tags=["Arquivos"])
api_router.include_router(alpha_vantage.router, prefix="/alphavantage", tags=["Alpha Vantage"])
api_router.include_router(marketstack.router, prefix="/marketstack", tags=["MarketStack"])
