"""
Application configuration module.

Loads settings from environment variables (or .env file) using pydantic-settings.
All sensitive values (DB credentials, market-data API keys) come from the
environment — never hardcoded.
"""

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderConfig(BaseModel):
    """Connection parameters for one external market-data provider."""

    api_key: str
    base_url: str
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class Settings(BaseSettings):
    """
    Central configuration for the Investimentos API.

    Environment variables are loaded automatically from .env if present.
    In production, these should be injected via the container orchestrator.
    """

    PROJECT_NAME: str = "Investimentos API"
    API_V1_STR: str = "/api/v1"

    # ── SQLite mode (no external DB required) ──
    USE_SQLITE: bool = False

    # ── PostgreSQL connection parameters ──
    # Empty defaults keep USE_SQLITE=true usable without dummy PG variables;
    # the validator below restores fail-fast behaviour in PostgreSQL mode.
    POSTGRES_USER: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_SERVER: str = ""
    POSTGRES_DB: str = ""
    POSTGRES_PORT: int = 5432

    @model_validator(mode="after")
    def _require_pg_credentials_unless_sqlite(self) -> "Settings":
        """Fail fast if PostgreSQL credentials are missing in production mode."""
        if not self.USE_SQLITE:
            missing = [
                name
                for name in (
                    "POSTGRES_USER",
                    "POSTGRES_PASSWORD",
                    "POSTGRES_SERVER",
                    "POSTGRES_DB",
                )
                if not getattr(self, name)
            ]
            if missing:
                vars_list = ", ".join(missing)
                raise ValueError(
                    f"PostgreSQL mode requires these environment variables: "
                    f"{vars_list}.\n\n"
                    f"Set them in a .env file or export them before starting:\n"
                    f"       POSTGRES_USER=investimentos\n"
                    f"       POSTGRES_PASSWORD=investimentos\n"
                    f"       POSTGRES_SERVER=127.0.0.1\n"
                    f"       POSTGRES_DB=investimentos\n\n"
                    f"Or skip PostgreSQL entirely (in-memory SQLite):\n"
                    f"       USE_SQLITE=true uvicorn investimentos.main:app"
                )
        return self

    # ── Connection pool tuning ──
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30  # seconds to wait for a connection from the pool
    DB_POOL_RECYCLE: int = 1800  # seconds before a connection is recycled

    # ── CORS ──
    # Comma-separated list of allowed origins. "*" in dev, restrict in prod.
    CORS_ORIGINS: str = "*"

    # ── Logging ──
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_FILE_BACKUP_COUNT: int = 5

    # ── File import / export ──
    EXPORT_DIR: str = "data/exports"

    # ── External market-data providers ──
    ALPHAVANTAGE_API_KEY: str = "demo"
    ALPHAVANTAGE_BASE_URL: str = "https://www.alphavantage.co/query"
    MARKETSTACK_API_KEY: str = ""
    MARKETSTACK_BASE_URL: str = "https://api.marketstack.com/v1"
    EXTERNAL_API_TIMEOUT: float = 30.0  # seconds, single attempt per call

    @property
    def DATABASE_URL(self) -> str:
        """Construct the async database DSN.

        Returns an in-memory SQLite URL when ``USE_SQLITE`` is enabled,
        otherwise a PostgreSQL DSN for asyncpg.
        """
        if self.USE_SQLITE:
            return "sqlite+aiosqlite://"
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def alpha_vantage(self) -> ProviderConfig:
        return ProviderConfig(
            api_key=self.ALPHAVANTAGE_API_KEY,
            base_url=self.ALPHAVANTAGE_BASE_URL,
            timeout=self.EXTERNAL_API_TIMEOUT,
        )

    @property
    def marketstack(self) -> ProviderConfig:
        return ProviderConfig(
            api_key=self.MARKETSTACK_API_KEY,
            base_url=self.MARKETSTACK_BASE_URL,
            timeout=self.EXTERNAL_API_TIMEOUT,
        )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
