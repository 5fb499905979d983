"""
Base class for the external market-data clients.

Each client owns one lazily created ``httpx.AsyncClient`` built from an
explicit :class:`ProviderConfig`. Every call is a single GET with a fixed
timeout; any failure (non-2xx status, transport error, undecodable body, or
a provider error payload) is logged with the request context and reported
to the caller as ``None``.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from investimentos.core.config import ProviderConfig

logger = logging.getLogger(__name__)

USER_AGENT = "InvestimentosAPI/1.0"


class ProviderClient:
    """Shared plumbing for Alpha Vantage and MarketStack."""

    PROVIDER_NAME: str = "unknown"

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        base = self._config.base_url.rstrip("/")
        return f"{base}/{path.lstrip('/')}" if path else base

    def _provider_error(self, payload: Any) -> Optional[str]:
        """Return the provider's error message if ``payload`` is an error body."""
        return None

    async def _get_json(self, path: str, params: Dict[str, Any], context: str) -> Optional[Any]:
        """
        GET ``path`` and return the decoded JSON body, or ``None`` on any failure.

        ``context`` (usually the symbol) is attached to every log line.
        """
        client = await self._get_client()
        extra = {"symbol": context}
        try:
            resp = await client.get(self._url(path), params=params)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "%s HTTP %d for %s: %s",
                self.PROVIDER_NAME,
                e.response.status_code,
                context,
                e.response.text[:200],
                extra=extra,
            )
            return None
        except httpx.HTTPError as e:
            logger.error("%s request failed for %s: %s", self.PROVIDER_NAME, context, e, extra=extra)
            return None
        except ValueError as e:
            logger.error("%s returned invalid JSON for %s: %s", self.PROVIDER_NAME, context, e, extra=extra)
            return None

        error = self._provider_error(payload)
        if error:
            logger.error("%s error for %s: %s", self.PROVIDER_NAME, context, error, extra=extra)
            return None
        return payload
