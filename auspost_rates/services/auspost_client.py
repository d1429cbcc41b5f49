"""
Australia Post API Client v1.0.0

Thin async transport for the Postage Assessment Calculator:
- GET with the AUTH-KEY header
- Error status codes still return their body, since the PAC reports
  validation problems (oversize, overweight) in the error payload
- Network failures raise CarrierTransportError

All external API calls are logged.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from auspost_rates.core.config import Settings
from auspost_rates.core.exceptions import CarrierTransportError

logger = logging.getLogger(__name__)

AUTH_HEADER = "AUTH-KEY"


@dataclass
class AusPostCredentials:
    """Australia Post API credentials."""
    api_key: str
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "AusPostCredentials":
        return cls(api_key=settings.AUSPOST_API_KEY, timeout=settings.AUSPOST_HTTP_TIMEOUT)


class AusPostClient:
    """
    Australia Post HTTP client.

    Usage:
        async with AusPostClient(credentials) as client:
            body = await client.fetch(url)
    """

    def __init__(
        self,
        credentials: AusPostCredentials,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.credentials = credentials
        self._http_client = http_client

    async def __aenter__(self):
        await self._get_http_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.credentials.timeout)
        return self._http_client

    async def close(self):
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch(self, url: str) -> str:
        """
        GET a PAC URL and return the response body.

        Raises:
            CarrierTransportError: no response was received at all
        """
        client = await self._get_http_client()

        try:
            response = await client.get(url, headers={AUTH_HEADER: self.credentials.api_key})
        except httpx.RequestError as e:
            logger.error(f"Australia Post request failed: {e}")
            raise CarrierTransportError(f"Network error contacting Australia Post: {e}", url=url) from e

        logger.debug(f"Australia Post GET {url} -> {response.status_code}")

        if response.status_code >= 400:
            # Body is handed on; the parser decides whether it is a carrier error
            logger.warning(f"Australia Post returned HTTP {response.status_code}: {response.text[:500]}")

        return response.text
