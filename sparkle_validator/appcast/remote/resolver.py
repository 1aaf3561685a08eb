"""DNS-over-HTTPS lookups used by the SSRF guard."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_DOH_ENDPOINT = "https://cloudflare-dns.com/dns-query"

_A_RECORD = 1


class Resolver(Protocol):
    async def resolve(self, hostname: str) -> list[str] | None:
        """Return A-record addresses, or None when the lookup failed."""
        ...


class DnsOverHttpsResolver:
    """Resolve hostnames through a DoH JSON API (Cloudflare's by default)."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        endpoint: str = DEFAULT_DOH_ENDPOINT,
        timeout: float = 5.0,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._endpoint = endpoint
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
            self._owns_client = True
        return self._client

    async def resolve(self, hostname: str) -> list[str] | None:
        client = await self._get_client()
        try:
            resp = await client.get(
                self._endpoint,
                params={"name": hostname, "type": "A"},
                headers={"Accept": "application/dns-json"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("DNS-over-HTTPS lookup for %s failed: %s", hostname, e)
            return None

        if not isinstance(data, dict):
            return None
        addresses = [
            str(record["data"])
            for record in data.get("Answer") or []
            if isinstance(record, dict) and record.get("type") == _A_RECORD and "data" in record
        ]
        logger.debug("Resolved %s -> %s", hostname, addresses)
        return addresses

    async def close(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
