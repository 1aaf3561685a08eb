"""Fetch proxy API -- download a remote appcast for the web front-end.

Only public http(s) hosts are fetched (every redirect hop included), the body
is capped at 1 MiB, and the response must look like XML.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from appcast.config import ValidatorOptions
from appcast.deps import get_http_client, get_options, get_ssrf_guard
from appcast.remote.ssrf import SsrfGuard
from appcast.sources import FEED_ACCEPT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["fetch"])

MAX_RESPONSE_SIZE = 1024 * 1024
MAX_REDIRECTS = 5

# text/plain is a common misconfiguration for feeds.
XML_CONTENT_TYPES = (
    "application/xml",
    "application/rss+xml",
    "application/atom+xml",
    "text/xml",
    "text/plain",
)

_XML_PREFIXES = ("<?xml", "<rss", "<feed", "<!DOCTYPE")

_TOO_LARGE = "Response too large (max 1MB). This doesn't look like an appcast file."


class FetchResponse(BaseModel):
    xml: str


def looks_like_xml(content: str) -> bool:
    return content.lstrip("\ufeff \t\r\n").startswith(_XML_PREFIXES)


async def _read_limited(resp: httpx.Response) -> str:
    if resp.is_error:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to fetch: {resp.status_code} {resp.reason_phrase}",
        )

    declared = resp.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > MAX_RESPONSE_SIZE:
        raise HTTPException(status_code=413, detail=_TOO_LARGE)

    content_type = resp.headers.get("content-type", "").lower()
    if content_type and not any(t in content_type for t in XML_CONTENT_TYPES):
        raise HTTPException(
            status_code=415,
            detail=f"Invalid content type: {content_type}. Expected XML.",
        )

    body = bytearray()
    async for chunk in resp.aiter_bytes():
        body.extend(chunk)
        if len(body) > MAX_RESPONSE_SIZE:
            raise HTTPException(status_code=413, detail=_TOO_LARGE)
    return body.decode(resp.encoding or "utf-8", errors="replace")


@router.get("/fetch", response_model=FetchResponse)
async def fetch_appcast(
    url: str = Query(..., min_length=1),
    guard: SsrfGuard = Depends(get_ssrf_guard),
    client: httpx.AsyncClient = Depends(get_http_client),
    options: ValidatorOptions = Depends(get_options),
) -> FetchResponse:
    """Fetch an appcast from a public URL."""
    headers = {"User-Agent": options.user_agent, "Accept": FEED_ACCEPT}
    xml: str | None = None
    try:
        for _ in range(MAX_REDIRECTS + 1):
            decision = await guard.check(url)
            if not decision.allowed:
                logger.info("Refusing to fetch %s: %s", url, decision.reason)
                raise HTTPException(status_code=400, detail=decision.reason)

            async with client.stream("GET", url, headers=headers, follow_redirects=False) as resp:
                if resp.is_redirect and resp.next_request is not None:
                    url = str(resp.next_request.url)
                    continue
                xml = await _read_limited(resp)
                break
    except httpx.HTTPError as e:
        logger.warning("Fetch of %s failed: %s", url, e)
        raise HTTPException(status_code=502, detail=f"Fetch failed: {e}") from e

    if xml is None:
        raise HTTPException(status_code=502, detail="Fetch failed: too many redirects")
    if not looks_like_xml(xml):
        raise HTTPException(
            status_code=415,
            detail="Response doesn't appear to be XML. Expected an appcast file.",
        )
    return FetchResponse(xml=xml)
