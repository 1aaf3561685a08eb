"""FastAPI application -- Sparkle appcast validator service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI

import appcast.deps as deps
from appcast import __version__
from appcast.api.fetch import router as fetch_router
from appcast.api.validate import router as validate_router
from appcast.config import configure_logging, load_options
from appcast.remote.resolver import DnsOverHttpsResolver
from appcast.remote.verifier import RemoteVerifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init resources on startup, clean up on shutdown."""
    options = load_options()
    configure_logging(logging.DEBUG if options.dev_mode else logging.INFO)
    logger.info("Sparkle validator starting with options: %s", options.model_dump())

    remote_options = options.remote_options()
    deps._options = options
    deps._http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(remote_options.timeout_seconds),
        headers={"User-Agent": options.user_agent},
    )
    resolver = DnsOverHttpsResolver(deps._http_client, options.doh_endpoint)
    deps._remote_verifier = RemoteVerifier(deps._http_client, remote_options, resolver)

    yield

    # Shutdown
    await deps._http_client.aclose()
    deps._options = None
    deps._http_client = None
    deps._remote_verifier = None


app = FastAPI(
    title="Sparkle Validator",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(validate_router)
app.include_router(fetch_router)
