"""Shared FastAPI dependencies."""

from __future__ import annotations

import httpx
from fastapi import Depends

from appcast.config import ValidatorOptions
from appcast.remote.ssrf import SsrfGuard
from appcast.remote.verifier import RemoteVerifier

_options: ValidatorOptions | None = None
_http_client: httpx.AsyncClient | None = None
_remote_verifier: RemoteVerifier | None = None


def get_options() -> ValidatorOptions:
    """FastAPI dependency: return the loaded ValidatorOptions."""
    assert _options is not None, "ValidatorOptions not initialised"
    return _options


def get_http_client() -> httpx.AsyncClient:
    """FastAPI dependency: return the shared httpx client."""
    assert _http_client is not None, "HTTP client not initialised"
    return _http_client


def get_remote_verifier() -> RemoteVerifier:
    """FastAPI dependency: return the shared RemoteVerifier."""
    assert _remote_verifier is not None, "RemoteVerifier not initialised"
    return _remote_verifier


def get_ssrf_guard(verifier: RemoteVerifier = Depends(get_remote_verifier)) -> SsrfGuard:
    """FastAPI dependency: the guard used by the remote verifier."""
    return verifier.guard
