"""Concurrent HEAD prober.

Targets are probed in batches of ``concurrency``. Each probe has its own
timeout and catches its own failures, so one bad URL never stops the rest.
Redirects are followed by hand so that every hop passes the SSRF guard.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import socket
import ssl
from collections.abc import Iterator, Sequence
from urllib.parse import urlsplit

import httpx

from appcast.remote.models import GuardDecision, ProbeOutcome, RemoteOptions, UrlTarget
from appcast.remote.ssrf import SsrfGuard

logger = logging.getLogger(__name__)

# OpenSSL X509_V_ERR_* codes.
_CERT_EXPIRED = 10
_SELF_SIGNED = frozenset({18, 19})
_UNTRUSTED_ISSUER = frozenset({2, 20, 21})
_HOSTNAME_MISMATCH = 62


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _describe_certificate_error(exc: ssl.SSLCertVerificationError) -> str:
    code = getattr(exc, "verify_code", None)
    if code == _CERT_EXPIRED:
        return "TLS certificate has expired"
    if code in _SELF_SIGNED:
        return "TLS certificate is self-signed"
    if code == _HOSTNAME_MISMATCH:
        return "TLS certificate hostname mismatch"
    if code in _UNTRUSTED_ISSUER:
        return "TLS certificate verification failed (untrusted CA)"
    message = getattr(exc, "verify_message", None) or getattr(exc, "reason", None) or str(exc)
    return f"TLS error: {message}"


def describe_fault(exc: BaseException, url: str, timeout_ms: int | None = None) -> str:
    """Turn a request failure into a short human-readable reason."""
    for cause in _causes(exc):
        if isinstance(cause, (httpx.TimeoutException, asyncio.TimeoutError)):
            return f"Request timed out after {timeout_ms} ms" if timeout_ms else "Request timed out"
        if isinstance(cause, socket.gaierror):
            host = urlsplit(url).hostname or url
            return f'DNS lookup failed for "{host}"'
        if isinstance(cause, ssl.SSLCertVerificationError):
            return _describe_certificate_error(cause)
        if isinstance(cause, ssl.SSLError):
            return f"TLS error: {getattr(cause, 'reason', None) or cause}"
        if isinstance(cause, ConnectionRefusedError):
            return "Connection refused (no server listening)"
        if isinstance(cause, ConnectionResetError):
            return "Connection reset by server"
        if isinstance(cause, OSError) and cause.errno == errno.ENETUNREACH:
            return "Network unreachable"
        if isinstance(cause, OSError) and cause.errno == errno.EHOSTUNREACH:
            return "Host unreachable"

    message = str(exc).strip()
    return message or "Network request failed"


def _content_length(response: httpx.Response) -> int | None:
    value = response.headers.get("content-length", "").strip()
    return int(value) if value.isdigit() else None


class Prober:
    """HEAD every target through the guard."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        guard: SsrfGuard,
        options: RemoteOptions | None = None,
    ) -> None:
        self._client = client
        self._guard = guard
        self._options = options or RemoteOptions()

    async def _follow(self, outcome: ProbeOutcome) -> None:
        url = outcome.target.url
        headers = {"User-Agent": self._options.user_agent}

        for hop in range(self._options.max_redirects + 1):
            decision = await self._guard.check(url)
            if not decision.allowed:
                if hop:
                    decision = GuardDecision(
                        decision.verdict, f"redirect to {url} refused: {decision.reason}"
                    )
                outcome.decision = decision
                return

            response = await self._client.head(
                url,
                headers=headers,
                follow_redirects=False,
                timeout=self._options.timeout_seconds,
            )
            next_request = response.next_request
            if not response.is_redirect or next_request is None:
                outcome.status = response.status_code
                outcome.content_length = _content_length(response)
                if hop:
                    outcome.final_url = url
                return
            url = str(next_request.url)
            logger.debug("%s redirected to %s", outcome.target.url, url)

        outcome.error = f"Too many redirects (more than {self._options.max_redirects})"

    async def probe(self, target: UrlTarget) -> ProbeOutcome:
        outcome = ProbeOutcome(target=target)
        try:
            await asyncio.wait_for(self._follow(outcome), self._options.timeout_seconds)
        except asyncio.TimeoutError as e:
            outcome.error = describe_fault(e, target.url, self._options.timeout_ms)
        except httpx.HTTPError as e:
            outcome.error = describe_fault(e, target.url, self._options.timeout_ms)
        except Exception as e:
            logger.exception("Unexpected error probing %s", target.url)
            outcome.error = f"Unexpected error: {e}"
        return outcome

    async def probe_all(self, targets: Sequence[UrlTarget]) -> list[ProbeOutcome]:
        """Probe ``targets`` in batches; results keep the input order."""
        size = self._options.concurrency
        outcomes: list[ProbeOutcome] = []
        for start in range(0, len(targets), size):
            batch = targets[start : start + size]
            outcomes.extend(await asyncio.gather(*(self.probe(t) for t in batch)))
        logger.debug("Probed %d URL(s)", len(outcomes))
        return outcomes
