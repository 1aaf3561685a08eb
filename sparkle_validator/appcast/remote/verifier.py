"""Remote verifier: probe the feed's URLs and cross-check what they report."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import httpx

from appcast.document.models import Document
from appcast.remote.extractor import extract_targets
from appcast.remote.models import GuardVerdict, ProbeOutcome, RemoteOptions
from appcast.remote.prober import Prober
from appcast.remote.resolver import DnsOverHttpsResolver, Resolver
from appcast.remote.ssrf import SsrfGuard
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import make_diagnostic

logger = logging.getLogger(__name__)


def _outcome_diagnostics(outcome: ProbeOutcome) -> list[Diagnostic]:
    target = outcome.target
    url = target.url
    element = target.element
    found: list[Diagnostic] = []

    def add(diagnostic_id: str, message: str, fix: str | None = None) -> None:
        found.append(make_diagnostic(diagnostic_id, message, element, fix))

    if outcome.skipped:
        decision = outcome.decision
        if decision.verdict == GuardVerdict.unverifiable:
            add(
                "W026",
                f"Skipped URL check: {decision.reason}; host could not be verified ({url})",
                "Check that the hostname resolves publicly",
            )
        else:
            add(
                "W023",
                f"Skipped URL check: {decision.reason} ({url})",
                "Use a publicly accessible URL for production appcasts",
            )
        return found

    if urlsplit(url).scheme.lower() == "http":
        add(
            "W024",
            "URL uses insecure HTTP instead of HTTPS",
            f"Use HTTPS for secure downloads: https:{url[len('http:'):]}",
        )

    if outcome.error is not None:
        add("E027", f"Failed to fetch URL: {outcome.error}", f"Verify the URL is accessible: {url}")
    elif not outcome.succeeded:
        add(
            "E027",
            f"URL returned HTTP {outcome.status}: {url}",
            "Ensure the URL returns a successful status code",
        )

    declared = target.declared_length
    if outcome.succeeded and declared is not None:
        if outcome.content_length is None:
            add(
                "W022",
                "Server did not return Content-Length header, cannot verify declared "
                f"size of {declared} bytes",
            )
        elif outcome.content_length != declared:
            add(
                "E028",
                f"Content-Length mismatch: declared {declared} bytes, server reports "
                f"{outcome.content_length} bytes",
                f"Update the length attribute to {outcome.content_length}",
            )

    if outcome.redirected:
        add(
            "W021",
            f"URL redirects to: {outcome.final_url}",
            f"Consider using the final URL directly: {outcome.final_url}",
        )
    return found


class RemoteVerifier:
    """Probe every enclosure, delta and release notes URL in a document.

    The HTTP client is borrowed, not owned: callers open and close it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        options: RemoteOptions | None = None,
        resolver: Resolver | None = None,
    ) -> None:
        self._options = options or RemoteOptions()
        self._resolver = resolver or DnsOverHttpsResolver(client)
        self.guard = SsrfGuard(self._resolver)
        self._prober = Prober(client, self.guard, self._options)

    @property
    def options(self) -> RemoteOptions:
        return self._options

    async def verify(self, document: Document) -> list[Diagnostic]:
        targets = extract_targets(document)
        if not targets:
            return []
        logger.info("Checking %d URL(s)", len(targets))
        outcomes = await self._prober.probe_all(targets)

        diagnostics: list[Diagnostic] = []
        for outcome in outcomes:
            diagnostics.extend(_outcome_diagnostics(outcome))
        return diagnostics


async def verify_remote(
    document: Document,
    options: RemoteOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    resolver: Resolver | None = None,
) -> list[Diagnostic]:
    """One-shot remote check. Opens a client when none is given."""
    if client is not None:
        return await RemoteVerifier(client, options, resolver).verify(document)
    async with httpx.AsyncClient() as own_client:
        return await RemoteVerifier(own_client, options, resolver).verify(document)
