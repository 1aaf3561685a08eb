"""Tests for the concurrent HEAD prober and fault descriptions."""

from __future__ import annotations

import asyncio
import socket
import ssl

import httpx
import pytest

from appcast.document.models import Element
from appcast.remote.models import GuardVerdict, RemoteOptions, UrlTarget
from appcast.remote.prober import Prober, describe_fault
from appcast.remote.ssrf import SsrfGuard

from conftest import StubResolver

PUBLIC = {
    "dl.example": ["93.184.216.34"],
    "cdn.example": ["93.184.216.35"],
    "internal.example": ["10.0.0.7"],
}


def _target(url: str, length: int | None = None) -> UrlTarget:
    return UrlTarget(url=url, declared_length=length, element=Element(name="enclosure", qname="enclosure"))


def _connect_error(cause: BaseException) -> httpx.ConnectError:
    exc = httpx.ConnectError("connection failed")
    exc.__cause__ = cause
    return exc


def _cert_error(code: int) -> ssl.SSLCertVerificationError:
    err = ssl.SSLCertVerificationError(1, "certificate verify failed")
    err.verify_code = code
    err.verify_message = "certificate verify failed"
    return err


class TestDescribeFault:
    url = "https://dl.example/a.zip"

    def test_dns(self) -> None:
        exc = _connect_error(socket.gaierror(-2, "Name or service not known"))
        assert describe_fault(exc, self.url) == 'DNS lookup failed for "dl.example"'

    def test_refused(self) -> None:
        exc = _connect_error(ConnectionRefusedError(111, "Connection refused"))
        assert describe_fault(exc, self.url) == "Connection refused (no server listening)"

    def test_reset(self) -> None:
        exc = _connect_error(ConnectionResetError(104, "Connection reset by peer"))
        assert describe_fault(exc, self.url) == "Connection reset by server"

    def test_timeout(self) -> None:
        assert describe_fault(httpx.ReadTimeout("timed out"), self.url, 500) == "Request timed out after 500 ms"
        assert describe_fault(asyncio.TimeoutError(), self.url) == "Request timed out"

    @pytest.mark.parametrize(
        "code,expected",
        [
            (10, "TLS certificate has expired"),
            (18, "TLS certificate is self-signed"),
            (62, "TLS certificate hostname mismatch"),
            (20, "TLS certificate verification failed (untrusted CA)"),
        ],
    )
    def test_certificate_errors(self, code: int, expected: str) -> None:
        assert describe_fault(_connect_error(_cert_error(code)), self.url) == expected

    def test_generic(self) -> None:
        assert describe_fault(httpx.RemoteProtocolError("bad response"), self.url) == "bad response"
        assert describe_fault(httpx.ConnectError(""), self.url) == "Network request failed"


class TestProber:
    @pytest.mark.asyncio
    async def test_success_reads_content_length(self, httpx_mock) -> None:
        httpx_mock.add_response(
            method="HEAD", url="https://dl.example/a.zip", headers={"Content-Length": "1024"}
        )
        async with httpx.AsyncClient() as client:
            prober = Prober(client, SsrfGuard(StubResolver(PUBLIC)))
            outcome = await prober.probe(_target("https://dl.example/a.zip", 1024))

        assert outcome.succeeded
        assert outcome.content_length == 1024
        assert not outcome.redirected
        request = httpx_mock.get_request()
        assert request.headers["User-Agent"] == "sparkle-validator/1.1"

    @pytest.mark.asyncio
    async def test_redirects_are_followed_and_recorded(self, httpx_mock) -> None:
        httpx_mock.add_response(
            method="HEAD",
            url="https://cdn.example/a.zip",
            status_code=302,
            headers={"Location": "https://dl.example/a.zip"},
        )
        httpx_mock.add_response(method="HEAD", url="https://dl.example/a.zip", headers={"Content-Length": "5"})
        async with httpx.AsyncClient() as client:
            prober = Prober(client, SsrfGuard(StubResolver(PUBLIC)))
            outcome = await prober.probe(_target("https://cdn.example/a.zip"))

        assert outcome.status == 200
        assert outcome.final_url == "https://dl.example/a.zip"
        assert outcome.redirected

    @pytest.mark.asyncio
    async def test_redirect_to_private_host_is_refused(self, httpx_mock) -> None:
        httpx_mock.add_response(
            method="HEAD",
            url="https://cdn.example/a.zip",
            status_code=301,
            headers={"Location": "http://169.254.169.254/latest/meta-data/"},
        )
        async with httpx.AsyncClient() as client:
            prober = Prober(client, SsrfGuard(StubResolver(PUBLIC)))
            outcome = await prober.probe(_target("https://cdn.example/a.zip"))

        assert outcome.skipped
        assert outcome.decision.verdict == GuardVerdict.blocked
        assert "169.254.169.254" in outcome.decision.reason
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.asyncio
    async def test_too_many_redirects(self, httpx_mock) -> None:
        httpx_mock.add_response(
            method="HEAD",
            url="https://cdn.example/a.zip",
            status_code=302,
            headers={"Location": "https://dl.example/a.zip"},
        )
        httpx_mock.add_response(
            method="HEAD",
            url="https://dl.example/a.zip",
            status_code=302,
            headers={"Location": "https://cdn.example/b.zip"},
        )
        options = RemoteOptions(max_redirects=1)
        async with httpx.AsyncClient() as client:
            prober = Prober(client, SsrfGuard(StubResolver(PUBLIC)), options)
            outcome = await prober.probe(_target("https://cdn.example/a.zip"))

        assert outcome.error == "Too many redirects (more than 1)"

    @pytest.mark.asyncio
    async def test_network_fault_is_described(self, httpx_mock) -> None:
        httpx_mock.add_exception(
            _connect_error(ConnectionRefusedError(111, "Connection refused")),
            method="HEAD",
            url="https://dl.example/a.zip",
        )
        async with httpx.AsyncClient() as client:
            prober = Prober(client, SsrfGuard(StubResolver(PUBLIC)))
            outcome = await prober.probe(_target("https://dl.example/a.zip"))

        assert outcome.error == "Connection refused (no server listening)"

    @pytest.mark.asyncio
    async def test_failures_are_isolated(self, httpx_mock) -> None:
        class FlakyResolver(StubResolver):
            async def resolve(self, hostname: str) -> list[str] | None:
                if hostname == "boom.example":
                    raise RuntimeError("resolver crashed")
                return await super().resolve(hostname)

        httpx_mock.add_response(method="HEAD", url="https://dl.example/a.zip")
        httpx_mock.add_response(method="HEAD", url="https://cdn.example/b.zip", status_code=404)
        targets = [
            _target("https://dl.example/a.zip"),
            _target("https://boom.example/x.zip"),
            _target("https://internal.example/y.zip"),
            _target("https://cdn.example/b.zip"),
        ]
        async with httpx.AsyncClient() as client:
            prober = Prober(client, SsrfGuard(FlakyResolver(PUBLIC)), RemoteOptions(concurrency=2))
            outcomes = await prober.probe_all(targets)

        assert [o.target.url for o in outcomes] == [t.url for t in targets]
        assert outcomes[0].succeeded
        assert outcomes[1].error == "Unexpected error: resolver crashed"
        assert outcomes[2].skipped
        assert outcomes[3].status == 404
