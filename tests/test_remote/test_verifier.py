"""Tests for the remote verifier diagnostics."""

from __future__ import annotations

import httpx
import pytest

from appcast.document.parser import parse_document
from appcast.remote.models import RemoteOptions
from appcast.remote.verifier import RemoteVerifier, verify_remote
from appcast.validator.pipeline import merge_diagnostics, validate_document

from conftest import FIXED_NOW, StubResolver, make_feed, make_item

RESOLVER = StubResolver({"dl.example": ["93.184.216.34"], "cdn.example": ["93.184.216.35"]})


async def _verify(xml: str, **kwargs) -> list:
    document = parse_document(xml).document
    async with httpx.AsyncClient() as client:
        verifier = RemoteVerifier(client, RemoteOptions(**kwargs), RESOLVER)
        return await verifier.verify(document)


def _ids(diagnostics) -> list[str]:
    return [d.id for d in diagnostics]


class TestRemoteVerifier:
    @pytest.mark.asyncio
    async def test_private_enclosure_is_skipped_without_request(self, httpx_mock) -> None:
        xml = make_feed(make_item(url="http://10.0.0.5/app.zip"))
        diagnostics = await _verify(xml)

        assert _ids(diagnostics) == ["W023"]
        assert "10.0.0.5" in diagnostics[0].message
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_unverifiable_host(self, httpx_mock) -> None:
        xml = make_feed(make_item(url="https://unknown.example/App_1.0.zip"))
        assert _ids(await _verify(xml)) == ["W026"]

    @pytest.mark.asyncio
    async def test_matching_length_is_clean(self, httpx_mock) -> None:
        httpx_mock.add_response(
            method="HEAD", url="https://dl.example/App_1.0.zip", headers={"Content-Length": "1024"}
        )
        xml = make_feed(make_item(url="https://dl.example/App_1.0.zip", length="1024"))
        assert await _verify(xml) == []

    @pytest.mark.asyncio
    async def test_length_mismatch(self, httpx_mock) -> None:
        httpx_mock.add_response(
            method="HEAD", url="https://dl.example/App_1.0.zip", headers={"Content-Length": "2048"}
        )
        xml = make_feed(make_item(url="https://dl.example/App_1.0.zip", length="1024"))
        diagnostics = await _verify(xml)
        assert _ids(diagnostics) == ["E028"]
        assert diagnostics[0].fix == "Update the length attribute to 2048"
        assert diagnostics[0].path == "rss > channel > item > enclosure"

    @pytest.mark.asyncio
    async def test_missing_content_length(self, httpx_mock) -> None:
        httpx_mock.add_response(method="HEAD", url="https://dl.example/App_1.0.zip")
        xml = make_feed(make_item(url="https://dl.example/App_1.0.zip", length="1024"))
        assert _ids(await _verify(xml)) == ["W022"]

    @pytest.mark.asyncio
    async def test_http_status_and_insecure_scheme(self, httpx_mock) -> None:
        httpx_mock.add_response(method="HEAD", url="http://dl.example/App_1.0.zip", status_code=404)
        xml = make_feed(make_item(url="http://dl.example/App_1.0.zip"))
        diagnostics = await _verify(xml)
        assert _ids(diagnostics) == ["W024", "E027"]
        assert diagnostics[1].message == "URL returned HTTP 404: http://dl.example/App_1.0.zip"

    @pytest.mark.asyncio
    async def test_timeout(self, httpx_mock) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), method="HEAD", url="https://dl.example/App_1.0.zip")
        xml = make_feed(make_item(url="https://dl.example/App_1.0.zip"))
        diagnostics = await _verify(xml, timeout_ms=250)
        assert _ids(diagnostics) == ["E027"]
        assert diagnostics[0].message == "Failed to fetch URL: Request timed out after 250 ms"

    @pytest.mark.asyncio
    async def test_redirect_is_reported(self, httpx_mock) -> None:
        httpx_mock.add_response(
            method="HEAD",
            url="https://cdn.example/App_1.0.zip",
            status_code=301,
            headers={"Location": "https://dl.example/App_1.0.zip"},
        )
        httpx_mock.add_response(
            method="HEAD", url="https://dl.example/App_1.0.zip", headers={"Content-Length": "1024"}
        )
        xml = make_feed(make_item(url="https://cdn.example/App_1.0.zip", length="1024"))
        diagnostics = await _verify(xml)
        assert _ids(diagnostics) == ["W021"]
        assert diagnostics[0].message == "URL redirects to: https://dl.example/App_1.0.zip"

    @pytest.mark.asyncio
    async def test_release_notes_and_deltas_are_probed(self, httpx_mock) -> None:
        httpx_mock.add_response(method="HEAD", url="https://dl.example/App_1.0.zip", headers={"Content-Length": "1024"})
        httpx_mock.add_response(method="HEAD", url="https://dl.example/90-100.delta", headers={"Content-Length": "10"})
        httpx_mock.add_response(method="HEAD", url="https://dl.example/notes.html", status_code=500)
        extra = (
            "<sparkle:releaseNotesLink>https://dl.example/notes.html</sparkle:releaseNotesLink>\n"
            '<sparkle:deltas><enclosure url="https://dl.example/90-100.delta" sparkle:deltaFrom="90" '
            'length="10" type="application/octet-stream"/></sparkle:deltas>\n'
        )
        xml = make_feed(make_item(url="https://dl.example/App_1.0.zip", extra=extra))
        diagnostics = await _verify(xml)
        assert _ids(diagnostics) == ["E027"]
        assert diagnostics[0].path == "rss > channel > item > sparkle:releaseNotesLink"

    @pytest.mark.asyncio
    async def test_merge_into_result(self, httpx_mock) -> None:
        xml = make_feed(make_item(url="http://10.0.0.5/app.zip"))
        parsed = parse_document(xml)
        result = validate_document(parsed.document, parsed.diagnostics, now=FIXED_NOW)
        async with httpx.AsyncClient() as client:
            remote = await verify_remote(parsed.document, client=client, resolver=RESOLVER)
        merged = merge_diagnostics(result, remote)
        assert [d.id for d in merged.diagnostics] == ["W023", "I001"]
        assert merged.valid is True
        assert merged.warning_count == 1
