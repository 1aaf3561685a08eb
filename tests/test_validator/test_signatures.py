"""Tests for signature well-formedness."""

from __future__ import annotations

import base64

import pytest

from appcast.validator.pipeline import validate
from appcast.validator.signature import check_signature, decoded_length

from conftest import FIXED_NOW, make_feed, make_item, ids


def _encoded(size: int) -> str:
    return base64.b64encode(bytes(size)).decode()


class TestCheckSignature:
    def test_ed25519_exact_size(self) -> None:
        assert check_signature(_encoded(64), "ed25519") is None

    @pytest.mark.parametrize("size", [63, 65])
    def test_ed25519_wrong_size(self, size: int) -> None:
        reason = check_signature(_encoded(size), "ed25519")
        assert reason is not None
        assert str(size) in reason

    def test_whitespace_is_ignored(self) -> None:
        value = _encoded(64)
        wrapped = "\n  ".join(value[i : i + 20] for i in range(0, len(value), 20))
        assert check_signature(wrapped, "ed25519") is None

    def test_whitespace_does_not_hide_wrong_size(self) -> None:
        value = _encoded(65)
        assert check_signature(f" {value[:30]}\n{value[30:]} ", "ed25519") is not None

    def test_non_base64(self) -> None:
        assert "base64" in check_signature("not*base64!!", "ed25519")

    def test_bad_padding(self) -> None:
        assert "padding" in check_signature("AAAAA", "ed25519")

    def test_empty(self) -> None:
        assert check_signature("  ", "ed25519") == "signature is empty"

    @pytest.mark.parametrize("size,ok", [(39, False), (40, True), (46, True), (80, True), (81, False)])
    def test_dsa_range(self, size: int, ok: bool) -> None:
        assert (check_signature(_encoded(size), "dsa") is None) is ok

    def test_decoded_length(self) -> None:
        assert decoded_length(_encoded(64)) == 64
        assert decoded_length(_encoded(65)) == 65


class TestSignatureRules:
    def test_valid_signature_has_no_findings(self) -> None:
        result = validate(make_feed(make_item()), now=FIXED_NOW)
        assert not {"E030", "E031", "W006", "I006"} & set(ids(result))

    def test_malformed_ed_signature(self) -> None:
        xml = make_feed(make_item(signature=_encoded(63)))
        result = validate(xml, now=FIXED_NOW)
        assert "E030" in ids(result)
        assert result.valid is False

    def test_dsa_only(self) -> None:
        xml = make_feed(make_item(signature="", enclosure_attrs=f' sparkle:dsaSignature="{_encoded(46)}"'))
        result = validate(xml, now=FIXED_NOW)
        assert "W006" in ids(result)
        assert "E031" not in ids(result)

    def test_malformed_dsa(self) -> None:
        xml = make_feed(make_item(enclosure_attrs=f' sparkle:dsaSignature="{_encoded(10)}"'))
        assert "E031" in ids(validate(xml, now=FIXED_NOW))

    def test_no_signature_is_info(self) -> None:
        result = validate(make_feed(make_item(signature="")), now=FIXED_NOW)
        assert "I006" in ids(result)
        assert result.valid is True
