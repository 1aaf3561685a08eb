"""Signature presence and well-formedness on every enclosure."""

from __future__ import annotations

from appcast.document.helpers import (
    channel_and_items,
    child_element,
    child_elements,
    sparkle_attr,
    sparkle_child_element,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    ATTR_DSA_SIGNATURE,
    ATTR_ED_SIGNATURE,
    ENCLOSURE,
    SPARKLE_DELTAS,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report
from appcast.validator.signature import check_signature


def _check_enclosure_signatures(enclosure: Element, sink: list[Diagnostic]) -> None:
    ed_signature = sparkle_attr(enclosure, ATTR_ED_SIGNATURE)
    dsa_signature = sparkle_attr(enclosure, ATTR_DSA_SIGNATURE)

    if ed_signature is None and dsa_signature is None:
        report(
            sink,
            "I006",
            "Enclosure has no signature (no edSignature or dsaSignature)",
            enclosure,
            fix="Add a sparkle:edSignature attribute for EdDSA signing",
        )
        return

    if ed_signature is not None:
        reason = check_signature(ed_signature, "ed25519")
        if reason:
            report(
                sink,
                "E030",
                f"Malformed sparkle:edSignature: {reason}",
                enclosure,
                fix="Regenerate the signature with sign_update and paste it unchanged",
            )

    if dsa_signature is not None:
        reason = check_signature(dsa_signature, "dsa")
        if reason:
            report(
                sink,
                "E031",
                f"Malformed sparkle:dsaSignature: {reason}",
                enclosure,
                fix="Regenerate the DSA signature or switch to sparkle:edSignature",
            )
        if ed_signature is None:
            report(
                sink,
                "W006",
                "Enclosure only has a DSA signature; DSA is deprecated in favor of EdDSA",
                enclosure,
                fix="Add a sparkle:edSignature attribute and consider removing dsaSignature",
            )


def check_signatures(document: Document, sink: list[Diagnostic]) -> None:
    """E030, E031, W006, I006 for main and delta enclosures."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    for item in items:
        enclosure = child_element(item, ENCLOSURE)
        if enclosure is not None:
            _check_enclosure_signatures(enclosure, sink)
        deltas = sparkle_child_element(item, SPARKLE_DELTAS)
        if deltas is not None:
            for delta in child_elements(deltas, ENCLOSURE):
                _check_enclosure_signatures(delta, sink)
