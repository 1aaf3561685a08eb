"""Structural rules: root, protocol version, namespace, channel and items.

Always runs first; the pipeline stops after it when the channel or item
structure is missing (see ``HALTING_IDS``).
"""

from __future__ import annotations

from appcast.document.helpers import child_elements
from appcast.document.models import Document
from appcast.validator.constants import (
    CHANNEL,
    ITEM,
    RSS_ROOT,
    RSS_VERSION,
    SPARKLE_NS,
    SPARKLE_PREFIX,
    is_sparkle_namespace,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report

# Errors after which deeper rules would only produce cascades.
HALTING_IDS = frozenset({"E002", "E005", "E007"})


def check_structure(document: Document, sink: list[Diagnostic]) -> None:
    root = document.root
    if root is None:
        return

    if root.name != RSS_ROOT:
        report(
            sink,
            "E002",
            f"Root element is <{root.qname}>, expected <rss>",
            root,
            fix="Change the root element to <rss>",
        )
        return

    version = root.attributes.get("version")
    if version is None or version.value != RSS_VERSION:
        message = (
            f'<rss> version is "{version.value}", expected "{RSS_VERSION}"'
            if version is not None and version.value
            else f'<rss> is missing version="{RSS_VERSION}" attribute'
        )
        report(
            sink,
            "E003",
            message,
            root,
            fix=f'Add version="{RSS_VERSION}" to the <rss> element',
        )

    ns_uri = document.namespaces.get(SPARKLE_PREFIX)
    if not ns_uri:
        report(
            sink,
            "E004",
            "Missing Sparkle namespace declaration (xmlns:sparkle)",
            root,
            fix=f'Add xmlns:sparkle="{SPARKLE_NS}" to the <rss> element',
        )
    elif ns_uri != SPARKLE_NS:
        if is_sparkle_namespace(ns_uri):
            report(
                sink,
                "W025",
                f'Sparkle namespace URI "{ns_uri}" is a non-canonical variant; '
                "Sparkle accepts it but other tools may not",
                root,
                fix=f'Use the canonical namespace URI "{SPARKLE_NS}"',
            )
        else:
            report(
                sink,
                "E026",
                f'Sparkle namespace URI is "{ns_uri}", expected "{SPARKLE_NS}"',
                root,
                fix=f'Change the namespace URI to "{SPARKLE_NS}"',
            )

    channels = child_elements(root, CHANNEL)
    if not channels:
        report(
            sink,
            "E005",
            "Missing <channel> element inside <rss>",
            root,
            fix="Add a <channel> element as a child of <rss>",
        )
        return
    if len(channels) > 1:
        report(
            sink,
            "E006",
            f"Found {len(channels)} <channel> elements, expected exactly 1",
            channels[1],
            fix="Remove extra <channel> elements; RSS 2.0 allows only one",
        )

    channel = channels[0]
    if not child_elements(channel, ITEM):
        report(
            sink,
            "E007",
            "No <item> elements found in <channel>",
            channel,
            fix="Add at least one <item> element to the channel",
        )


def halts_pipeline(sink: list[Diagnostic]) -> bool:
    """True once a structural error leaves no channel or items to inspect."""
    return any(d.id in HALTING_IDS for d in sink)
