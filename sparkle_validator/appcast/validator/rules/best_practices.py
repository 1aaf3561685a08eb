"""Recommended but optional feed metadata."""

from __future__ import annotations

from appcast.document.helpers import (
    channel_and_items,
    child_element,
    sparkle_child_element,
    text_content,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    ENCLOSURE,
    LINK,
    SPARKLE_INFORMATIONAL_UPDATE,
    TITLE,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report


def _blank(parent: Element, name: str) -> bool:
    element = child_element(parent, name)
    return element is None or not text_content(element).strip()


def check_best_practices(document: Document, sink: list[Diagnostic]) -> None:
    """W001, W002, W014, W017."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    if _blank(channel, TITLE):
        report(
            sink,
            "W001",
            "Channel is missing a <title> element",
            channel,
            fix="Add a <title> element with your app name",
        )
    if _blank(channel, LINK):
        report(
            sink,
            "W014",
            "Channel is missing a <link> element",
            channel,
            fix="Add a <link> element with your app's homepage URL",
        )

    for item in items:
        if _blank(item, TITLE):
            report(
                sink,
                "W002",
                "Item is missing a <title> element",
                item,
                fix="Add a <title> element (e.g., 'Version 2.0')",
            )

        informational = sparkle_child_element(item, SPARKLE_INFORMATIONAL_UPDATE)
        if informational is not None and child_element(item, ENCLOSURE) is not None:
            report(
                sink,
                "W017",
                "Item has both <sparkle:informationalUpdate> and <enclosure>; "
                "informational updates typically should not include a download",
                informational,
                fix=(
                    "Remove <enclosure> if this is purely informational, or remove "
                    "<sparkle:informationalUpdate> if a download is intended"
                ),
            )
