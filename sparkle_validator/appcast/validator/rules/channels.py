"""Update channel naming rule."""

from __future__ import annotations

from appcast.document.helpers import channel_and_items, sparkle_child_element, text_content
from appcast.document.models import Document
from appcast.validator.constants import CHANNEL_NAME_RE, SPARKLE_CHANNEL
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report


def check_channels(document: Document, sink: list[Diagnostic]) -> None:
    """E019: channel names are simple identifiers."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    for item in items:
        channel_el = sparkle_child_element(item, SPARKLE_CHANNEL)
        if channel_el is None:
            continue
        name = text_content(channel_el).strip()
        if name and not CHANNEL_NAME_RE.match(name):
            report(
                sink,
                "E019",
                f'Invalid sparkle:channel name "{name}"; must contain only alphanumeric '
                "characters, hyphens, underscores, or dots",
                channel_el,
                fix="Use a simple identifier like 'beta', 'nightly', or 'release-candidate'",
            )
